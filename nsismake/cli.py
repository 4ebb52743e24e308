#!/usr/bin/env python3
"""Command line front end: `nsismake make` and `nsismake generate-header`."""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

from nsismake.compiler.make import MakeRunner
from nsismake.config import DEFAULT_CONFIG_FILE, NsisConfig, load_config
from nsismake.project.artifacts import ArtifactManifest
from nsismake.project.header_file import write_header_file
from nsismake.util.color_output import print_status, print_yellow
from nsismake.util.exceptions import NsisMakeException
from nsismake.util.platform_detect import current_platform
from nsismake.util.process_output import TranscriptSink


logger = logging.getLogger(__name__)

ARTIFACT_MANIFEST_NAME = "nsis-artifacts.json"


def parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nsismake", description="Build NSIS installers with makensis"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE),
        help=f"Configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    make = subparsers.add_parser("make", help="Compile the script into an installer")
    make.add_argument(
        "--skip", action="store_true", help="Don't run makensis (same as disabled)"
    )
    make.add_argument(
        "--no-header",
        action="store_true",
        help="Don't generate the header file before compiling",
    )
    make.add_argument(
        "--verbosity",
        type=int,
        default=None,
        help="makensis verbosity 0-4, out of range values are clamped",
    )

    subparsers.add_parser(
        "generate-header", help="Write the project header file only"
    )
    return parser.parse_args(args)


def generate_header(config: NsisConfig) -> None:
    if config.header.disabled:
        logger.info("NSIS generate-header: disabled, not doing anything")
        return
    write_header_file(
        config.header.file,
        config.project,
        classifier=config.make.classifier,
        defines=config.header.defines,
    )


def make(config: NsisConfig, args: argparse.Namespace) -> int:
    invocation = config.make
    if args.skip:
        invocation = dataclasses.replace(invocation, disabled=True)
    if args.verbosity is not None:
        invocation = dataclasses.replace(invocation, verbosity=args.verbosity)

    if not invocation.disabled and not args.no_header:
        generate_header(config)

    runner = MakeRunner(
        current_platform(),
        sink=TranscriptSink(),
        artifacts=ArtifactManifest(
            config.project.build_directory / ARTIFACT_MANIFEST_NAME
        ),
    )
    result = runner.make(invocation)
    if result is None:
        print_yellow("makensis was skipped")
    else:
        print_status("BUILD SUCCESS", f"makensis finished in {result.elapsed_millis}ms", True)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )
    try:
        config = load_config(args.config)
        if args.command == "generate-header":
            generate_header(config)
            return 0
        return make(config, args)
    except NsisMakeException as e:
        print_status("BUILD FAILURE", e.message, False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
