"""Assembling the makensis command line."""

import logging
from pathlib import Path
from typing import Optional

from nsismake.compiler.compression import CompressionSpec
from nsismake.compiler.invocation import (
    InvocationConfig,
    ResolvedOutputFile,
    clamp_verbosity,
    resolve_output_file,
)
from nsismake.compiler.preflight import PreflightChecks, ValidatedScript
from nsismake.util.arg_format import format_string_argument
from nsismake.util.exceptions import ResolutionError
from nsismake.util.path_resolver import PathResolver
from nsismake.util.platform_detect import PlatformKind


logger = logging.getLogger(__name__)


def configured_executable(config: InvocationConfig, platform: PlatformKind) -> str:
    if platform.is_windows and config.executable_path_windows:
        return config.executable_path_windows
    return config.executable_path


def resolve_executable(
    config: InvocationConfig,
    platform: PlatformKind,
    resolver: Optional[PathResolver] = None,
) -> Path:
    """Locate the makensis binary.

    Bare names are looked up in the OS path, anything with a folder component
    must exist as given (relative to basedir).

    Raises:
        ResolutionError: If the binary can't be found.
    """
    configured = configured_executable(config, platform)
    path = Path(configured)
    if path.is_absolute() or len(path.parts) > 1:
        candidate = path if path.is_absolute() else config.basedir / path
        if candidate.is_file():
            return candidate.absolute()
        raise ResolutionError(f'makensis binary "{candidate}" does not exist')

    if resolver is None:
        resolver = PathResolver(platform)
    resolved = resolver.resolve(path)
    if resolved is None:
        raise ResolutionError(
            f'Unable to find "{configured}" in the OS path, please install NSIS or configure the makensis binary'
        )
    return resolved


class CommandBuilder:
    """Builds the ordered makensis argument list for one invocation.

    The token order is fixed: binary, header include, output file, NOCD,
    verbosity, compressor switches, script file. The resolved output file is
    kept in `resolved_output_file` for the artifact hand-off.
    """

    def __init__(self, platform: PlatformKind) -> None:
        self.platform = platform
        self.resolved_output_file: Optional[ResolvedOutputFile] = None

    def option(self, name: str) -> str:
        return self.platform.option_prefix + name

    def header_include(self, config: InvocationConfig) -> Optional[str]:
        header = config.header_file
        if not config.inject_header_file or header is None:
            return None
        if not header.is_absolute():
            header = config.basedir / header
        if not header.is_file():
            logger.debug(f"Header file {header} doesn't exist, not including it")
            return None
        return self.option("X!include ") + format_string_argument(
            header.absolute(), False, self.platform
        )

    def compressor_options(self, compression: Optional[CompressionSpec]) -> list[str]:
        if compression is None or compression.is_default:
            return []
        options = [self.option("X") + compression.set_compressor_line()]
        if compression.emits_dictionary_size:
            options.append(
                self.option("XSetCompressorDictSize ")
                + str(compression.dictionary_size_kb)
            )
        return options

    def build(
        self,
        config: InvocationConfig,
        validated: ValidatedScript,
        executable: Path,
    ) -> list[str]:
        """Return the command tokens.

        Raises:
            ValueError: If `validated` doesn't belong to this configuration.
            OutputDirectoryError: If the output folder couldn't be created.
        """
        script = config.script_path
        if not isinstance(validated, ValidatedScript) or validated.path != script:
            raise ValueError(f"Script {script} has not been validated")
        if validated.checks != PreflightChecks.from_config(config):
            raise ValueError(f"Script {script} was validated with different checks")

        commands: list[str] = [str(executable)]

        include = self.header_include(config)
        if include is not None:
            commands.append(include)

        self.resolved_output_file = None
        if config.output_file is not None:
            self.resolved_output_file = resolve_output_file(
                config.output_file, config.build_directory, config.classifier
            )
            commands.append(
                self.option("XOutFile ")
                + format_string_argument(
                    self.resolved_output_file.absolute_path, False, self.platform
                )
            )

        if config.working_folder is not None:
            # makensis would otherwise change into the script's folder
            commands.append(self.option("NOCD"))

        commands.append(self.option(f"V{clamp_verbosity(config.verbosity)}"))
        commands.extend(self.compressor_options(config.compression))

        logger.debug(f"Processing Script file: {script}")
        commands.append(str(script))
        return commands
