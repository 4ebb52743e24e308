"""
Header file generation

Writes an NSIS header with `!define`s describing the project, so scripts can
refer to ${PROJECT_VERSION} and friends instead of hard coding them. When
header injection is enabled the file is passed to makensis with `/X!include`.

Defines without a value are omitted. With several licenses the license
defines are numbered: PROJECT_LICENSE1, PROJECT_LICENSE1_URL, ...
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from nsismake.project.metadata import ProjectMetadata
from nsismake.util.arg_format import is_blank
from nsismake.util.exceptions import HeaderFileError


logger = logging.getLogger(__name__)

# makensis is a Windows tool at heart; keep headers CRLF everywhere
WINDOWS_LINE_SEPARATOR = "\r\n"

DEFAULT_HEADER_FILE_NAME = "project.nsh"


def _define(name: str, value: object) -> str:
    return f'!define {name} "{value}"'


def header_lines(
    metadata: ProjectMetadata,
    classifier: Optional[str] = None,
    defines: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> list[str]:
    """Return the header file content as a list of lines."""
    now = now or datetime.now()
    lines = [
        f"; Header file with project details for {metadata.name}",
        f"; Generated from project version {metadata.version} on {now:%Y-%m-%d %H:%M:%S}",
        "",
        _define("PROJECT_BASEDIR", metadata.basedir),
        _define("PROJECT_BUILD_DIR", metadata.build_directory),
        _define("PROJECT_FINAL_NAME", metadata.final_name),
    ]

    if not is_blank(classifier):
        lines.append(_define("PROJECT_CLASSIFIER", classifier))

    lines.append(_define("PROJECT_GROUP_ID", metadata.group_id))
    lines.append(_define("PROJECT_ARTIFACT_ID", metadata.artifact_id))
    lines.append(_define("PROJECT_NAME", metadata.name))
    lines.append(_define("PROJECT_VERSION", metadata.version))
    lines.append(_define("PROJECT_PACKAGING", metadata.packaging))

    if not is_blank(metadata.url):
        lines.append(_define("PROJECT_URL", metadata.url))

    licenses = metadata.licenses
    if len(licenses) == 1:
        lines.append(_define("PROJECT_LICENSE", licenses[0].name))
        if licenses[0].url is not None:
            lines.append(_define("PROJECT_LICENSE_URL", licenses[0].url))
    else:
        for i, entry in enumerate(licenses, start=1):
            lines.append(_define(f"PROJECT_LICENSE{i}", entry.name))
            if entry.url is not None:
                lines.append(_define(f"PROJECT_LICENSE{i}_URL", entry.url))

    organization = metadata.organization
    if organization is None:
        lines.append("; The project organization section is missing from your configuration")
    else:
        lines.append(_define("PROJECT_ORGANIZATION_NAME", organization.name))
        lines.append(_define("PROJECT_ORGANIZATION_URL", organization.url or ""))
        lines.append(
            _define(
                "PROJECT_REG_KEY",
                f"SOFTWARE\\{organization.name}\\{metadata.name}\\{metadata.version}",
            )
        )
        lines.append(
            _define(
                "PROJECT_REG_UNINSTALL_KEY",
                f"Software\\Microsoft\\Windows\\CurrentVersion\\Uninstall\\{metadata.name} {metadata.version}",
            )
        )
        lines.append(
            _define(
                "PROJECT_STARTMENU_FOLDER",
                f"$SMPROGRAMS\\{organization.name}\\{metadata.name} {metadata.version}",
            )
        )

    for key, value in (defines or {}).items():
        lines.append(_define(key.upper(), value))

    return lines


def write_header_file(
    path: Path,
    metadata: ProjectMetadata,
    classifier: Optional[str] = None,
    defines: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write the header file, creating its folder if needed.

    Raises:
        HeaderFileError: If the folder or file couldn't be written.
    """
    parent = path.parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise HeaderFileError(
                f'Couldn\'t create parent folder "{parent}" for header file "{path.name}": {e}'
            ) from e

    content = WINDOWS_LINE_SEPARATOR.join(
        header_lines(metadata, classifier, defines, now)
    )
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content + WINDOWS_LINE_SEPARATOR)
    except OSError as e:
        raise HeaderFileError(
            f'An error occurred while writing header file "{path}": {e}'
        ) from e

    logger.info(f"Generated header file {path}")
    return path
