"""TOML configuration parsing for nsismake.

A configuration file looks like::

    [project]
    name = "My App"
    version = "1.2.0"
    group_id = "org.example"
    artifact_id = "my-app"
    build_directory = "target"

    [[project.licenses]]
    name = "MIT"

    [make]
    script_file = "src/main/nsis/setup.nsi"
    output_file = "my-app-setup.exe"
    verbosity = 3

    [make.compression]
    algorithm = "lzma"
    final = true

    [header]
    defines = { CHANNEL = "stable" }

Relative paths are resolved against the folder containing the file.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from nsismake.compiler.compression import (
    DEFAULT_LZMA_DICT_SIZE,
    CompressionSpec,
    CompressionType,
)
from nsismake.compiler.invocation import (
    DEFAULT_MAKENSIS_BIN,
    DEFAULT_SCRIPT_FILE,
    DEFAULT_VERBOSITY,
    InvocationConfig,
)
from nsismake.project.header_file import DEFAULT_HEADER_FILE_NAME
from nsismake.project.metadata import License, Organization, ProjectMetadata
from nsismake.util.exceptions import ConfigError


DEFAULT_CONFIG_FILE = "nsis.toml"
DEFAULT_BUILD_DIRECTORY = "target"


@dataclass(frozen=True)
class HeaderConfig:
    file: Path
    defines: Dict[str, str] = field(default_factory=dict)
    disabled: bool = False


@dataclass(frozen=True)
class NsisConfig:
    """Everything read from a configuration file."""

    project: ProjectMetadata
    make: InvocationConfig
    header: HeaderConfig


def load_config_toml(toml_path: Path) -> Dict[str, Any]:
    """Load and parse an nsismake TOML file."""
    try:
        with open(toml_path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found at {toml_path}")
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse configuration file {toml_path}: {e}")


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section  # type: ignore[return-value]


def _get(section: Dict[str, Any], key: str, kind: type, default: Any, where: str) -> Any:
    value = section.get(key, default)
    if value is None:
        return None
    # bool is an int subclass; don't accept true for a verbosity
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(
            f"{where}.{key} must be of type {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _path(base: Path, value: Optional[str]) -> Optional[Path]:
    if value is None:
        return None
    path = Path(value)
    return path if path.is_absolute() else base / path


def _string_table(section: Dict[str, Any], key: str, where: str) -> Dict[str, str]:
    table = section.get(key, {})
    if not isinstance(table, dict):
        raise ConfigError(f"{where}.{key} must be a table")
    return {str(k): str(v) for k, v in table.items()}  # type: ignore[union-attr]


def parse_project(section: Dict[str, Any], base: Path) -> ProjectMetadata:
    where = "project"
    build_directory = _path(
        base, _get(section, "build_directory", str, DEFAULT_BUILD_DIRECTORY, where)
    )
    assert build_directory is not None
    artifact_id = _get(section, "artifact_id", str, base.name, where)
    version = _get(section, "version", str, "0.0.0", where)

    licenses: list[License] = []
    for entry in section.get("licenses", []):
        if not isinstance(entry, dict) or "name" not in entry:
            raise ConfigError("project.licenses entries need a name")
        licenses.append(License(name=str(entry["name"]), url=entry.get("url")))

    organization: Optional[Organization] = None
    org_section = section.get("organization")
    if org_section is not None:
        if not isinstance(org_section, dict) or "name" not in org_section:
            raise ConfigError("project.organization needs a name")
        organization = Organization(
            name=str(org_section["name"]), url=org_section.get("url")
        )

    return ProjectMetadata(
        basedir=base,
        build_directory=build_directory,
        final_name=_get(section, "final_name", str, f"{artifact_id}-{version}", where),
        group_id=_get(section, "group_id", str, "", where),
        artifact_id=artifact_id,
        name=_get(section, "name", str, artifact_id, where),
        version=version,
        packaging=_get(section, "packaging", str, "exe", where),
        url=_get(section, "url", str, None, where),
        licenses=licenses,
        organization=organization,
    )


def parse_compression(section: Dict[str, Any]) -> Optional[CompressionSpec]:
    if not section:
        return None
    where = "make.compression"
    try:
        algorithm = CompressionType.parse(
            _get(section, "algorithm", str, CompressionType.ZLIB.value, where)
        )
    except ValueError as e:
        raise ConfigError(f"{where}.algorithm: {e}")
    return CompressionSpec(
        algorithm=algorithm,
        is_final=_get(section, "final", bool, False, where),
        is_solid=_get(section, "solid", bool, False, where),
        dictionary_size_kb=_get(
            section, "dictionary_size", int, DEFAULT_LZMA_DICT_SIZE, where
        ),
    )


def parse_make(
    section: Dict[str, Any], project: ProjectMetadata, header: HeaderConfig
) -> InvocationConfig:
    where = "make"
    base = project.basedir
    output_file = _get(section, "output_file", str, None, where)
    return InvocationConfig(
        basedir=base,
        build_directory=project.build_directory,
        executable_path=_get(section, "makensis_bin", str, DEFAULT_MAKENSIS_BIN, where),
        executable_path_windows=_get(section, "makensis_bin_windows", str, None, where),
        script_file=Path(_get(section, "script_file", str, DEFAULT_SCRIPT_FILE, where)),
        output_file=Path(output_file) if output_file is not None else None,
        working_folder=_path(base, _get(section, "make_folder", str, None, where)),
        verbosity=_get(section, "verbosity", int, DEFAULT_VERBOSITY, where),
        compression=parse_compression(_section(section, "compression")),
        inject_header_file=_get(section, "inject_header_file", bool, True, where),
        header_file=header.file,
        environment=_string_table(section, "environment", where),
        auto_detect_aux_dir=_get(section, "auto_nsis_dir", bool, True, where),
        aux_dir_override=_path(base, _get(section, "nsis_dir", str, None, where)),
        classifier=_get(section, "classifier", str, None, where),
        attach_artifact=_get(section, "attach_artifact", bool, True, where),
        disabled=_get(section, "disabled", bool, False, where),
    )


def parse_config(config: Dict[str, Any], base: Path) -> NsisConfig:
    """Turn a parsed TOML document into typed configuration."""
    project = parse_project(_section(config, "project"), base)

    header_section = _section(config, "header")
    header_file = _path(base, _get(header_section, "file", str, None, "header"))
    header = HeaderConfig(
        file=header_file or project.build_directory / DEFAULT_HEADER_FILE_NAME,
        defines=_string_table(header_section, "defines", "header"),
        disabled=_get(header_section, "disabled", bool, False, "header"),
    )

    make = parse_make(_section(config, "make"), project, header)
    return NsisConfig(project=project, make=make, header=header)


def load_config(toml_path: Path) -> NsisConfig:
    """Load a configuration file.

    Raises:
        ConfigError: If the file is missing, unreadable or has invalid values.
    """
    toml_path = toml_path.absolute()
    return parse_config(load_config_toml(toml_path), toml_path.parent)
