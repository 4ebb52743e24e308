"""Configuration of a single makensis invocation and output file resolution."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from typeguard import typechecked

from nsismake.compiler.compression import CompressionSpec
from nsismake.util.arg_format import is_blank
from nsismake.util.exceptions import OutputDirectoryError


logger = logging.getLogger(__name__)

MIN_VERBOSITY = 0
MAX_VERBOSITY = 4
DEFAULT_VERBOSITY = 2

DEFAULT_MAKENSIS_BIN = "makensis"
DEFAULT_SCRIPT_FILE = "setup.nsi"


def clamp_verbosity(level: int) -> int:
    """Clamp a verbosity level into the range makensis accepts."""
    return max(MIN_VERBOSITY, min(MAX_VERBOSITY, level))


def normalize_classifier(classifier: Optional[str]) -> str:
    """Turn a configured classifier into the suffix inserted into file names.

    Blank classifiers become "", anything else gets exactly one leading "-".
    """
    if is_blank(classifier):
        return ""
    assert classifier is not None
    classifier = classifier.strip()
    return classifier if classifier.startswith("-") else f"-{classifier}"


@typechecked
@dataclass(frozen=True)
class InvocationConfig:
    """Everything needed to run makensis once."""

    basedir: Path
    build_directory: Path
    executable_path: str = DEFAULT_MAKENSIS_BIN
    executable_path_windows: Optional[str] = None
    script_file: Path = Path(DEFAULT_SCRIPT_FILE)
    output_file: Optional[Path] = None
    working_folder: Optional[Path] = None
    verbosity: int = DEFAULT_VERBOSITY
    compression: Optional[CompressionSpec] = None
    inject_header_file: bool = True
    header_file: Optional[Path] = None
    environment: Dict[str, str] = field(default_factory=dict)
    auto_detect_aux_dir: bool = True
    aux_dir_override: Optional[Path] = None
    classifier: Optional[str] = None
    attach_artifact: bool = True
    disabled: bool = False

    @property
    def script_path(self) -> Path:
        """Absolute script path; relative scripts are relative to basedir."""
        script = self.script_file
        if not script.is_absolute():
            script = self.basedir / script
        return script.absolute()

    @property
    def process_directory(self) -> Path:
        """Directory makensis is started in."""
        if self.working_folder is None:
            return self.basedir
        folder = self.working_folder
        return folder if folder.is_absolute() else self.basedir / folder


@dataclass(frozen=True)
class ResolvedOutputFile:
    absolute_path: Path
    parent_directory_ensured: bool


def resolve_output_file(
    output_file: Path,
    build_directory: Path,
    classifier: Optional[str],
    ensure_parent: bool = True,
) -> ResolvedOutputFile:
    """Work out where the installer ends up.

    Relative paths are placed in `build_directory`; the classifier is inserted
    before the extension, so "app.exe" with classifier "x64" becomes
    "app-x64.exe".

    Raises:
        OutputDirectoryError: If `ensure_parent` is set and the parent folder
            couldn't be created.
    """
    suffix = normalize_classifier(classifier)
    path = output_file if output_file.is_absolute() else build_directory / output_file
    name = path.name
    point = name.rfind(".")
    if point > 0:
        name = name[:point] + suffix + name[point:]
    else:
        name = name + suffix
    target = path.with_name(name).absolute()

    if not ensure_parent:
        return ResolvedOutputFile(target, parent_directory_ensured=False)

    parent = target.parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"Can't create target directory {parent}: {e}"
            ) from e
        logger.debug(f"Created output directory {parent}")
    return ResolvedOutputFile(target, parent_directory_ensured=True)
