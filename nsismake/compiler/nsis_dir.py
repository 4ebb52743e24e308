"""Locating the NSIS data folder (NSISDIR) next to a makensis binary.

Distribution packages of makensis on Linux and macOS are frequently built
without a compiled-in data folder, and fail to find their stubs unless
NSISDIR points at it.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from nsismake.util.platform_detect import PlatformKind


logger = logging.getLogger(__name__)

NSISDIR = "NSISDIR"

_SYSTEM_NSIS_DIRS = [Path("/usr/share/nsis"), Path("/usr/local/share/nsis")]
_HOMEBREW_NSIS_DIRS = [Path("/opt/homebrew/share/nsis")]


def is_nsis_dir(folder: Path) -> bool:
    """An NSIS data folder has a `Stubs` sub folder."""
    try:
        return (folder / "Stubs").is_dir()
    except OSError:
        return False


def candidate_nsis_dirs(executable: Path, platform: PlatformKind) -> list[Path]:
    bin_dir = executable.parent
    if platform.is_windows:
        return [bin_dir]
    candidates = [bin_dir.parent / "share" / "nsis"]
    candidates.extend(_SYSTEM_NSIS_DIRS)
    if platform is PlatformKind.MACOS:
        candidates.extend(_HOMEBREW_NSIS_DIRS)
    return candidates


def detect_nsis_dir(executable: Path, platform: PlatformKind) -> Optional[Path]:
    for candidate in candidate_nsis_dirs(executable, platform):
        if is_nsis_dir(candidate):
            logger.debug(f"Detected {NSISDIR} {candidate}")
            return candidate
    return None


def aux_dir_environment(
    executable: Path,
    platform: PlatformKind,
    auto_detect: bool,
    override: Optional[Path],
    env_overrides: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Environment entries to add so makensis finds its data folder.

    An explicit override always wins. Auto detection is skipped when NSISDIR
    is already set, either in the configured variables or inherited. A failed
    detection is only a warning.
    """
    if override is not None:
        return {NSISDIR: str(override)}
    if not auto_detect:
        return {}
    inherited = os.environ if environ is None else environ
    if NSISDIR in env_overrides or inherited.get(NSISDIR):
        return {}
    detected = detect_nsis_dir(executable, platform)
    if detected is None:
        logger.warning(
            f"Unable to auto detect {NSISDIR} for {executable}, makensis may fail to find its data files"
        )
        return {}
    return {NSISDIR: str(detected)}
