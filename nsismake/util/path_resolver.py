"""Resolve executables from the OS search path the way a shell would."""

import logging
import os
from pathlib import Path
from typing import Mapping

from nsismake.util.arg_format import is_blank
from nsismake.util.platform_detect import PlatformKind


logger = logging.getLogger(__name__)

# Characters that can never be part of a Windows directory name
_WINDOWS_ILLEGAL_PATH_CHARS = set('<>"|?*')


def get_extension(file: Path | str | None) -> str | None:
    """Return the extension of the final path component, or None if it has none."""
    if file is None:
        return None
    name = Path(file).name
    if is_blank(name):
        return None
    point = name.rfind(".")
    if point == -1:
        return None
    return name[point + 1 :]


class PathResolver:
    """Searches `[cwd] + PATH` for a relative executable name.

    The environment and working directory are injectable so resolution can be
    exercised for a platform other than the host.
    """

    def __init__(
        self,
        platform: PlatformKind,
        environ: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.platform = platform
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.cwd = cwd

    def _parse_path_entry(self, entry: str) -> Path | None:
        entry = entry.strip()
        if len(entry) > 1 and entry.startswith('"') and entry.endswith('"'):
            entry = entry[1:-1]
        if is_blank(entry):
            return None
        invalid = "\x00" in entry
        if self.platform.is_windows:
            # Drive letter colons are legal; anything else from the set is not
            invalid = invalid or any(c in _WINDOWS_ILLEGAL_PATH_CHARS for c in entry)
        if invalid:
            logger.warning(
                f'Unable to resolve PATH element "{entry}" to a folder, it will be ignored'
            )
            return None
        return Path(entry)

    def get_os_path(self) -> list[Path]:
        """Return the PATH variable as a list of directories, skipping unusable entries."""
        os_path = self.environ.get("PATH")
        if is_blank(os_path):
            return []
        assert os_path is not None
        result: list[Path] = []
        for entry in os_path.split(self.platform.path_separator):
            path = self._parse_path_entry(entry)
            if path is not None:
                result.append(path)
        return result

    def get_windows_path_extensions(self) -> list[str]:
        """Return PATHEXT entries with their leading dots removed."""
        extensions = self.environ.get("PATHEXT")
        if is_blank(extensions):
            return []
        assert extensions is not None
        result: list[str] = []
        for extension in extensions.split(self.platform.path_separator):
            extension = extension.strip().lstrip(".")
            if extension:
                result.append(extension)
        return result

    def _candidate_extensions(self, relative_name: Path) -> list[str | None]:
        extensions: list[str | None] = []
        if self.platform.is_windows and get_extension(relative_name) is None:
            for extension in self.get_windows_path_extensions():
                extensions.append("." + extension)
                # Case sensitive file systems would miss "tool.exe" for ".EXE"
                if extension.lower() != extension:
                    extensions.append("." + extension.lower())
        # The untouched name is the last resort
        extensions.append(None)
        return extensions

    def resolve(self, relative_name: str | Path) -> Path | None:
        """Find `relative_name` in the current directory or the OS PATH.

        Every directory is tried for the first extension before moving on to
        the next extension.

        Returns:
            The canonicalized path of the first regular file found, or None.

        Raises:
            ValueError: If `relative_name` is absolute.
        """
        relative = Path(relative_name)
        if relative.is_absolute():
            raise ValueError(f"relative_name must be relative: {relative_name}")

        cwd = self.cwd if self.cwd is not None else Path.cwd()
        directories = [cwd.absolute()] + self.get_os_path()

        for extension in self._candidate_extensions(relative):
            for directory in directories:
                if extension is None:
                    candidate = directory / relative
                else:
                    candidate = directory / f"{relative}{extension}"
                try:
                    if not candidate.is_file():
                        continue
                except OSError:
                    continue
                logger.debug(f'Resolved "{candidate}" from "{relative}" using OS path')
                try:
                    return candidate.resolve(strict=True)
                except (OSError, RuntimeError) as e:
                    logger.warning(f'Could not get the real path of "{candidate}": {e}')
                    return candidate

        logger.debug(f'Failed to resolve "{relative}" using OS path')
        return None
