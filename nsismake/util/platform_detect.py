"""Host platform classification for makensis invocations."""

import platform
from enum import Enum


class PlatformKind(Enum):
    """The OS families relevant to locating and invoking makensis."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    OTHER = "other"

    @property
    def is_windows(self) -> bool:
        return self is PlatformKind.WINDOWS

    @property
    def option_prefix(self) -> str:
        """makensis accepts `/` switches on Windows and `-` switches elsewhere."""
        return "/" if self.is_windows else "-"

    @property
    def path_separator(self) -> str:
        """Separator used by PATH and PATHEXT on this platform."""
        return ";" if self.is_windows else ":"


def detect_platform(os_name: str | None) -> PlatformKind:
    """Classify an OS name such as `platform.system()` returns.

    Unrecognized or missing names map to PlatformKind.OTHER.
    """
    if not os_name:
        return PlatformKind.OTHER
    if os_name.startswith("Linux"):
        return PlatformKind.LINUX
    if os_name.startswith("Mac") or os_name.startswith("Darwin"):
        return PlatformKind.MACOS
    if os_name.startswith("Windows"):
        return PlatformKind.WINDOWS
    return PlatformKind.OTHER


def current_platform() -> PlatformKind:
    return detect_platform(platform.system())
