import logging
import os
import stat
from pathlib import Path

import pytest

from nsismake.util.path_resolver import PathResolver, get_extension
from nsismake.util.platform_detect import PlatformKind


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class TestGetExtension:
    def test_extensions(self):
        assert get_extension("tool.exe") == "exe"
        assert get_extension("archive.tar.gz") == "gz"
        assert get_extension(Path("dir.d") / "tool") is None
        assert get_extension("tool") is None
        assert get_extension(None) is None

    def test_trailing_dot_is_an_empty_extension(self):
        assert get_extension("tool.") == ""


class TestOsPath:
    def test_splits_on_platform_separator(self):
        resolver = PathResolver(
            PlatformKind.WINDOWS, environ={"PATH": "C:\\Tools;;D:\\Bin"}
        )
        assert resolver.get_os_path() == [Path("C:\\Tools"), Path("D:\\Bin")]

    def test_quoted_entries_are_unquoted(self):
        resolver = PathResolver(
            PlatformKind.WINDOWS, environ={"PATH": '"C:\\Program Files\\NSIS";C:\\x'}
        )
        assert resolver.get_os_path() == [Path("C:\\Program Files\\NSIS"), Path("C:\\x")]

    def test_invalid_entries_are_skipped_with_warning(self, caplog):
        resolver = PathResolver(
            PlatformKind.WINDOWS, environ={"PATH": "C:\\good;C:\\bad|dir"}
        )
        with caplog.at_level(logging.WARNING, logger="nsismake.util.path_resolver"):
            assert resolver.get_os_path() == [Path("C:\\good")]
        assert "C:\\bad|dir" in caplog.text

    def test_missing_path(self):
        assert PathResolver(PlatformKind.LINUX, environ={}).get_os_path() == []

    def test_path_extensions_lose_leading_dots(self):
        resolver = PathResolver(
            PlatformKind.WINDOWS, environ={"PATHEXT": ".COM;.EXE; .BAT ;"}
        )
        assert resolver.get_windows_path_extensions() == ["COM", "EXE", "BAT"]


class TestResolve:
    def test_found_in_second_directory_with_path_extension(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        expected = _touch(second / "toolX.exe")
        resolver = PathResolver(
            PlatformKind.WINDOWS,
            environ={"PATH": f"{first};{second}", "PATHEXT": "EXE;BAT"},
            cwd=tmp_path / "cwd",
        )

        resolved = resolver.resolve("toolX")

        assert resolved is not None
        assert resolved.is_absolute()
        assert resolved.samefile(expected)

    def test_extension_loop_is_outermost(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        _touch(first / "tool.bat")
        expected = _touch(second / "tool.exe")
        resolver = PathResolver(
            PlatformKind.WINDOWS,
            environ={"PATH": f"{first};{second}", "PATHEXT": "EXE;BAT"},
            cwd=tmp_path,
        )

        resolved = resolver.resolve("tool")

        assert resolved is not None
        assert resolved.samefile(expected)

    def test_bare_name_is_tried_last(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        _touch(first / "tool")
        expected = _touch(second / "tool.bat")
        resolver = PathResolver(
            PlatformKind.WINDOWS,
            environ={"PATH": f"{first};{second}", "PATHEXT": "EXE;BAT"},
            cwd=tmp_path,
        )

        resolved = resolver.resolve("tool")

        assert resolved is not None
        assert resolved.samefile(expected)

    def test_name_with_extension_is_not_extended(self, tmp_path):
        bin_dir = tmp_path / "bin"
        _touch(bin_dir / "tool.exe.exe")
        expected = _touch(bin_dir / "tool.exe")
        resolver = PathResolver(
            PlatformKind.WINDOWS,
            environ={"PATH": str(bin_dir), "PATHEXT": "EXE"},
            cwd=tmp_path,
        )

        resolved = resolver.resolve("tool.exe")

        assert resolved is not None
        assert resolved.samefile(expected)

    def test_no_extension_probing_off_windows(self, tmp_path):
        bin_dir = tmp_path / "bin"
        _touch(bin_dir / "tool.exe")
        resolver = PathResolver(
            PlatformKind.LINUX,
            environ={"PATH": str(bin_dir), "PATHEXT": "EXE"},
            cwd=tmp_path,
        )

        assert resolver.resolve("tool") is None

    def test_current_directory_comes_first(self, tmp_path):
        cwd = tmp_path / "cwd"
        bin_dir = tmp_path / "bin"
        expected = _touch(cwd / "makensis")
        _touch(bin_dir / "makensis")
        resolver = PathResolver(
            PlatformKind.LINUX, environ={"PATH": str(bin_dir)}, cwd=cwd
        )

        resolved = resolver.resolve("makensis")

        assert resolved is not None
        assert resolved.samefile(expected)

    def test_directories_are_not_matches(self, tmp_path):
        (tmp_path / "bin" / "makensis").mkdir(parents=True)
        resolver = PathResolver(
            PlatformKind.LINUX, environ={"PATH": str(tmp_path / "bin")}, cwd=tmp_path
        )

        assert resolver.resolve("makensis") is None

    def test_not_found(self, tmp_path):
        resolver = PathResolver(
            PlatformKind.LINUX, environ={"PATH": str(tmp_path)}, cwd=tmp_path
        )

        assert resolver.resolve("makensis") is None

    def test_absolute_name_is_rejected(self, tmp_path):
        resolver = PathResolver(PlatformKind.LINUX, environ={}, cwd=tmp_path)

        with pytest.raises(ValueError):
            resolver.resolve(tmp_path / "makensis")

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlinks_are_canonicalized(self, tmp_path):
        real = _touch(tmp_path / "real" / "makensis-3.09")
        link_dir = tmp_path / "bin"
        link_dir.mkdir()
        (link_dir / "makensis").symlink_to(real)
        resolver = PathResolver(
            PlatformKind.LINUX, environ={"PATH": str(link_dir)}, cwd=tmp_path
        )

        resolved = resolver.resolve("makensis")

        assert resolved == real.resolve()
