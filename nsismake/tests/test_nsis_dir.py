import logging
from pathlib import Path

import pytest

from nsismake.compiler import nsis_dir
from nsismake.compiler.nsis_dir import (
    NSISDIR,
    aux_dir_environment,
    candidate_nsis_dirs,
    detect_nsis_dir,
    is_nsis_dir,
)
from nsismake.util.platform_detect import PlatformKind


@pytest.fixture(autouse=True)
def no_system_dirs(monkeypatch, tmp_path):
    """Keep a real NSIS installation on the host out of the picture."""
    monkeypatch.setattr(nsis_dir, "_SYSTEM_NSIS_DIRS", [tmp_path / "usr-share-nsis"])
    monkeypatch.setattr(nsis_dir, "_HOMEBREW_NSIS_DIRS", [tmp_path / "homebrew-nsis"])


def _nsis_data(folder: Path) -> Path:
    (folder / "Stubs").mkdir(parents=True)
    return folder


class TestDetection:
    def test_is_nsis_dir(self, tmp_path):
        assert not is_nsis_dir(tmp_path)
        assert is_nsis_dir(_nsis_data(tmp_path / "nsis"))

    def test_windows_looks_next_to_the_binary(self, tmp_path):
        executable = tmp_path / "NSIS" / "makensis.exe"
        assert candidate_nsis_dirs(executable, PlatformKind.WINDOWS) == [tmp_path / "NSIS"]

    def test_posix_candidates(self, tmp_path):
        executable = tmp_path / "bin" / "makensis"
        assert candidate_nsis_dirs(executable, PlatformKind.LINUX) == [
            tmp_path / "share" / "nsis",
            tmp_path / "usr-share-nsis",
        ]
        assert candidate_nsis_dirs(executable, PlatformKind.MACOS)[-1] == (
            tmp_path / "homebrew-nsis"
        )

    def test_detects_share_folder_first(self, tmp_path):
        expected = _nsis_data(tmp_path / "share" / "nsis")
        _nsis_data(tmp_path / "usr-share-nsis")

        assert detect_nsis_dir(tmp_path / "bin" / "makensis", PlatformKind.LINUX) == expected

    def test_falls_back_to_system_folder(self, tmp_path):
        expected = _nsis_data(tmp_path / "usr-share-nsis")

        assert detect_nsis_dir(tmp_path / "bin" / "makensis", PlatformKind.LINUX) == expected

    def test_nothing_detected(self, tmp_path):
        assert detect_nsis_dir(tmp_path / "bin" / "makensis", PlatformKind.MACOS) is None


class TestAuxDirEnvironment:
    def test_override_wins(self, tmp_path):
        env = aux_dir_environment(
            tmp_path / "bin" / "makensis",
            PlatformKind.LINUX,
            auto_detect=False,
            override=tmp_path / "custom",
            env_overrides={NSISDIR: "/elsewhere"},
            environ={},
        )
        assert env == {NSISDIR: str(tmp_path / "custom")}

    def test_auto_detect_disabled(self, tmp_path):
        _nsis_data(tmp_path / "share" / "nsis")
        env = aux_dir_environment(
            tmp_path / "bin" / "makensis",
            PlatformKind.LINUX,
            auto_detect=False,
            override=None,
            env_overrides={},
            environ={},
        )
        assert env == {}

    def test_already_set(self, tmp_path):
        _nsis_data(tmp_path / "share" / "nsis")
        executable = tmp_path / "bin" / "makensis"

        assert (
            aux_dir_environment(
                executable, PlatformKind.LINUX, True, None, {NSISDIR: "/x"}, environ={}
            )
            == {}
        )
        assert (
            aux_dir_environment(
                executable, PlatformKind.LINUX, True, None, {}, environ={NSISDIR: "/x"}
            )
            == {}
        )

    def test_detected(self, tmp_path):
        data = _nsis_data(tmp_path / "share" / "nsis")
        env = aux_dir_environment(
            tmp_path / "bin" / "makensis", PlatformKind.LINUX, True, None, {}, environ={}
        )
        assert env == {NSISDIR: str(data)}

    def test_not_detected_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="nsismake.compiler.nsis_dir"):
            env = aux_dir_environment(
                tmp_path / "bin" / "makensis", PlatformKind.LINUX, True, None, {}, environ={}
            )
        assert env == {}
        assert "Unable to auto detect NSISDIR" in caplog.text
