"""Pytest configuration for the nsismake test suite."""

import os
import stat
from pathlib import Path

import pytest
from _pytest.config import Config
from _pytest.config.argparsing import Parser
from _pytest.nodes import Item


# Stand-in for makensis: echoes its arguments and NSISDIR, writes one line to
# stderr and exits with $STUB_EXIT.
MAKENSIS_STUB = """#!/bin/sh
echo "MakeNSIS stub"
for arg in "$@"; do
    printf 'ARG:%s\\n' "$arg"
done
printf 'NSISDIR:%s\\n' "$NSISDIR"
printf 'CWD:%s\\n' "$(pwd)"
echo "warning: stub output on stderr" 1>&2
exit ${STUB_EXIT:-0}
"""


def pytest_addoption(parser: Parser) -> None:
    """Add custom command line options."""
    parser.addoption(
        "--runslow",
        action="store_true",
        default=False,
        help="run slow tests (e.g., real makensis runs)",
    )


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")
    config.addinivalue_line(
        "markers", "posix: mark test as needing a POSIX shell for the makensis stub"
    )


def pytest_collection_modifyitems(config: Config, items: list[Item]) -> None:
    """Skip slow tests unless --runslow is given, and POSIX tests on Windows."""
    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    skip_posix = pytest.mark.skip(reason="needs a POSIX shell")
    for item in items:
        if "slow" in item.keywords and not config.getoption("--runslow"):
            item.add_marker(skip_slow)
        if "posix" in item.keywords and os.name == "nt":
            item.add_marker(skip_posix)


@pytest.fixture
def makensis_stub(tmp_path: Path) -> Path:
    """An executable shell script that behaves enough like makensis."""
    stub_dir = tmp_path / "nsis-bin"
    stub_dir.mkdir()
    stub = stub_dir / "makensis"
    stub.write_text(MAKENSIS_STUB, encoding="utf-8")
    stub.chmod(stub.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return stub


@pytest.fixture
def script_file(tmp_path: Path) -> Path:
    script = tmp_path / "setup.nsi"
    script.write_text(
        'Name "Test"\nSection\n    DetailPrint "hello"\nSectionEnd\n',
        encoding="utf-8",
    )
    return script
