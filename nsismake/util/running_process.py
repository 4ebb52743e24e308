"""Launching makensis and evaluating how it exited."""

import logging
import os
import re
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from nsismake.util.exceptions import CompilerFailedError, LaunchError
from nsismake.util.platform_detect import PlatformKind
from nsismake.util.process_tree import kill_process_tree


logger = logging.getLogger(__name__)

# Reported instead of a real exit code when the wait was interrupted
INTERRUPTED_EXIT_CODE = 130

_NEEDS_WINDOWS_QUOTES = re.compile(r"\s")


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one makensis run."""

    exit_code: int
    elapsed_millis: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def windows_command_line(command: Sequence[str]) -> str:
    """Join tokens into a Windows command line.

    Tokens with whitespace are wrapped in plain quotes and otherwise left
    alone: `format_string_argument` has already applied the escaping makensis
    expects, and `subprocess.list2cmdline` would escape it a second time.
    """
    parts: list[str] = []
    for token in command:
        if not token:
            parts.append('""')
        elif _NEEDS_WINDOWS_QUOTES.search(token) and not (
            token.startswith('"') and token.endswith('"')
        ):
            parts.append(f'"{token}"')
        else:
            parts.append(token)
    return " ".join(parts)


def build_environment(
    env_overrides: Mapping[str, str] | None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Inherited environment with `env_overrides` applied on top."""
    env = dict(os.environ if base is None else base)
    if env_overrides:
        env.update({str(k): str(v) for k, v in env_overrides.items()})
    return env


def launch_process(
    command: Sequence[str],
    cwd: Path,
    env_overrides: Mapping[str, str] | None,
    platform: PlatformKind,
) -> "subprocess.Popen[bytes]":
    """Start `command` in `cwd` with stderr merged into stdout.

    The working directory must already exist.

    Raises:
        LaunchError: If the OS couldn't start the process.
    """
    if not command:
        raise LaunchError("Unable to execute makensis: empty command")

    env = build_environment(env_overrides)
    popen_command: str | list[str]
    if platform.is_windows:
        popen_command = windows_command_line(command)
    else:
        popen_command = list(command)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"directory:  {cwd}")
        logger.debug(f"commands  {list(command)}")
        logger.debug("environment variables: ")
        for key, value in env.items():
            logger.debug(f"  {key}: {value}")

    try:
        return subprocess.Popen(
            popen_command,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,  # Merge stderr into stdout
            stdin=subprocess.DEVNULL,
            env=env,
        )
    except (OSError, ValueError) as e:
        raise LaunchError(f"Unable to execute makensis: {e}") from e


class ExitEvaluator:
    """Waits for a process and turns its exit status into a ProcessResult.

    Args:
        sink: Receives the completion line, so it lands in the same
            transcript as the compiler output.
        clock: Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        sink: Callable[[str], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sink = sink
        self._clock = clock

    def wait(
        self,
        process: "subprocess.Popen[Any]",
        started_at: float,
        on_exit: Callable[[], object] | None = None,
    ) -> ProcessResult:
        """Block until `process` terminates.

        An interrupted wait destroys the process tree and counts as a failed
        run rather than propagating the interrupt. `on_exit` runs once the
        process is gone, before anything is reported.

        Raises:
            CompilerFailedError: On a non-zero or interrupted exit.
        """
        try:
            status = process.wait()
        except KeyboardInterrupt:
            logger.warning(
                f"Interrupted while waiting for makensis (pid {process.pid}), destroying it"
            )
            kill_process_tree(process.pid)
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
            status = INTERRUPTED_EXIT_CODE

        elapsed_millis = int(round((self._clock() - started_at) * 1000))
        if on_exit is not None:
            on_exit()

        if status != 0:
            raise CompilerFailedError(status)

        self._sink(f"Execution completed in {elapsed_millis}ms")
        return ProcessResult(exit_code=status, elapsed_millis=elapsed_millis)
