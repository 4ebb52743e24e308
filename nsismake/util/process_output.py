"""Draining of a child process's combined output stream on a dedicated thread."""

import io
import locale
import logging
import threading
from typing import IO, Callable, Protocol

from nsismake.util.platform_detect import PlatformKind


logger = logging.getLogger(__name__)


class LineSink(Protocol):
    """Receives one line of process output at a time."""

    def __call__(self, line: str) -> None: ...


def default_output_encoding(platform: PlatformKind) -> str:
    """Encoding makensis uses for its console output on `platform`.

    makensis writes in the ANSI code page on Windows and UTF-8 elsewhere.
    """
    if platform.is_windows:
        return locale.getpreferredencoding(False)
    return "utf-8"


class ProcessOutputReader:
    """Dedicated reader that drains a process's stdout and pushes lines to a sink.

    Each complete line is passed to the sink on the reader thread before the
    next line is read. Reading stops at end of stream or on an I/O error; the
    exit code is the authoritative outcome so such errors are not reported.
    The caller waits for the process separately, and the reader doesn't
    signal completion, so trailing lines may arrive after the exit code is
    known.
    """

    def __init__(
        self,
        stream: IO[bytes],
        sink: LineSink | Callable[[str], None],
        encoding: str = "utf-8",
    ) -> None:
        self._stream = stream
        self._sink = sink
        self._encoding = encoding
        self._thread: threading.Thread | None = None

    def start(self) -> threading.Thread:
        """Start `run()` on a daemon thread and return it."""
        self._thread = threading.Thread(
            target=self.run, name="ProcessOutputReader", daemon=True
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: float | None = None) -> bool:
        """Wait up to `timeout` seconds for the reader; True if it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def thread(self) -> threading.Thread | None:
        return self._thread

    def run(self) -> None:
        """Read lines until end of stream and forward them to the sink."""
        reader = io.TextIOWrapper(
            self._stream, encoding=self._encoding, errors="replace", newline=None
        )
        try:
            for line in reader:
                self._sink(line.rstrip("\r\n"))
        except (OSError, ValueError):
            # A broken pipe or closed descriptor during shutdown is not a failure
            pass
        finally:
            try:
                reader.close()
            except (OSError, ValueError):
                pass


class TranscriptSink:
    """Line sink that logs compiler output and keeps an ordered transcript.

    Lines can be appended from the reader thread and the caller's thread,
    so appends are serialized.
    """

    def __init__(self, prefix: str = "[MAKENSIS] ", echo: bool = True) -> None:
        self.prefix = prefix
        self.echo = echo
        self._lines: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)
        if self.echo:
            logger.info(f"{self.prefix}{line}")

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
