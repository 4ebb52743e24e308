from __future__ import annotations

import os
import sys


def configure_utf8_console() -> None:
    """Ensure stdout/stderr use UTF-8 encoding on Windows consoles.

    makensis transcripts are relayed line by line to the console; a CP1252
    console would choke on the Unicode characters some scripts print.
    Safe no-op on non-Windows platforms and on environments where
    reconfigure is unavailable.
    """
    if os.name != "nt":
        return

    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if not callable(reconfigure):
            continue
        try:
            reconfigure(encoding="utf-8", errors="replace")
        except (AttributeError, OSError):
            # Redirected streams may not support reconfigure
            pass
