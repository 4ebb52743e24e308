"""nsismake: NSIS makensis build tooling

Module-level initialization to ensure consistent console behavior across tools.
"""

# Configure UTF-8 console output on Windows globally for nsismake tools
from nsismake.util.console_utf8 import configure_utf8_console


configure_utf8_console()

__version__ = "1.1.0"
