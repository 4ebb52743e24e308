#!/usr/bin/env python3
"""
Cross-platform colored terminal output utilities.

Used by the command line front end to report the overall outcome of a
makensis run, using the Rich library for consistent formatting across
Windows, macOS, and Linux.
"""

from typing import Optional

from rich.console import Console
from rich.text import Text


class ColorOutput:
    """
    Platform-neutral colored terminal output using Rich library.
    """

    def __init__(self, force_terminal: Optional[bool] = None):
        """
        Initialize ColorOutput.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None)
        """
        self.console = Console(force_terminal=force_terminal, highlight=False)

    def print_yellow(self, message: str) -> None:
        self.console.print(message, style="yellow")

    def print_status(self, label: str, message: str, success: bool) -> None:
        """Print a bold status label followed by a message."""
        color = "green" if success else "red"
        text = Text()
        text.append(f"{label} ", style=f"bright_{color} bold")
        text.append(message, style=color)
        self.console.print(text)


# Global instance for easy access
_color_output = ColorOutput()


def print_yellow(message: str) -> None:
    """Print message in yellow color (global function)."""
    _color_output.print_yellow(message)


def print_status(label: str, message: str, success: bool) -> None:
    _color_output.print_status(label, message, success)
