#!/usr/bin/env python3
"""Exceptions raised by nsismake that need to bubble up to callers."""

from pathlib import Path
from typing import Optional


class NsisMakeException(Exception):
    """Base exception for nsismake failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(NsisMakeException):
    """Exception for missing or malformed configuration"""


class ScriptConflictError(NsisMakeException):
    """A script directive conflicts with a switch that is about to be injected"""

    def __init__(self, script_file: Path, line_number: int, directive: str):
        super().__init__(
            f'"{script_file}" line {line_number}: the script contains "{directive}" '
            f"which conflicts with the nsismake configuration. "
            f"Please remove it from the script or from the configuration."
        )
        self.script_file = script_file
        self.line_number = line_number
        self.directive = directive


class ResolutionError(NsisMakeException):
    """Exception for an executable that can't be located"""


class LaunchError(NsisMakeException):
    """Exception for a child process the OS refused to start"""


class CompilerFailedError(NsisMakeException):
    """Exception for a makensis run that didn't exit with 0"""

    def __init__(
        self,
        exit_code: int,
        message: Optional[str] = None,
    ):
        super().__init__(
            message
            or f"Execution of makensis compiler failed (exit code {exit_code}). See output above for details."
        )
        self.exit_code = exit_code


class OutputDirectoryError(NsisMakeException):
    """Exception for an output folder that couldn't be created"""


class HeaderFileError(NsisMakeException):
    """Exception for a header file that couldn't be written"""
