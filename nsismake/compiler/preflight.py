"""Scan an NSIS script for directives that clash with injected switches.

makensis processes `/X` switches before the script, so a script that sets
`OutFile` or `SetCompressor` itself would quietly fight with the values
passed on the command line. Catching it up front gives the user the exact
line to fix.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from nsismake.util.exceptions import ScriptConflictError


if TYPE_CHECKING:
    from nsismake.compiler.invocation import InvocationConfig


logger = logging.getLogger(__name__)

OUTPUT_FILE_DIRECTIVE = "OutFile"
FINAL_COMPRESSION_DIRECTIVE = "SetCompressor"


@dataclass(frozen=True)
class PreflightChecks:
    """Which conflicting directives to look for."""

    output_file: bool = False
    final_compression: bool = False

    @classmethod
    def from_config(cls, config: "InvocationConfig") -> "PreflightChecks":
        return cls(
            output_file=config.output_file is not None,
            final_compression=config.compression is not None
            and config.compression.is_final,
        )

    def directives(self) -> list[str]:
        result: list[str] = []
        if self.output_file:
            result.append(OUTPUT_FILE_DIRECTIVE)
        if self.final_compression:
            result.append(FINAL_COMPRESSION_DIRECTIVE)
        return result


@dataclass(frozen=True)
class ValidatedScript:
    """Proof that a script passed preflight; required by the command builder."""

    path: Path
    checks: PreflightChecks


def _directive_pattern(directive: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{re.escape(directive)}\b")


def validate_script(script_file: Path, checks: PreflightChecks) -> ValidatedScript:
    """Fail on the first line that starts with an enabled directive.

    An unreadable script is only logged: makensis will report the real
    problem when it tries to open it.

    Raises:
        ScriptConflictError: Naming the file, 1-based line and directive.
    """
    script_file = script_file.absolute()
    directives = checks.directives()
    if not directives:
        return ValidatedScript(script_file, checks)

    patterns = [(d, _directive_pattern(d)) for d in directives]
    try:
        with open(script_file, "r", encoding="utf-8", errors="replace") as f:
            for line_number, line in enumerate(f, start=1):
                for directive, pattern in patterns:
                    if pattern.match(line):
                        raise ScriptConflictError(script_file, line_number, directive)
    except OSError as e:
        logger.warning(f'Unable to read script file "{script_file}" for validation: {e}')

    return ValidatedScript(script_file, checks)
