"""Output utilities.

Provides TTY-aware consoles for stylectl:
- stdout console: reporter output when no stream is given
- stderr console: the error channel

TTY detection (git-style):
- When stdout is a TTY: colors on by default
- When stdout is redirected: plain text, no colors
"""

import sys
from typing import Any, Optional

from rich.console import Console

from ..core.exceptions import ExitCode, format_json_error

# Stderr console - the error channel. stderr=True follows sys.stderr
# when it is swapped (CliRunner, pytest capture).
stderr_console = Console(
    stderr=True,
    soft_wrap=True,
    highlight=False,
)


def is_stdout_tty() -> bool:
    """Check if stdout is a TTY (decides the default for --colors)."""
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def print_error(*segments: str) -> None:
    """Default error sink: write one message line to stderr.

    Segments are joined with single spaces; rich markup in them is not
    interpreted, so file names and parser details print verbatim.
    """
    stderr_console.print(*segments, markup=False, highlight=False)


def discard_error(*segments: str) -> None:
    """Error sink that drops messages (used with --json-errors)."""


def print_json_error(exc: Exception, context: Optional[dict[str, Any]] = None) -> None:
    """Print a structured JSON error to stdout for CI consumption."""
    print(format_json_error(exc, context))


def handle_error(
    exc: Exception,
    json_errors: bool = False,
    context: Optional[dict[str, Any]] = None,
) -> int:
    """Handle an exception with appropriate output format.

    Args:
        exc: The exception to handle
        json_errors: If True, output JSON format; otherwise plain stderr
        context: Optional additional context (config, reporter, etc.)

    Returns:
        Exit code to use for sys.exit()
    """
    if json_errors:
        print_json_error(exc, context)
    else:
        segments = getattr(exc, "segments", None) or (str(exc),)
        print_error(*segments)

    if hasattr(exc, "exit_code"):
        return exc.exit_code
    return ExitCode.GENERAL_ERROR
