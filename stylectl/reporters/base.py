"""
Shared helpers for reporters.

Reporter modules import from here by absolute name (``stylectl.reporters.base``)
because they can also be loaded straight from a file path, outside the
package.

A reporter is any module exporting::

    def render(result, *, verbose=False, colors=False, stream=None) -> None

Verbose mode prefixes every message with its rule name and a colon; it
never changes the result itself.
"""

import sys
from typing import Optional, Protocol, TextIO

from rich.console import Console

from stylectl.core.results import CheckResult, FileResult, Violation

CONTEXT_LINES = 2
TAB_SIZE = 4
GUTTER = 8  # width of "{number:>6} |"


class Renderer(Protocol):
    """Contract for reporter ``render`` callables."""

    def __call__(
        self,
        result: CheckResult,
        *,
        verbose: bool = False,
        colors: bool = False,
        stream: Optional[TextIO] = None,
    ) -> None:
        ...


def output_stream(stream: Optional[TextIO]) -> TextIO:
    return stream if stream is not None else sys.stdout


def make_console(stream: Optional[TextIO], colors: bool) -> Console:
    """Rich console writing to ``stream``; emits ANSI codes only when ``colors``."""
    if colors:
        return Console(
            file=output_stream(stream),
            force_terminal=True,
            color_system="standard",
            no_color=False,
            soft_wrap=True,
            highlight=False,
            emoji=False,
        )
    return Console(
        file=output_stream(stream),
        color_system=None,
        soft_wrap=True,
        highlight=False,
        emoji=False,
    )


def format_message(violation: Violation, verbose: bool) -> str:
    """Violation message, prefixed with ``<rule>: `` in verbose mode."""
    if verbose:
        return f"{violation.rule}: {violation.message}"
    return violation.message


def excerpt(file_result: FileResult, violation: Violation) -> tuple[list[tuple[int, str]], int]:
    """Source lines around a violation and the display column of the pointer.

    Returns:
        ([(line_number, display_text), ...], pointer_column)
    """
    first = max(1, violation.line - CONTEXT_LINES)
    last = min(len(file_result.lines), violation.line + CONTEXT_LINES)
    lines = [
        (number, file_result.line(number).expandtabs(TAB_SIZE))
        for number in range(first, last + 1)
    ]
    raw = file_result.line(violation.line)
    pointer = len(raw[:violation.column].expandtabs(TAB_SIZE))
    return lines, pointer


def explain(file_result: FileResult, violation: Violation, verbose: bool) -> list[str]:
    """Plain-text explanation: header, numbered excerpt and a pointer line."""
    output = [f"{format_message(violation, verbose)} at {file_result.path} :"]
    lines, pointer = excerpt(file_result, violation)
    for number, text in lines:
        output.append(f"{number:>6} |{text}")
        if number == violation.line:
            output.append("-" * (GUTTER + pointer) + "^")
    return output


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def summary_lines(result: CheckResult) -> list[str]:
    """Closing lines shared by the human-readable reporters."""
    lines = []
    if result.error_count:
        lines.append(f"{plural(result.error_count, 'code style error')} found.")
    else:
        lines.append("No code style errors found.")
    failed = len(result.failed_files)
    if failed:
        lines.append(f"{plural(failed, 'file')} could not be checked.")
    if result.truncated:
        lines.append("Increase `maxErrors` configuration option value to see more errors.")
    return lines
