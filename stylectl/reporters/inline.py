"""Inline reporter: one line per violation, JSHint style."""

from typing import Optional, TextIO

from stylectl.core.results import CheckResult
from stylectl.reporters.base import format_message, output_stream


def render(
    result: CheckResult,
    *,
    verbose: bool = False,
    colors: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    out = output_stream(stream)
    for file_result in result.files:
        if file_result.failure is not None:
            out.write(f"{file_result.path}: {file_result.failure}\n")
        for violation in file_result.violations:
            out.write(
                f"{file_result.path}: line {violation.line}, col {violation.column}, "
                f"{format_message(violation, verbose)}\n"
            )
