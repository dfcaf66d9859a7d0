"""Unix reporter: ``path:line:column: message`` lines for editors and grep."""

from typing import Optional, TextIO

from stylectl.core.results import CheckResult
from stylectl.reporters.base import format_message, output_stream, summary_lines


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
            out.write(f"{file_result.path}:1:0: {file_result.failure}\n")
        for violation in file_result.violations:
            out.write(
                f"{file_result.path}:{violation.line}:{violation.column}: "
                f"{format_message(violation, verbose)}\n"
            )
    if result.has_errors:
        out.write("\n" + "\n".join(summary_lines(result)) + "\n")
