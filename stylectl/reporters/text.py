"""Plain text reporter: explained violations with source excerpts, no colors."""

from typing import Optional, TextIO

from stylectl.core.results import CheckResult
from stylectl.reporters.base import explain, output_stream, summary_lines


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
            out.write(f"{file_result.failure} at {file_result.path}\n\n")
        for violation in file_result.violations:
            out.write("\n".join(explain(file_result, violation, verbose)) + "\n\n")
    out.write("\n".join(summary_lines(result)) + "\n")
