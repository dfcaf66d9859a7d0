"""
Console reporter: explained violations with source excerpts, colorized
with rich when colors are on.
"""

from typing import Optional, TextIO

from rich.text import Text

from stylectl.core.results import CheckResult
from stylectl.reporters.base import (
    GUTTER,
    excerpt,
    format_message,
    make_console,
    summary_lines,
)


def render(
    result: CheckResult,
    *,
    verbose: bool = False,
    colors: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    console = make_console(stream, colors)

    for file_result in result.files:
        if file_result.failure is not None:
            header = Text()
            header.append(file_result.failure, style="bold red")
            header.append(" at ")
            header.append(file_result.path, style="bold")
            console.print(header)
            console.print()

        for violation in file_result.violations:
            header = Text()
            if verbose:
                header.append(f"{violation.rule}: ", style="bold cyan")
            header.append(format_message(violation, False), style="green")
            header.append(" at ")
            header.append(file_result.path, style="bold")
            header.append(" :")
            console.print(header)

            lines, pointer = excerpt(file_result, violation)
            for number, text in lines:
                line = Text(f"{number:>6} |", style="dim")
                line.append(text)
                console.print(line)
                if number == violation.line:
                    console.print(Text("-" * (GUTTER + pointer) + "^", style="bold red"))
            console.print()

    style = "red" if result.has_errors else "green"
    for line in summary_lines(result):
        console.print(Text(line, style=style))
