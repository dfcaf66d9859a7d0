"""Summary reporter: a per-file table of violation counts."""

from typing import Optional, TextIO

from rich.table import Table

from stylectl.core.results import CheckResult
from stylectl.reporters.base import make_console, summary_lines


def render(
    result: CheckResult,
    *,
    verbose: bool = False,
    colors: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    console = make_console(stream, colors)

    table = Table(title="Code style summary", show_footer=True)
    table.add_column("File", footer="Total")
    table.add_column("Errors", justify="right", footer=str(result.error_count))
    if verbose:
        table.add_column("Rules")

    for file_result in result.files:
        if file_result.failure is not None:
            count = "[red]failed[/red]"
        elif not file_result.is_clean:
            count = f"[red]{len(file_result.violations)}[/red]"
        else:
            count = "[green]0[/green]"
        row = [file_result.path, count]
        if verbose:
            row.append(", ".join(sorted({v.rule for v in file_result.violations})))
        table.add_row(*row)

    console.print(table)
    for line in summary_lines(result):
        console.print(line, markup=False)
