"""
Check result data model.

A run produces one ``FileResult`` per checked file, aggregated into a
``CheckResult``. Every violation keeps the identifier of the rule that
produced it, whether or not a reporter prints it.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import ExitCode


@dataclass(frozen=True)
class Violation:
    """A single rule breach."""

    path: str
    line: int  # 1-based
    column: int  # 0-based
    rule: str
    message: str

    @property
    def sort_key(self) -> tuple[int, int, str]:
        return (self.line, self.column, self.rule)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rule": self.rule,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


@dataclass(frozen=True)
class FileResult:
    """Outcome of checking one file.

    ``failure`` is set when the file could not be read or parsed, or a
    rule raised while checking it; in that case ``violations`` is empty.
    ``omitted`` counts violations dropped by ``maxErrors``; a file with
    omitted violations is never clean.
    """

    path: str
    violations: tuple[Violation, ...] = ()
    lines: tuple[str, ...] = ()
    failure: Optional[str] = None
    omitted: int = 0

    @property
    def is_clean(self) -> bool:
        return not self.violations and not self.omitted and self.failure is None

    def line(self, number: int) -> str:
        """Return a 1-based source line, or an empty string when out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""

    def to_dict(self) -> dict:
        data: dict = {
            "path": self.path,
            "violations": [v.to_dict() for v in self.violations],
        }
        if self.omitted:
            data["omitted"] = self.omitted
        if self.failure is not None:
            data["failure"] = self.failure
        return data


@dataclass(frozen=True)
class CheckResult:
    """Aggregate over all checked files, in input-argument order."""

    files: tuple[FileResult, ...] = ()
    truncated: bool = False

    @property
    def error_count(self) -> int:
        return sum(len(f.violations) for f in self.files)

    @property
    def clean_count(self) -> int:
        return sum(1 for f in self.files if f.is_clean)

    @property
    def failed_files(self) -> tuple[FileResult, ...]:
        return tuple(f for f in self.files if f.failure is not None)

    @property
    def has_errors(self) -> bool:
        return any(not f.is_clean for f in self.files)

    @property
    def status(self) -> int:
        """Exit code for this result."""
        return ExitCode.STYLE_ERRORS if self.has_errors else ExitCode.SUCCESS

    def violations(self) -> list[Violation]:
        """All violations, file order then position order."""
        return [v for f in self.files for v in f.violations]

    def to_json(self) -> dict:
        """Format results as JSON for reporters and CI."""
        return {
            "passed": not self.has_errors,
            "error_count": self.error_count,
            "clean_count": self.clean_count,
            "truncated": self.truncated,
            "files": [f.to_dict() for f in self.files],
        }
