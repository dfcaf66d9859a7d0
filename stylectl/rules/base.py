"""
Base classes for style rules.

A rule is configured once with the option value from the resolved
configuration, then checks each file, reporting breaches through an
``ErrorList`` scoped to the rule's name.
"""

from typing import Any, Optional

from ..core.results import Violation
from ..core.source import SourceFile


class ErrorList:
    """Violations collected for one file.

    Owned by a single per-file check task until the checker merges it.
    """

    def __init__(self, source: SourceFile):
        self.source = source
        self._violations: list[Violation] = []

    def scoped(self, rule: str) -> "RuleErrors":
        """Get an adder that tags every violation with ``rule``."""
        return RuleErrors(self, rule)

    def add(self, rule: str, message: str, line: int, column: int = 0) -> None:
        if self.source.is_suppressed(rule, line):
            return
        self._violations.append(Violation(
            path=self.source.path,
            line=line,
            column=column,
            rule=rule,
            message=message,
        ))

    def __len__(self) -> int:
        return len(self._violations)

    @property
    def violations(self) -> tuple[Violation, ...]:
        """Violations ordered by position."""
        return tuple(sorted(self._violations, key=lambda v: v.sort_key))


class RuleErrors:
    """Adder handed to ``Rule.check``."""

    def __init__(self, errors: ErrorList, rule: str):
        self._errors = errors
        self.rule = rule

    def add(self, message: str, line: int, column: int = 0) -> None:
        self._errors.add(self.rule, message, line, column)


class Rule:
    """Base class for rules.

    Subclasses set ``name`` (the configuration key), may list rules they
    cannot be combined with in ``conflicts``, and implement ``configure``
    and ``check``. ``configure`` raises ``ValueError`` or ``TypeError`` for
    unusable options.
    """

    name: str = ""
    description: str = ""
    conflicts: tuple[str, ...] = ()

    def configure(self, option: Any) -> None:
        require_true(self.name, option)

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        raise NotImplementedError


def require_true(name: str, option: Any) -> None:
    if option is not True:
        raise ValueError(f"{name} option requires true value")


def require_positive_int(name: str, option: Any, label: Optional[str] = None) -> int:
    if isinstance(option, bool) or not isinstance(option, int) or option <= 0:
        raise ValueError(f"{label or name} option requires a positive integer")
    return option
