"""
Whitespace and layout rules.

Lines whose end falls inside a multi-line string literal are skipped by
the line-based rules, since that whitespace is string content.
"""

import tokenize
from typing import Any

from ..core.source import SourceFile
from .base import Rule, RuleErrors, require_positive_int


class DisallowTrailingWhitespace(Rule):
    name = "disallowTrailingWhitespace"
    description = "Disallow whitespace at the end of lines"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for number, line in enumerate(source.lines, 1):
            if number in source.string_line_ends:
                continue
            stripped = line.rstrip(" \t\f")
            if stripped != line:
                errors.add("Illegal trailing whitespace", number, len(stripped))


class RequireLineFeedAtFileEnd(Rule):
    name = "requireLineFeedAtFileEnd"
    description = "Require a line feed at the end of the file"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        if source.text and not source.text.endswith(("\n", "\r")):
            last = len(source.lines)
            errors.add("Missing line feed at file end", last, len(source.lines[-1]))


class DisallowMixedSpacesAndTabs(Rule):
    name = "disallowMixedSpacesAndTabs"
    description = "Disallow mixing spaces and tabs in indentation"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for number, line in enumerate(source.lines, 1):
            if number - 1 in source.string_line_ends:
                continue
            indent = line[:len(line) - len(line.lstrip(" \t"))]
            if " " in indent and "\t" in indent:
                errors.add("Mixed spaces and tabs found", number, 0)


class MaximumLineLength(Rule):
    """Limit line length.

    Option: an integer, or ``{"value": int, "allowComments": bool}``.
    """

    name = "maximumLineLength"
    description = "Limit the number of characters per line"

    def configure(self, option: Any) -> None:
        self.allow_comments = False
        if isinstance(option, dict):
            unknown = set(option) - {"value", "allowComments"}
            if unknown:
                raise ValueError(f"{self.name}: unknown sub-options {', '.join(sorted(unknown))}")
            self.allow_comments = bool(option.get("allowComments", False))
            option = option.get("value")
        self.maximum = require_positive_int(self.name, option)

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for number, line in enumerate(source.lines, 1):
            if len(line) <= self.maximum:
                continue
            if self.allow_comments and line.lstrip().startswith("#"):
                continue
            errors.add(f"Line must be at most {self.maximum} characters", number, self.maximum)


class MaximumBlankLines(Rule):
    """Limit consecutive blank lines. Option: maximum allowed (integer)."""

    name = "maximumBlankLines"
    description = "Limit the number of consecutive blank lines"

    def configure(self, option: Any) -> None:
        if isinstance(option, bool) or not isinstance(option, int) or option < 0:
            raise ValueError(f"{self.name} option requires a non-negative integer")
        self.maximum = option

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        run = 0
        for number, line in enumerate(source.lines, 1):
            if line.strip() or number - 1 in source.string_line_ends:
                run = 0
                continue
            run += 1
            if run == self.maximum + 1:
                errors.add(
                    f"Expected at most {self.maximum} consecutive blank lines", number, 0
                )


class ValidateIndentation(Rule):
    """Require one indentation unit per block level.

    Option: number of spaces, or ``"\\t"`` for tabs.
    """

    name = "validateIndentation"
    description = "Validate indentation of nested blocks"

    def configure(self, option: Any) -> None:
        if option == "\t":
            self.unit = "\t"
            self.unit_name = "tab"
        else:
            size = require_positive_int(self.name, option, f'{self.name} ("\\t" or positive integer)')
            self.unit = " " * size
            self.unit_name = "space"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        depth = 0
        for token in source.tokens:
            if token.type == tokenize.DEDENT:
                depth = max(depth - 1, 0)
            elif token.type == tokenize.INDENT:
                depth += 1
                expected = self.unit * depth
                if token.string != expected:
                    errors.add(
                        f"Expected indentation of {len(expected)} "
                        f"{self.unit_name} characters",
                        token.start[0],
                        0,
                    )
