"""Comma, semicolon and quote mark rules."""

import tokenize
from typing import Any, Optional

from ..core.source import SourceFile
from .base import Rule, RuleErrors

_CLOSING = {")", "]", "}"}
_SKIPPED = {tokenize.NL, tokenize.NEWLINE, tokenize.COMMENT, tokenize.ENDMARKER}

_FSTRING_START = getattr(tokenize, "FSTRING_START", None)


def _next_token(source: SourceFile, index: int) -> Optional[tokenize.TokenInfo]:
    if index + 1 < len(source.tokens):
        return source.tokens[index + 1]
    return None


class RequireSpaceAfterComma(Rule):
    name = "requireSpaceAfterComma"
    description = "Require a space after commas"
    conflicts = ("disallowSpaceAfterComma",)

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for index, token in enumerate(source.tokens):
            if token.type != tokenize.OP or token.string != ",":
                continue
            following = _next_token(source, index)
            if following is None or following.type in _SKIPPED:
                continue
            if following.type == tokenize.OP and following.string in _CLOSING:
                continue
            if following.start == token.end:
                errors.add("Missing space after comma", *token.end)


class DisallowSpaceAfterComma(Rule):
    name = "disallowSpaceAfterComma"
    description = "Disallow spaces after commas"
    conflicts = ("requireSpaceAfterComma",)

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for index, token in enumerate(source.tokens):
            if token.type != tokenize.OP or token.string != ",":
                continue
            following = _next_token(source, index)
            if following is None or following.type in _SKIPPED:
                continue
            if following.start[0] == token.end[0] and following.start[1] > token.end[1]:
                errors.add("Illegal space after comma", *token.end)


class DisallowSemicolons(Rule):
    name = "disallowSemicolons"
    description = "Disallow statement-separating semicolons"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for token in source.tokens:
            if token.type == tokenize.OP and token.string == ";":
                errors.add("Illegal semicolon", *token.start)


def _split_string_token(text: str) -> tuple[str, str]:
    """Return (quote, body) of a string literal token, prefix removed."""
    literal = text.lstrip("rRbBuUfF")
    for quote in ('"""', "'''", '"', "'"):
        if literal.startswith(quote):
            return quote, literal[len(quote):-len(quote)] if literal.endswith(quote) else ""
    return "", literal


class ValidateQuoteMarks(Rule):
    """Enforce one quote mark for single-line string literals.

    Option: ``"'"``, ``'"'``, ``true`` (whichever comes first in the file),
    or ``{"mark": <one of those>, "escape": bool}``. With ``escape`` the
    other mark is allowed when the string contains the preferred one.
    Triple-quoted strings are not checked.
    """

    name = "validateQuoteMarks"
    description = "Require consistent quote marks"

    def configure(self, option: Any) -> None:
        self.escape = False
        if isinstance(option, dict):
            unknown = set(option) - {"mark", "escape"}
            if unknown:
                raise ValueError(f"{self.name}: unknown sub-options {', '.join(sorted(unknown))}")
            self.escape = bool(option.get("escape", False))
            option = option.get("mark")
        if option not in ('"', "'", True):
            raise ValueError(f"{self.name} option requires '\"', \"'\" or true")
        self.mark = option

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        mark = self.mark
        for token in source.tokens:
            if token.type == tokenize.STRING:
                quote, body = _split_string_token(token.string)
            elif _FSTRING_START is not None and token.type == _FSTRING_START:
                quote, body = _split_string_token(token.string)[0], ""
            else:
                continue
            if len(quote) != 1:
                continue
            if mark is True:
                mark = quote
                continue
            if quote == mark:
                continue
            if self.escape and mark in body:
                continue
            errors.add("Invalid quote mark found", *token.start)
