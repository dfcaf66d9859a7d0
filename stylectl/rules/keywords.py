"""Keyword rules."""

import keyword
import tokenize
from typing import Any

from ..core.source import SourceFile
from .base import Rule, RuleErrors

_ALL_KEYWORDS = frozenset(keyword.kwlist) | frozenset(getattr(keyword, "softkwlist", ()))


class DisallowKeywords(Rule):
    """Disallow usage of the listed keywords.

    Option: list of keyword names, e.g. ``["global", "nonlocal"]``.
    """

    name = "disallowKeywords"
    description = "Disallow usage of specified keywords"

    def configure(self, option: Any) -> None:
        if not isinstance(option, list) or not option:
            raise TypeError(f"{self.name} option requires a non-empty list of keywords")
        unknown = [k for k in option if k not in _ALL_KEYWORDS]
        if unknown:
            raise ValueError(f"{self.name}: not Python keywords: {', '.join(map(str, unknown))}")
        self.keywords = frozenset(option)

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for token in source.tokens:
            if token.type == tokenize.NAME and token.string in self.keywords:
                errors.add(f"Illegal keyword: {token.string}", *token.start)
