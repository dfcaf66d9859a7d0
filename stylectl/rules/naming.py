"""Naming and statement-form rules that work on the AST."""

import ast
import re

from ..core.source import SourceFile
from .base import Rule, RuleErrors

SNAKE_CASE = re.compile(r"^_*[a-z0-9][a-z0-9_]*$|^_*$")
UPPER_CASE = re.compile(r"^_*[A-Z0-9][A-Z0-9_]*$")
CAP_WORDS = re.compile(r"^_*[A-Z][A-Za-z0-9]*$")


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


class RequireSnakeCaseIdentifiers(Rule):
    """Functions, arguments and assigned names must be snake_case or UPPER_CASE."""

    name = "requireSnakeCaseIdentifiers"
    description = "Require snake_case or UPPER_CASE identifiers"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for node in ast.walk(source.tree):
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                self._check_name(node.name, node.lineno, node.col_offset, errors)
            elif isinstance(node, ast.arg):
                self._check_name(node.arg, node.lineno, node.col_offset, errors)
            elif isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
                self._check_name(node.id, node.lineno, node.col_offset, errors)

    @staticmethod
    def _check_name(name: str, line: int, column: int, errors: RuleErrors) -> None:
        if _is_dunder(name) or SNAKE_CASE.match(name) or UPPER_CASE.match(name):
            return
        errors.add(f"All identifiers must be snake_case or UPPER_CASE: {name}", line, column)


class RequireCapitalizedClassNames(Rule):
    name = "requireCapitalizedClassNames"
    description = "Require CapWords class names"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for node in ast.walk(source.tree):
            if isinstance(node, ast.ClassDef) and not CAP_WORDS.match(node.name):
                errors.add(
                    f"Class names must be CapWords: {node.name}", node.lineno, node.col_offset
                )


class DisallowBareExcept(Rule):
    name = "disallowBareExcept"
    description = "Disallow except clauses without an exception type"

    def check(self, source: SourceFile, errors: RuleErrors) -> None:
        for node in ast.walk(source.tree):
            if isinstance(node, ast.ExceptHandler) and node.type is None:
                errors.add("Bare except clause", node.lineno, node.col_offset)
