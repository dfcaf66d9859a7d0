"""
Source loading for checked files.

Turns raw bytes into the structures rules work on: decoded text,
physical lines, the token stream and the module AST. Also extracts
``# stylectl: disable`` / ``# stylectl: enable`` comment directives.
"""

import ast
import io
import re
import tokenize
import warnings
from dataclasses import dataclass, field
from typing import Optional

# FSTRING_MIDDLE only exists on Python 3.12+
_STRING_BODY_TOKENS = {tokenize.STRING}
if hasattr(tokenize, "FSTRING_MIDDLE"):
    _STRING_BODY_TOKENS.add(tokenize.FSTRING_MIDDLE)

DIRECTIVE_PATTERN = re.compile(
    r"#\s*stylectl:\s*(?P<action>disable|enable)\b(?:\s*=\s*(?P<rules>[\w\s,]+))?"
)


class SourceParseError(Exception):
    """Raised when a file cannot be decoded, tokenized or parsed."""

    def __init__(self, message: str, line: int = 1, column: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, column {self.column})"


@dataclass(frozen=True)
class Directive:
    """An inline enable/disable comment."""
    line: int
    enabled: bool
    rules: Optional[frozenset[str]] = None  # None = every rule


@dataclass(frozen=True)
class SourceFile:
    """A decoded and parsed source file."""

    path: str
    text: str
    lines: tuple[str, ...]
    tokens: tuple[tokenize.TokenInfo, ...]
    tree: ast.Module
    directives: tuple[Directive, ...] = ()
    string_line_ends: frozenset[int] = field(default_factory=frozenset)

    def is_suppressed(self, rule: str, line: int) -> bool:
        """Check whether inline directives switch ``rule`` off at ``line``."""
        enabled = True
        for directive in self.directives:
            if directive.line > line:
                break
            if directive.rules is None or rule in directive.rules:
                enabled = directive.enabled
        return not enabled


def split_lines(text: str) -> tuple[str, ...]:
    """Split text into physical lines the way the tokenizer counts them."""
    lines = re.split(r"\r\n|\r|\n", text)
    if lines and lines[-1] == "":
        lines.pop()
    return tuple(lines)


def decode_source(data: bytes) -> str:
    """Decode source bytes honoring PEP 263 coding cookies and BOMs."""
    try:
        encoding, _ = tokenize.detect_encoding(io.BytesIO(data).readline)
        return data.decode(encoding)
    except (SyntaxError, LookupError, UnicodeDecodeError) as e:
        raise SourceParseError(f"Cannot decode source: {e}") from e


def parse_directives(tokens: tuple[tokenize.TokenInfo, ...]) -> tuple[Directive, ...]:
    """Collect inline directives from comment tokens, in line order."""
    directives = []
    for token in tokens:
        if token.type != tokenize.COMMENT:
            continue
        match = DIRECTIVE_PATTERN.match(token.string)
        if not match:
            continue
        rules = None
        if match.group("rules"):
            names = [name.strip() for name in match.group("rules").split(",")]
            rules = frozenset(name for name in names if name)
        directives.append(Directive(
            line=token.start[0],
            enabled=match.group("action") == "enable",
            rules=rules,
        ))
    return tuple(directives)


def _string_line_ends(tokens: tuple[tokenize.TokenInfo, ...]) -> frozenset[int]:
    lines: set[int] = set()
    for token in tokens:
        if token.type in _STRING_BODY_TOKENS and token.end[0] > token.start[0]:
            lines.update(range(token.start[0], token.end[0]))
    return frozenset(lines)


def parse_source(text: str, path: str) -> SourceFile:
    """Tokenize and parse ``text``.

    Raises:
        SourceParseError: If the text is not valid Python
    """
    try:
        with warnings.catch_warnings():
            # invalid escapes and similar are the checked file's business
            warnings.simplefilter("ignore", SyntaxWarning)
            warnings.simplefilter("ignore", DeprecationWarning)
            tree = ast.parse(text, filename=path)
    except SyntaxError as e:
        raise SourceParseError(
            f"Syntax error: {e.msg}", e.lineno or 1, max((e.offset or 1) - 1, 0)
        ) from e
    except ValueError as e:
        # source code string cannot contain null bytes
        raise SourceParseError(f"Syntax error: {e}") from e

    try:
        tokens = tuple(tokenize.generate_tokens(io.StringIO(text).readline))
    except (tokenize.TokenError, SyntaxError) as e:
        raise SourceParseError(f"Tokenize error: {e}") from e

    return SourceFile(
        path=path,
        text=text,
        lines=split_lines(text),
        tokens=tokens,
        tree=tree,
        directives=parse_directives(tokens),
        string_line_ends=_string_line_ends(tokens),
    )


def load_source(data: bytes, path: str) -> SourceFile:
    """Decode and parse raw file content."""
    return parse_source(decode_source(data), path)
