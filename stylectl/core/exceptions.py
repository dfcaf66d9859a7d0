"""
Custom exceptions for stylectl.

Provides specific exception types with associated exit codes
for each way a run can fail before any file is checked. All exceptions
support JSON serialization for CI integration via --json-errors flag.

Per-file failures (unreadable file, syntax error) are not exceptions:
they are recorded on the check result.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional


class ExitCode:
    """Standard exit codes for stylectl."""
    SUCCESS = 0
    GENERAL_ERROR = 1
    STYLE_ERRORS = 2
    CONFIG_NOT_FOUND = 3
    CONFIG_CORRUPTED = 4
    CONFIG_INVALID = 5
    PRESET_NOT_FOUND = 6
    REPORTER_NOT_FOUND = 7
    NO_INPUT_FILES = 8


class StyleCtlError(Exception):
    """Base class for failures that stop a run before checking starts."""

    @property
    def segments(self) -> tuple[str, ...]:
        """Message parts written to the error channel."""
        return (str(self),)

    @property
    def exit_code(self) -> int:
        return ExitCode.GENERAL_ERROR


@dataclass
class ConfigNotFound(StyleCtlError):
    """Raised when an explicitly requested configuration source is missing.

    Attributes:
        name: The source identifier exactly as requested
    """
    name: str

    def __str__(self) -> str:
        return " ".join(self.segments)

    @property
    def segments(self) -> tuple[str, ...]:
        return ("Configuration source", self.name, "was not found.")

    @property
    def exit_code(self) -> int:
        return ExitCode.CONFIG_NOT_FOUND


@dataclass
class ConfigCorrupted(StyleCtlError):
    """Raised when a configuration source exists but cannot be parsed.

    Attributes:
        source: Path of the source that failed to parse
        detail: Underlying parser diagnostic
    """
    source: str
    detail: str

    def __str__(self) -> str:
        return " ".join(self.segments)

    @property
    def segments(self) -> tuple[str, ...]:
        return ("Config source is corrupted -", self.detail)

    @property
    def exit_code(self) -> int:
        return ExitCode.CONFIG_CORRUPTED


@dataclass
class PresetNotFound(StyleCtlError):
    """Raised when a preset name is not in the preset registry."""
    name: str

    def __str__(self) -> str:
        return f'Preset "{self.name}" does not exist'

    @property
    def exit_code(self) -> int:
        return ExitCode.PRESET_NOT_FOUND


@dataclass
class ConfigInvalid(StyleCtlError):
    """Raised when the merged configuration breaks a schema constraint.

    Attributes:
        keys: Offending option key(s)
        detail: What is wrong with them
    """
    keys: list[str]
    detail: str

    def __str__(self) -> str:
        return f"Invalid configuration: {self.detail}"

    @property
    def exit_code(self) -> int:
        return ExitCode.CONFIG_INVALID


@dataclass
class ReporterNotFound(StyleCtlError):
    """Raised when a reporter reference resolves to nothing."""
    reference: str

    def __str__(self) -> str:
        return f'Reporter "{self.reference}" does not exist.'

    @property
    def exit_code(self) -> int:
        return ExitCode.REPORTER_NOT_FOUND


@dataclass
class NoInputFiles(StyleCtlError):
    """Raised when no (non-blank) input paths were given."""
    paths: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return "No input files specified. Try option --help for usage information."

    @property
    def exit_code(self) -> int:
        return ExitCode.NO_INPUT_FILES


def exception_to_json(exc: Exception, context: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Convert an exception to a JSON-serializable dictionary.

    Args:
        exc: The exception to convert
        context: Optional additional context (config path, reporter, etc.)

    Returns:
        JSON-serializable dict with error details
    """
    error_dict: dict[str, Any] = {
        "type": type(exc).__name__,
        "message": str(exc),
    }

    if isinstance(exc, StyleCtlError):
        error_dict["exit_code"] = exc.exit_code
    else:
        error_dict["exit_code"] = ExitCode.GENERAL_ERROR

    if isinstance(exc, ConfigNotFound):
        error_dict["name"] = exc.name

    elif isinstance(exc, ConfigCorrupted):
        error_dict["source"] = exc.source
        error_dict["detail"] = exc.detail

    elif isinstance(exc, PresetNotFound):
        error_dict["preset"] = exc.name

    elif isinstance(exc, ConfigInvalid):
        error_dict["keys"] = exc.keys
        error_dict["detail"] = exc.detail

    elif isinstance(exc, ReporterNotFound):
        error_dict["reporter"] = exc.reference

    if context:
        error_dict["context"] = context

    return {"error": error_dict}


def format_json_error(exc: Exception, context: Optional[dict[str, Any]] = None) -> str:
    """Format an exception as a JSON string.

    Args:
        exc: The exception to format
        context: Optional additional context

    Returns:
        JSON string with error details
    """
    return json.dumps(exception_to_json(exc, context), indent=2, default=str)
