"""
Configuration resolution for stylectl.

Loads a configuration source (``.stylectl.yaml``/``.yml``/``.json``) from
an explicit path or by discovery, expands its preset, and merges the
layers in increasing precedence:

    built-in defaults < preset < configuration source < invocation

Each layer is a sparse patch; later layers overwrite identical keys.
The result is a frozen ``ResolvedConfig``.
"""

import copy
import fnmatch
import json
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import yaml

from ..rules import RuleSet, is_enabled
from ..utils.output import is_stdout_tty
from .exceptions import ConfigCorrupted, ConfigInvalid, ConfigNotFound
from .logging import get_logger
from .presets import expand_preset

logger = get_logger(__name__)

CONFIG_FILENAMES = (".stylectl.yaml", ".stylectl.yml", ".stylectl.json")

# Directories never worth checking
DEFAULT_EXCLUDES = (
    ".git",
    ".venv",
    "venv",
    ".env",
    "node_modules",
    "__pycache__",
    ".tox",
    ".nox",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    "*.egg-info",
    ".eggs",
)

DEFAULTS: Mapping[str, Any] = MappingProxyType({
    "fileExtensions": [".py"],
    "excludeFiles": list(DEFAULT_EXCLUDES),
    "maxErrors": None,
    "verbose": False,
    "colors": None,
    "reporter": None,
})

# Keys that configure the run rather than a rule
RESERVED_KEYS = frozenset({
    "preset",
    "excludeFiles",
    "fileExtensions",
    "maxErrors",
    "verbose",
    "colors",
    "reporter",
    "overrides",
    "additionalRules",
})


@dataclass
class Invocation:
    """Parameters of one run, as handed over by the front end."""
    args: list[str] = field(default_factory=list)
    config: Optional[str] = None
    preset: Optional[str] = None
    verbose: Optional[bool] = None
    colors: Optional[bool] = None
    reporter: Optional[str] = None
    max_errors: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Invocation":
        """Create an Invocation from option names as a CLI would spell them.

        Accepts ``no-colors``/``no_colors`` and ``max-errors``/``maxErrors``.
        An explicit ``colors`` value wins over ``no-colors``.
        """
        normalized = {key.replace("-", "_"): value for key, value in data.items()}

        colors = normalized.get("colors")
        if colors is None and normalized.get("no_colors"):
            colors = False

        max_errors = normalized.get("max_errors", normalized.get("maxErrors"))

        return cls(
            args=list(normalized.get("args") or []),
            config=normalized.get("config"),
            preset=normalized.get("preset"),
            verbose=normalized.get("verbose"),
            colors=colors,
            reporter=normalized.get("reporter"),
            max_errors=max_errors,
        )

    def overrides(self) -> dict[str, Any]:
        """The sparse patch this invocation applies on top of the source."""
        patch: dict[str, Any] = {}
        if self.verbose is not None:
            patch["verbose"] = bool(self.verbose)
        if self.colors is not None:
            patch["colors"] = bool(self.colors)
        if self.reporter is not None:
            patch["reporter"] = self.reporter
        if self.max_errors is not None:
            patch["maxErrors"] = self.max_errors
        return patch


def matches_glob(relative: str, pattern: str) -> bool:
    """Match a posix relative path against a glob (``**/`` also matches the top level)."""
    if fnmatch.fnmatch(relative, pattern):
        return True
    return pattern.startswith("**/") and fnmatch.fnmatch(relative, pattern[3:])


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully merged, read-only configuration for one run."""

    rules: Mapping[str, Any]
    preset: Optional[str] = None
    verbose: bool = False
    colors: bool = False
    reporter: Optional[str] = None
    max_errors: Optional[int] = None
    exclude_files: tuple[str, ...] = ()
    file_extensions: tuple[str, ...] = (".py",)
    overrides: tuple[tuple[str, Mapping[str, Any]], ...] = ()
    additional_rules: tuple[Path, ...] = ()
    source_path: Optional[Path] = None
    base_dir: Path = field(default_factory=Path.cwd)
    rule_set: RuleSet = field(default_factory=RuleSet, compare=False, repr=False)

    def relative_path(self, path: Union[str, PurePath]) -> str:
        """Posix path relative to the config's base directory, when inside it."""
        candidate = Path(path)
        if candidate.is_absolute():
            try:
                candidate = candidate.relative_to(self.base_dir)
            except ValueError:
                pass
        else:
            try:
                candidate = (Path.cwd() / candidate).relative_to(self.base_dir)
            except ValueError:
                pass
        return candidate.as_posix()

    def is_excluded(self, path: Union[str, PurePath]) -> bool:
        """Check a path against ``excludeFiles``.

        A pattern matches either the whole relative path or any single
        component of it.
        """
        relative = self.relative_path(path)
        parts = PurePath(relative).parts
        for pattern in self.exclude_files:
            if matches_glob(relative, pattern):
                return True
            if "/" not in pattern and any(fnmatch.fnmatch(part, pattern) for part in parts):
                return True
        return False

    def excludes_directory(self, path: Union[str, PurePath]) -> bool:
        """Check whether ``excludeFiles`` excludes everything below a directory.

        Only patterns that match every descendant qualify: a bare name
        matching the directory itself, or a pattern ending in ``*`` that
        already matches the directory prefix.
        """
        relative = self.relative_path(path)
        name = PurePath(relative).name
        for pattern in self.exclude_files:
            if "/" not in pattern and fnmatch.fnmatch(name, pattern):
                return True
            if pattern.endswith("*") and matches_glob(relative + "/", pattern):
                return True
        return False

    def accepts_extension(self, path: Union[str, PurePath]) -> bool:
        if "*" in self.file_extensions:
            return True
        return PurePath(path).suffix.lower() in self.file_extensions

    def rules_for(self, path: Union[str, PurePath]) -> Mapping[str, Any]:
        """Rule options for one file, with matching ``overrides`` applied in order."""
        if not self.overrides:
            return self.rules
        relative = self.relative_path(path)
        options = dict(self.rules)
        for pattern, patch in self.overrides:
            if matches_glob(relative, pattern):
                options.update(patch)
        return MappingProxyType({k: v for k, v in options.items() if is_enabled(v)})

    def as_dict(self) -> dict[str, Any]:
        """The processed configuration as a plain (copied) dictionary."""
        data: dict[str, Any] = copy.deepcopy(dict(self.rules))
        data.update({
            "preset": self.preset,
            "verbose": self.verbose,
            "colors": self.colors,
            "reporter": self.reporter,
            "maxErrors": self.max_errors,
            "excludeFiles": list(self.exclude_files),
            "fileExtensions": list(self.file_extensions),
        })
        if self.overrides:
            data["overrides"] = {pattern: dict(patch) for pattern, patch in self.overrides}
        if self.additional_rules:
            data["additionalRules"] = [str(p) for p in self.additional_rules]
        return data


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration source.

    Search order:
    1. Each of CONFIG_FILENAMES in ``start`` (default: cwd)
    2. The same in parent directories (up to git root or /)
    3. The same in the home directory

    Returns:
        Path of the first source found, or None
    """
    search_dir = (start or Path.cwd()).resolve()
    while True:
        for name in CONFIG_FILENAMES:
            candidate = search_dir / name
            if candidate.is_file():
                return candidate
        # Stop at git root
        if (search_dir / ".git").exists() or search_dir == search_dir.parent:
            break
        search_dir = search_dir.parent

    for name in CONFIG_FILENAMES:
        home_config = Path.home() / name
        if home_config.is_file():
            return home_config

    return None


def load_config_source(path: Path) -> dict[str, Any]:
    """Read and parse a configuration source.

    ``.json`` files are parsed as JSON, everything else as YAML. An empty
    document is an empty configuration.

    Raises:
        ConfigCorrupted: If the content does not parse into a mapping
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigCorrupted(str(path), str(e)) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content) if content.strip() else None
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigCorrupted(str(path), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigCorrupted(
            str(path), f"expected a mapping at top level, got {type(data).__name__}"
        )
    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        raise ConfigCorrupted(str(path), f"option names must be strings: {bad_keys!r}")
    return data


def merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Fold sparse configuration patches left to right, last write wins.

    Values are deep-copied so no layer is ever mutated through the result.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            merged[key] = copy.deepcopy(value)
    return merged


def _string_list(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigInvalid([key], f"{key} must be a list of strings")
    return value


def _max_errors(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or (value < 1 and value != -1):
        raise ConfigInvalid(["maxErrors"], "maxErrors must be a positive integer, -1 or null")
    return None if value == -1 else value


def _file_extensions(value: Any) -> tuple[str, ...]:
    if value == "*":
        return ("*",)
    extensions = _string_list("fileExtensions", value)
    return tuple(
        ext.lower() if ext.startswith(".") or ext == "*" else f".{ext.lower()}"
        for ext in extensions
    )


def _flag(key: str, value: Any, allow_none: bool = False) -> Optional[bool]:
    if value is None and allow_none:
        return None
    if not isinstance(value, bool):
        raise ConfigInvalid([key], f"{key} must be true or false")
    return value


def _overrides(value: Any, rule_set: RuleSet, base: Mapping[str, Any]):
    if value is None:
        return ()
    if not isinstance(value, dict):
        raise ConfigInvalid(["overrides"], "overrides must map path globs to rule options")
    resolved = []
    for pattern, patch in value.items():
        if not isinstance(pattern, str) or not isinstance(patch, dict):
            raise ConfigInvalid(
                ["overrides"], f"overrides entry {pattern!r} must map a glob to rule options"
            )
        reserved = sorted(set(patch) & RESERVED_KEYS)
        if reserved:
            raise ConfigInvalid(
                reserved, f"overrides for {pattern!r} may only set rules, not {', '.join(reserved)}"
            )
        # validate the override as it would apply to a matching file
        rule_set.configure(merge_layers(base, patch))
        resolved.append((pattern, MappingProxyType(copy.deepcopy(patch))))
    return tuple(resolved)


def resolve_config(
    invocation: Invocation,
    *,
    presets: Optional[Mapping[str, Mapping[str, Any]]] = None,
    rules: Optional[RuleSet] = None,
    tty: Optional[bool] = None,
) -> ResolvedConfig:
    """Resolve the configuration for one run.

    Args:
        invocation: Run parameters (explicit config path, preset, overrides)
        presets: Preset registry (defaults to the built-in one)
        rules: Rule registry (defaults to the built-in one)
        tty: Whether output goes to a terminal; decides colors when
             neither the source nor the invocation does

    Returns:
        The frozen ResolvedConfig

    Raises:
        ConfigNotFound: An explicit source does not exist
        ConfigCorrupted: The source does not parse into a mapping
        PresetNotFound: The requested preset is not registered
        ConfigInvalid: The merged configuration breaks a constraint
    """
    source_path: Optional[Path] = None
    if invocation.config:
        source_path = Path(invocation.config)
        if not source_path.is_absolute():
            source_path = Path.cwd() / source_path
        if not source_path.is_file():
            raise ConfigNotFound(invocation.config)
    else:
        source_path = find_config_file()

    source: dict[str, Any] = {}
    if source_path is not None:
        logger.info(f"Using configuration source {source_path}")
        source = load_config_source(source_path)
    else:
        logger.info("No configuration source found, using defaults")

    preset = invocation.preset or source.get("preset")
    if preset is not None and not isinstance(preset, str):
        raise ConfigInvalid(["preset"], "preset must be a preset name")
    preset_layer: dict[str, Any] = {}
    if preset:
        preset_layer = expand_preset(preset, presets)
        logger.info(f"Expanded preset {preset!r} ({len(preset_layer)} options)")

    merged = merge_layers(DEFAULTS, preset_layer, source, invocation.overrides())
    merged.pop("preset", None)

    base_dir = source_path.parent.resolve() if source_path is not None else Path.cwd()

    rule_set = (rules or RuleSet()).copy()
    additional = tuple(
        (base_dir / p).resolve()
        for p in _string_list("additionalRules", merged.get("additionalRules") or [])
    )
    if additional:
        rule_set.load_additional(additional)

    rule_options = {k: v for k, v in merged.items() if k not in RESERVED_KEYS}
    rule_set.configure(rule_options)
    enabled = {k: v for k, v in rule_options.items() if is_enabled(v)}

    reporter = merged.get("reporter")
    if reporter is not None and not isinstance(reporter, str):
        raise ConfigInvalid(["reporter"], "reporter must be a name or a path")

    colors = _flag("colors", merged.get("colors"), allow_none=True)
    if colors is None:
        colors = is_stdout_tty() if tty is None else tty

    config = ResolvedConfig(
        rules=MappingProxyType(enabled),
        preset=preset or None,
        verbose=bool(_flag("verbose", merged.get("verbose"))),
        colors=colors,
        reporter=reporter,
        max_errors=_max_errors(merged.get("maxErrors")),
        exclude_files=tuple(_string_list("excludeFiles", merged.get("excludeFiles") or [])),
        file_extensions=_file_extensions(merged.get("fileExtensions")),
        overrides=_overrides(merged.get("overrides"), rule_set, enabled),
        additional_rules=additional,
        source_path=source_path,
        base_dir=base_dir,
        rule_set=rule_set,
    )
    logger.debug(f"Resolved {len(enabled)} enabled rules: {', '.join(sorted(enabled))}")
    return config
