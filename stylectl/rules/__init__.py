"""
Rule registry for stylectl.

``RULES`` maps configuration keys to rule classes. A ``RuleSet`` is a
copy of that table that can be extended with ``additionalRules`` files
for a single run without touching the built-in registry.
"""

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..core.exceptions import ConfigInvalid
from ..utils.loader import ModuleLoadError, load_module_from_path
from .base import ErrorList, Rule, RuleErrors
from .keywords import DisallowKeywords
from .naming import DisallowBareExcept, RequireCapitalizedClassNames, RequireSnakeCaseIdentifiers
from .punctuation import (
    DisallowSemicolons,
    DisallowSpaceAfterComma,
    RequireSpaceAfterComma,
    ValidateQuoteMarks,
)
from .whitespace import (
    DisallowMixedSpacesAndTabs,
    DisallowTrailingWhitespace,
    MaximumBlankLines,
    MaximumLineLength,
    RequireLineFeedAtFileEnd,
    ValidateIndentation,
)

# Registry of available rules (built-in)
RULES: dict[str, type[Rule]] = {
    cls.name: cls
    for cls in (
        DisallowKeywords,
        DisallowTrailingWhitespace,
        RequireLineFeedAtFileEnd,
        DisallowMixedSpacesAndTabs,
        MaximumLineLength,
        MaximumBlankLines,
        ValidateIndentation,
        RequireSpaceAfterComma,
        DisallowSpaceAfterComma,
        DisallowSemicolons,
        ValidateQuoteMarks,
        RequireSnakeCaseIdentifiers,
        RequireCapitalizedClassNames,
        DisallowBareExcept,
    )
}


def is_enabled(option: Any) -> bool:
    """A rule is switched off by ``null`` or ``false``."""
    return option is not None and option is not False


class RuleSet:
    """A mutable copy of the rule registry."""

    def __init__(self, rules: Optional[Mapping[str, type[Rule]]] = None):
        self._rules: dict[str, type[Rule]] = dict(RULES if rules is None else rules)

    def register(self, rule_cls: type[Rule]) -> None:
        if not rule_cls.name:
            raise ValueError(f"{rule_cls.__name__} has no rule name")
        self._rules[rule_cls.name] = rule_cls

    def names(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def copy(self) -> "RuleSet":
        return RuleSet(self._rules)

    def configure(self, options: Mapping[str, Any]) -> list[Rule]:
        """Instantiate and configure every enabled rule in ``options``.

        Rules come back sorted by name so evaluation order is stable.

        Raises:
            ConfigInvalid: For unknown rules, conflicting rules, or options
                a rule rejects
        """
        unknown = sorted(name for name in options if name not in self._rules)
        if unknown:
            raise ConfigInvalid(unknown, f"Unsupported rule: {', '.join(unknown)}")

        enabled = {name: option for name, option in options.items() if is_enabled(option)}

        for name in sorted(enabled):
            for other in self._rules[name].conflicts:
                if other in enabled:
                    keys = sorted([name, other])
                    raise ConfigInvalid(
                        keys, f'"{keys[0]}" and "{keys[1]}" cannot be enabled together'
                    )

        configured = []
        for name in sorted(enabled):
            rule = self._rules[name]()
            try:
                rule.configure(enabled[name])
            except (TypeError, ValueError) as e:
                raise ConfigInvalid([name], str(e)) from e
            configured.append(rule)
        return configured

    def load_additional(self, paths: Iterable[Path]) -> None:
        """Register rules exported (as ``rules``) by Python files.

        Raises:
            ConfigInvalid: If a file cannot be loaded or exports no rules
        """
        for path in paths:
            try:
                module = load_module_from_path(path, "rules")
            except ModuleLoadError as e:
                raise ConfigInvalid(["additionalRules"], f"Cannot load rules from {e}") from e
            exported = getattr(module, "rules", None)
            if not exported:
                raise ConfigInvalid(
                    ["additionalRules"], f"{path} does not export a 'rules' sequence"
                )
            for rule_cls in exported:
                if not (isinstance(rule_cls, type) and issubclass(rule_cls, Rule)):
                    raise ConfigInvalid(
                        ["additionalRules"], f"{path}: {rule_cls!r} is not a Rule subclass"
                    )
                try:
                    self.register(rule_cls)
                except ValueError as e:
                    raise ConfigInvalid(["additionalRules"], f"{path}: {e}") from e


__all__ = [
    "ErrorList",
    "RULES",
    "Rule",
    "RuleErrors",
    "RuleSet",
    "is_enabled",
]
