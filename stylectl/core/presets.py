"""
Preset registry.

A preset is a named, read-only configuration fragment. A preset may name
a base preset with its own ``preset`` key; bases are expanded first so
the derived preset overrides them.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from .exceptions import ConfigInvalid, PresetNotFound

_PEP8: dict[str, Any] = {
    "validateIndentation": 4,
    "maximumLineLength": 79,
    "maximumBlankLines": 2,
    "disallowTrailingWhitespace": True,
    "requireLineFeedAtFileEnd": True,
    "disallowMixedSpacesAndTabs": True,
    "requireSpaceAfterComma": True,
    "disallowSemicolons": True,
    "disallowBareExcept": True,
    "requireSnakeCaseIdentifiers": True,
    "requireCapitalizedClassNames": True,
}

_GOOGLE: dict[str, Any] = {
    "preset": "pep8",
    "maximumLineLength": {"value": 80, "allowComments": True},
    "validateQuoteMarks": {"mark": True, "escape": True},
}

_JQUERY: dict[str, Any] = {
    "validateIndentation": "\t",
    "validateQuoteMarks": '"',
    "maximumLineLength": {"value": 100, "allowComments": True},
    "maximumBlankLines": 1,
    "disallowKeywords": ["global"],
    "disallowTrailingWhitespace": True,
    "requireLineFeedAtFileEnd": True,
    "disallowMixedSpacesAndTabs": True,
    "requireSpaceAfterComma": True,
    "disallowSemicolons": True,
}

_WIKIMEDIA: dict[str, Any] = {
    "preset": "jquery",
    "validateQuoteMarks": "'",
    "maximumLineLength": None,
    "disallowBareExcept": True,
    "requireCapitalizedClassNames": True,
}

PRESETS: Mapping[str, Mapping[str, Any]] = MappingProxyType({
    "pep8": MappingProxyType(_PEP8),
    "google": MappingProxyType(_GOOGLE),
    "jquery": MappingProxyType(_JQUERY),
    "wikimedia": MappingProxyType(_WIKIMEDIA),
})


def list_presets(registry: Optional[Mapping[str, Mapping[str, Any]]] = None) -> list[str]:
    """List available preset names."""
    return sorted(PRESETS if registry is None else registry)


def expand_preset(
    name: str,
    registry: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> dict[str, Any]:
    """Flatten a preset and its bases into a single fragment.

    Raises:
        PresetNotFound: If ``name`` (or a base) is not registered
        ConfigInvalid: If presets reference each other in a cycle
    """
    registry = PRESETS if registry is None else registry
    chain: list[Mapping[str, Any]] = []
    seen: list[str] = []
    current: Optional[str] = name

    while current is not None:
        if current in seen:
            cycle = " -> ".join(seen + [current])
            raise ConfigInvalid(["preset"], f"Preset cycle: {cycle}")
        if current not in registry:
            raise PresetNotFound(current)
        seen.append(current)
        fragment = registry[current]
        chain.append(fragment)
        current = fragment.get("preset")

    merged: dict[str, Any] = {}
    for fragment in reversed(chain):
        merged.update({k: v for k, v in fragment.items() if k != "preset"})
    return merged
