"""Tests for the preset registry."""

import pytest

from stylectl.core.exceptions import ConfigInvalid, PresetNotFound
from stylectl.core.presets import PRESETS, expand_preset, list_presets
from stylectl.rules import RuleSet

pytestmark = pytest.mark.unit


class TestPresetRegistry:

    def test_builtin_presets(self):
        assert list_presets() == ["google", "jquery", "pep8", "wikimedia"]

    def test_presets_are_read_only(self):
        with pytest.raises(TypeError):
            PRESETS["pep8"]["maximumLineLength"] = 120

    @pytest.mark.parametrize("name", ["pep8", "google", "jquery", "wikimedia"])
    def test_every_preset_configures(self, name):
        """Each built-in preset is a valid rule configuration on its own."""
        rules = RuleSet().configure(expand_preset(name))
        assert rules


class TestExpandPreset:

    def test_base_preset_expanded_first(self):
        expanded = expand_preset("google")
        assert expanded["maximumLineLength"] == {"value": 80, "allowComments": True}
        assert expanded["validateIndentation"] == 4
        assert "preset" not in expanded

    def test_derived_preset_can_disable(self):
        assert expand_preset("wikimedia")["maximumLineLength"] is None

    def test_unknown_preset(self):
        with pytest.raises(PresetNotFound) as exc_info:
            expand_preset("airbnb")
        assert exc_info.value.name == "airbnb"

    def test_unknown_base_preset(self):
        registry = {"child": {"preset": "missing"}}
        with pytest.raises(PresetNotFound) as exc_info:
            expand_preset("child", registry)
        assert exc_info.value.name == "missing"

    def test_cycle_detected(self):
        registry = {"a": {"preset": "b"}, "b": {"preset": "a"}}
        with pytest.raises(ConfigInvalid) as exc_info:
            expand_preset("a", registry)
        assert "a -> b -> a" in exc_info.value.detail

    def test_custom_registry(self):
        registry = {"tiny": {"disallowSemicolons": True}}
        assert expand_preset("tiny", registry) == {"disallowSemicolons": True}
        assert list_presets(registry) == ["tiny"]
