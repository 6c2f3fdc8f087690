"""Tests for the interaction catalog."""

import json

import pytest

from stateeditor_core.errors import ConfigurationError
from stateeditor_core.interactions import InteractionSpec, MemoryInteractionCatalog


class TestMemoryInteractionCatalog:
    """Tests for MemoryInteractionCatalog."""

    def test_default_catalog_has_builtin_types(self):
        catalog = MemoryInteractionCatalog.default()

        assert catalog.list_interaction_ids() == [
            "Continue",
            "EndExploration",
            "MultipleChoiceInput",
            "NumericInput",
            "TextInput",
        ]

    def test_spec_of_returns_handler_specs(self):
        spec = MemoryInteractionCatalog.default().spec_of("NumericInput")

        assert spec.interaction_id == "NumericInput"
        assert spec.handler_specs[0]["name"] == "submit"
        assert "IsWithinTolerance" in spec.handler_specs[0]["rules"]
        assert spec.is_terminal is False

    def test_terminal_interaction(self):
        catalog = MemoryInteractionCatalog.default()

        assert catalog.is_terminal("EndExploration") is True
        assert catalog.is_terminal("TextInput") is False

    @pytest.mark.parametrize("interaction_id", [None, ""])
    def test_missing_id_raises(self, interaction_id):
        with pytest.raises(ConfigurationError, match="Interaction id not specified."):
            MemoryInteractionCatalog.default().spec_of(interaction_id)

    def test_unknown_id_raises(self):
        with pytest.raises(ConfigurationError) as exc_info:
            MemoryInteractionCatalog.default().spec_of("CodeRepl")

        assert exc_info.value.interaction_id == "CodeRepl"
        assert "Unknown interaction id: CodeRepl" in str(exc_info.value)

    def test_spec_of_returns_a_copy(self):
        catalog = MemoryInteractionCatalog.default()
        catalog.spec_of("TextInput").handler_specs.clear()

        assert catalog.spec_of("TextInput").handler_specs

    def test_register(self):
        catalog = MemoryInteractionCatalog()
        catalog.register(InteractionSpec("GraphInput", [{"name": "submit", "rules": {}}]))

        assert catalog.list_interaction_ids() == ["GraphInput"]
        assert catalog.spec_of("GraphInput").handler_specs == [{"name": "submit", "rules": {}}]

    def test_to_dict_and_from_dict(self):
        catalog = MemoryInteractionCatalog.default()
        restored = MemoryInteractionCatalog.from_dict(catalog.to_dict())

        assert restored.list_interaction_ids() == catalog.list_interaction_ids()
        assert restored.spec_of("EndExploration").is_terminal is True


class TestCatalogFile:
    """Tests for loading a catalog from JSON."""

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "interactions.json"
        path.write_text(json.dumps({
            "SetInput": {"handler_specs": [{"name": "submit", "rules": {"Equals": {}}}]},
            "EndExploration": {"is_terminal": True},
        }))

        catalog = MemoryInteractionCatalog.from_json_file(path)

        assert catalog.list_interaction_ids() == ["EndExploration", "SetInput"]
        assert catalog.is_terminal("EndExploration") is True
        assert catalog.spec_of("EndExploration").handler_specs == []

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            MemoryInteractionCatalog.from_json_file(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "interactions.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            MemoryInteractionCatalog.from_json_file(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "interactions.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError, match="must be a JSON object"):
            MemoryInteractionCatalog.from_json_file(path)
