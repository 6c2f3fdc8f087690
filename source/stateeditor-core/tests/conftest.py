"""Pytest configuration and fixtures for StateEditor Core tests."""

import os
from unittest.mock import patch

import pytest

from stateeditor_core.changes import ChangeList
from stateeditor_core.editor import RuleSetEditor
from stateeditor_core.events import EventBus, WarningsLog
from stateeditor_core.graph import GraphDataService
from stateeditor_core.hitl import AutoConfirmPrompt
from stateeditor_core.interactions import MemoryInteractionCatalog
from stateeditor_core.rules import RuleDefinition, RuleSpec
from stateeditor_core.states import MemoryStateGraphStore


def make_rule(description: str, dest: str = "S1", **kwargs) -> RuleSpec:
    """Helper to create an authored rule."""
    return RuleSpec(
        description=description,
        definition=kwargs.pop("definition", RuleDefinition(name="Contains", inputs={"x": description})),
        dest=dest,
        **kwargs,
    )


def make_default_rule(dest: str = "S1") -> RuleSpec:
    """Helper to create a default rule."""
    return RuleSpec(description="Default", definition=RuleDefinition.default(), dest=dest)


def make_state(
    interaction_id: str | None = "TextInput",
    rule_specs: list[dict] | None = None,
    dest: str = "S1",
) -> dict:
    """Helper to create a stored state record."""
    if rule_specs is None:
        rule_specs = [make_default_rule(dest).to_dict()]
    return {
        "content": [{"type": "text", "value": "Say hello."}],
        "interaction": {
            "id": interaction_id,
            "customization_args": {"placeholder": {"value": "Type here"}},
            "handlers": [{"name": "submit", "rule_specs": rule_specs}],
        },
        "param_changes": [],
    }


class EditorHarness:
    """An editor wired to in-memory collaborators."""

    def __init__(self, states: dict | None = None, prompt=None) -> None:
        self.catalog = MemoryInteractionCatalog.default()
        self.store = MemoryStateGraphStore(
            states if states is not None else {
                "S1": make_state(dest="S1"),
                "S2": make_state(interaction_id="NumericInput", dest="S1"),
            },
            init_state_name="S1",
        )
        self.changes = ChangeList()
        self.graph = GraphDataService(self.store, self.catalog)
        self.prompt = prompt if prompt is not None else AutoConfirmPrompt()
        self.bus = EventBus()
        self.warnings_log = WarningsLog()
        self.events: list[tuple[str, dict]] = []
        self.bus.subscribe("*", lambda name, payload: self.events.append((name, payload)))
        self.editor = RuleSetEditor(
            catalog=self.catalog,
            change_recorder=self.changes,
            state_store=self.store,
            graph=self.graph,
            prompt=self.prompt,
            notifier=self.bus,
            warnings_log=self.warnings_log,
        )

    def rules(self) -> list[RuleSpec]:
        return self.editor.get_interaction_handlers().rules("submit")

    def descriptions(self) -> list[str]:
        return [rule.description for rule in self.rules()]

    def stored_rule_specs(self, state_name: str = "S1") -> list[dict]:
        record = self.store.get_state(state_name)
        return record["interaction"]["handlers"][0]["rule_specs"]

    def event_names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def harness():
    """An editor with state S1 open for editing."""
    h = EditorHarness()
    h.editor.open_state("S1")
    h.events.clear()
    return h


@pytest.fixture
def closed_harness():
    """An editor with no state open."""
    return EditorHarness()


@pytest.fixture
def clean_env():
    """Environment without StateEditor variables."""
    with patch.dict(os.environ, {}, clear=True):
        yield
