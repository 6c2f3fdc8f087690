"""Tests for deleting rules with confirmation."""

import asyncio

import pytest

from conftest import EditorHarness, make_rule
from stateeditor_core.config import DEFAULT_DELETE_CONFIRM_MESSAGE, Settings
from stateeditor_core.errors import InvariantViolation, StaleOperationError
from stateeditor_core.hitl import PendingConfirmationPrompt
from stateeditor_core.rules import RuleSpec


def _pending_harness() -> EditorHarness:
    h = EditorHarness(prompt=PendingConfirmationPrompt())
    h.editor.open_state("S1")
    h.editor.add_rule(make_rule("A"))
    h.editor.add_rule(make_rule("B"))
    h.editor.change_active_index(0)
    h.events.clear()
    return h


class TestDeleteActiveRule:
    """Tests for delete_active_rule."""

    @pytest.mark.asyncio
    async def test_add_then_delete_scenario(self, closed_harness):
        """Add a rule, refuse to delete the default, then delete the added rule."""
        h = closed_harness
        h.editor.initialize(
            [{"name": "submit", "rule_specs": [{"description": "Default", "dest": "S1"}]}],
            "TextInput",
            "S1",
        )

        h.editor.add_rule(RuleSpec(description="Contains hello"))
        assert h.descriptions() == ["Contains hello", "Default"]
        assert h.editor.get_active_rule_index() == 0

        h.editor.change_active_index(1)
        with pytest.warns(InvariantViolation, match="Cannot delete default rule."):
            assert await h.editor.delete_active_rule() is False
        assert h.descriptions() == ["Contains hello", "Default"]
        assert h.warnings_log.warnings == ["Cannot delete default rule."]

        changes_before = len(h.changes)
        h.editor.change_active_index(0)
        assert await h.editor.delete_active_rule() is True

        assert h.descriptions() == ["Default"]
        assert h.editor.get_active_rule_index() == 0
        assert len(h.changes) == changes_before + 1

    @pytest.mark.asyncio
    async def test_delete_default_rule_does_not_ask(self, harness):
        harness.editor.add_rule(make_rule("A"))
        harness.editor.change_active_index(1)

        with pytest.warns(InvariantViolation):
            assert await harness.editor.delete_active_rule() is False

        assert harness.prompt.messages == []
        assert harness.descriptions() == ["A", "Default"]
        assert len(harness.changes) == 1

    @pytest.mark.asyncio
    async def test_delete_only_rule_is_refused(self, harness):
        with pytest.warns(InvariantViolation):
            assert await harness.editor.delete_active_rule() is False

        assert harness.descriptions() == ["Default"]
        assert harness.changes.is_empty()

    @pytest.mark.asyncio
    async def test_refusal_publishes_warning_event(self, harness):
        with pytest.warns(InvariantViolation):
            await harness.editor.delete_active_rule()

        assert harness.event_names() == ["warning"]
        assert harness.events[0][1]["category"] == "InvariantViolation"

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, harness):
        harness.editor.add_rule(make_rule("A"))
        harness.editor.add_rule(make_rule("B"))

        assert await harness.editor.delete_active_rule() is True

        assert harness.descriptions() == ["A", "Default"]
        assert harness.editor.get_active_rule_index() == 0
        assert [r["description"] for r in harness.stored_rule_specs()] == ["A", "Default"]
        assert harness.changes.changes[-1].property_name == "rules"
        assert harness.graph.recompute_count == 3
        assert harness.prompt.messages == [DEFAULT_DELETE_CONFIRM_MESSAGE]

    @pytest.mark.asyncio
    async def test_declined_delete(self, harness):
        harness.editor.add_rule(make_rule("A"))
        harness.prompt.answer = False

        assert await harness.editor.delete_active_rule() is False

        assert harness.descriptions() == ["A", "Default"]
        assert len(harness.changes) == 1

    @pytest.mark.asyncio
    async def test_confirmation_message_comes_from_settings(self):
        h = EditorHarness()
        h.editor._settings = Settings(delete_confirm_message="Delete it?")
        h.editor.open_state("S1")
        h.editor.add_rule(make_rule("A"))

        await h.editor.delete_active_rule()

        assert h.prompt.messages == ["Delete it?"]


class TestPendingConfirmation:
    """Tests for deletions whose confirmation arrives later."""

    @pytest.mark.asyncio
    async def test_nothing_changes_until_confirmed(self):
        h = _pending_harness()
        task = asyncio.create_task(h.editor.delete_active_rule())
        await asyncio.sleep(0)

        assert h.prompt.is_pending
        assert h.descriptions() == ["A", "B", "Default"]
        assert h.events == []

        h.prompt.resolve(True)
        assert await task is True
        assert h.descriptions() == ["B", "Default"]

    @pytest.mark.asyncio
    async def test_cancelled_confirmation(self):
        h = _pending_harness()
        changes_before = len(h.changes)
        task = asyncio.create_task(h.editor.delete_active_rule())
        await asyncio.sleep(0)

        h.prompt.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert h.descriptions() == ["A", "B", "Default"]
        assert len(h.changes) == changes_before
        assert h.prompt.is_pending is False

    @pytest.mark.asyncio
    async def test_declined_confirmation(self):
        h = _pending_harness()
        task = asyncio.create_task(h.editor.delete_active_rule())
        await asyncio.sleep(0)

        h.prompt.resolve(False)

        assert await task is False
        assert h.descriptions() == ["A", "B", "Default"]

    @pytest.mark.asyncio
    async def test_session_changed_while_pending(self):
        """A confirmation that resolves after the session moved on is stale."""
        h = _pending_harness()
        task = asyncio.create_task(h.editor.delete_active_rule())
        await asyncio.sleep(0)

        h.editor.change_active_index(1)
        h.prompt.resolve(True)

        with pytest.raises(StaleOperationError):
            await task
        assert h.descriptions() == ["A", "B", "Default"]
        assert h.editor.get_active_rule_index() == 1

    @pytest.mark.asyncio
    async def test_state_reopened_while_pending(self):
        h = _pending_harness()
        task = asyncio.create_task(h.editor.delete_active_rule())
        await asyncio.sleep(0)

        h.editor.open_state("S2")
        h.prompt.resolve(True)

        with pytest.raises(StaleOperationError):
            await task
        assert h.editor.state_name == "S2"
        assert [r["description"] for r in h.stored_rule_specs("S1")] == ["A", "B", "Default"]
