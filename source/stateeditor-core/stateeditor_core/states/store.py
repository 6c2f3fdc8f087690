"""State graph storage.

This module provides access to the stored states of an exploration:
- StateGraphStore: Abstract base class defining the storage interface
- MemoryStateGraphStore: In-memory storage for development and testing
- Helpers that read and replace the rule lists inside a state record

A state record is a plain dictionary::

    {
        "content": [...],
        "interaction": {
            "id": "TextInput",
            "customization_args": {...},
            "handlers": [{"name": "submit", "rule_specs": [...]}],
        },
        "param_changes": [...],
    }

The rules editor only reads and writes ``interaction.handlers[*].rule_specs``;
every other field passes through untouched.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any

from stateeditor_core.rules.models import HandlerSet


logger = logging.getLogger(__name__)

StateRecord = dict[str, Any]


def get_interaction_id(record: StateRecord) -> str | None:
    """Return the interaction id stored in a state record."""
    return (record.get("interaction") or {}).get("id")


def get_handler_list(record: StateRecord) -> list[dict[str, Any]]:
    """Return a copy of the stored handlers of a state record."""
    return copy.deepcopy((record.get("interaction") or {}).get("handlers", []))


def replace_rule_specs(record: StateRecord, handlers: HandlerSet) -> StateRecord:
    """Return a copy of record whose handler rule lists are taken from handlers.

    Stored handlers missing from handlers keep their rules; handlers not yet
    stored are appended.
    """
    updated = copy.deepcopy(record)
    interaction = updated.setdefault("interaction", {})
    stored = interaction.setdefault("handlers", [])
    new_values = handlers.to_dict()

    for handler in stored:
        name = handler.get("name")
        if name in new_values:
            handler["rule_specs"] = new_values.pop(name)
    for name, rule_specs in new_values.items():
        stored.append({"name": name, "rule_specs": rule_specs})
    return updated


class StateGraphStore(ABC):
    """Abstract base class for state storage."""

    @abstractmethod
    def get_state(self, state_name: str) -> StateRecord:
        """Get a state record.

        Args:
            state_name: The state to look up.

        Returns:
            A copy of the stored record.

        Raises:
            KeyError: If the state does not exist.
        """
        ...

    @abstractmethod
    def set_state(self, state_name: str, record: StateRecord) -> None:
        """Store a state record, replacing the existing one."""
        ...

    @abstractmethod
    def list_state_names(self) -> list[str]:
        """List the names of all stored states."""
        ...

    def has_state(self, state_name: str) -> bool:
        return state_name in self.list_state_names()


class MemoryStateGraphStore(StateGraphStore):
    """In-memory state storage.

    Records are copied on the way in and on the way out, so callers never
    hold a reference into the store.
    """

    def __init__(
        self,
        states: dict[str, StateRecord] | None = None,
        init_state_name: str | None = None,
    ) -> None:
        self._states: dict[str, StateRecord] = copy.deepcopy(states or {})
        self.init_state_name = init_state_name or next(iter(self._states), None)

    def get_state(self, state_name: str) -> StateRecord:
        if state_name not in self._states:
            raise KeyError(f"State not found: {state_name}")
        return copy.deepcopy(self._states[state_name])

    def set_state(self, state_name: str, record: StateRecord) -> None:
        self._states[state_name] = copy.deepcopy(record)
        logger.debug(f"Stored state {state_name}")

    def list_state_names(self) -> list[str]:
        return list(self._states)

    def delete_state(self, state_name: str) -> bool:
        """Delete a state. Returns False if it did not exist."""
        return self._states.pop(state_name, None) is not None

    def clear(self) -> None:
        """Clear all states (for testing)."""
        self._states.clear()
        self.init_state_name = None
