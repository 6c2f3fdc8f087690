"""Change recording for state edits.

Every committed edit to a state's rules is appended to a change list as an
``edit_state_property`` command carrying the old and new values, so that the
list can be replayed against the stored exploration or undone locally.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


logger = logging.getLogger(__name__)

EDIT_STATE_PROPERTY = "edit_state_property"


@dataclass
class ChangeRecord:
    """A single recorded edit to one property of one state."""
    state_name: str
    property_name: str
    old_value: Any
    new_value: Any
    cmd: str = EDIT_STATE_PROPERTY
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cmd": self.cmd,
            "state_name": self.state_name,
            "property_name": self.property_name,
            "old_value": copy.deepcopy(self.old_value),
            "new_value": copy.deepcopy(self.new_value),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangeRecord":
        created_at = data.get("created_at")
        return cls(
            state_name=data["state_name"],
            property_name=data["property_name"],
            old_value=copy.deepcopy(data.get("old_value")),
            new_value=copy.deepcopy(data.get("new_value")),
            cmd=data.get("cmd", EDIT_STATE_PROPERTY),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(),
        )


class ChangeRecorder(ABC):
    """Abstract sink for state property edits."""

    @abstractmethod
    def record_property_edit(
        self,
        state_name: str,
        property_name: str,
        old_value: Any,
        new_value: Any,
    ) -> None:
        """Append an edit of a state property.

        Args:
            state_name: The state that was edited.
            property_name: The edited property (e.g. ``"rules"``).
            old_value: The value before the edit.
            new_value: The value after the edit.
        """
        ...


class ChangeList(ChangeRecorder):
    """In-memory, append-only list of changes made in one editing session."""

    def __init__(self) -> None:
        self._changes: list[ChangeRecord] = []

    def record_property_edit(
        self,
        state_name: str,
        property_name: str,
        old_value: Any,
        new_value: Any,
    ) -> None:
        record = ChangeRecord(
            state_name=state_name,
            property_name=property_name,
            old_value=copy.deepcopy(old_value),
            new_value=copy.deepcopy(new_value),
        )
        self._changes.append(record)
        logger.debug(f"Recorded edit of {property_name} in state {state_name}")

    @property
    def changes(self) -> list[ChangeRecord]:
        return list(self._changes)

    def is_empty(self) -> bool:
        return not self._changes

    def undo_last_change(self) -> ChangeRecord | None:
        """Remove and return the most recent change, or None if there is none."""
        if not self._changes:
            return None
        return self._changes.pop()

    def discard_all_changes(self) -> None:
        self._changes.clear()

    def __len__(self) -> int:
        return len(self._changes)
