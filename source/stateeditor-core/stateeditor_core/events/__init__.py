"""Event system for StateEditor Core."""

from dataclasses import dataclass, field, fields
from typing import Any
import time

from stateeditor_core.events.bus import EventBus, Notifier
from stateeditor_core.events.warnings import WarningsLog


@dataclass
class EditorEvent:
    """Base class for editor events."""
    event_type: str = ""
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "timestamp": self.timestamp,
            **self._extra_fields(),
        }

    def _extra_fields(self) -> dict:
        return {}


@dataclass
class ActiveRuleChangedEvent(EditorEvent):
    """The active rule index, or the rule it points at, changed."""
    event_type: str = field(default="active_rule_changed", init=False)
    state_name: str | None = None
    active_rule_index: int = 0
    rule: dict | None = None

    def _extra_fields(self) -> dict:
        return {
            "state_name": self.state_name,
            "active_rule_index": self.active_rule_index,
            "rule": self.rule,
        }


@dataclass
class RulesChangedEvent(EditorEvent):
    """The rule set of the edited state changed."""
    event_type: str = field(default="rules_changed", init=False)
    state_name: str | None = None
    interaction_id: str | None = None
    handlers: dict = field(default_factory=dict)
    reason: str = ""

    def _extra_fields(self) -> dict:
        return {
            "state_name": self.state_name,
            "interaction_id": self.interaction_id,
            "handlers": self.handlers,
            "reason": self.reason,
        }


@dataclass
class WarningEvent(EditorEvent):
    """A user-facing warning."""
    event_type: str = field(default="warning", init=False)
    message: str = ""
    category: str = ""

    def _extra_fields(self) -> dict:
        return {"message": self.message, "category": self.category}


# Event type registry for deserialization
_EVENT_TYPES: dict[str, type[EditorEvent]] = {}


def _register_event_type(cls: type[EditorEvent]) -> type[EditorEvent]:
    """Register an event type for deserialization."""
    _EVENT_TYPES[cls.__dataclass_fields__["event_type"].default] = cls
    return cls


_register_event_type(ActiveRuleChangedEvent)
_register_event_type(RulesChangedEvent)
_register_event_type(WarningEvent)


def from_dict(data: dict[str, Any]) -> EditorEvent:
    """Deserialize an event from a dictionary.

    Args:
        data: Dictionary containing event data with 'event_type' field.

    Returns:
        The deserialized EditorEvent instance.

    Raises:
        ValueError: If event_type is missing or unknown.
    """
    event_type = data.get("event_type")
    if not event_type:
        raise ValueError("Missing 'event_type' field in event data")

    cls = _EVENT_TYPES.get(event_type)
    if not cls:
        raise ValueError(f"Unknown event type: {event_type}")

    kwargs = {
        f.name: data[f.name]
        for f in fields(cls)
        if f.init and f.name in data
    }
    kwargs.setdefault("timestamp", time.time())
    return cls(**kwargs)


__all__ = [
    "EditorEvent",
    "ActiveRuleChangedEvent",
    "RulesChangedEvent",
    "WarningEvent",
    "EventBus",
    "Notifier",
    "WarningsLog",
    "from_dict",
]
