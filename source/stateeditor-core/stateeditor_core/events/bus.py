"""Observer registration and fan-out for editor events."""

import logging
from typing import Any, Callable, Protocol


logger = logging.getLogger(__name__)

Listener = Callable[[str, dict[str, Any]], None]

ALL_EVENTS = "*"


class Notifier(Protocol):
    """Protocol for event sinks used by the editor."""

    def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        """Publish an event. No acknowledgment is expected."""
        ...


class EventBus:
    """Synchronous fan-out to explicitly registered listeners.

    Listeners subscribe to a single event name, or to ``"*"`` for all
    events, and are called in subscription order. A failing listener is
    logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, event_name: str, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.setdefault(event_name, []).append(listener)
        return lambda: self.unsubscribe(event_name, listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> bool:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        listeners = self._listeners.get(event_name, []) + self._listeners.get(ALL_EVENTS, [])
        for listener in listeners:
            try:
                listener(event_name, payload)
            except Exception as e:
                logger.error(f"Listener for {event_name} failed: {e}")

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, []))
