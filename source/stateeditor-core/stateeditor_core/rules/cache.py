"""Per-interaction cache of handler sets.

Stores the rules last committed under each interaction id so that they can
be restored when a state's interaction is switched away and back while the
state is still being edited. Reset it whenever a new editing session starts.
"""

import logging

from stateeditor_core.rules.models import HandlerSet


logger = logging.getLogger(__name__)


class HandlerCache:
    """Interaction id to HandlerSet store with copy-in, copy-out semantics."""

    def __init__(self) -> None:
        self._cache: dict[str, HandlerSet] = {}

    def reset(self) -> None:
        """Remove all entries."""
        self._cache.clear()

    def contains(self, interaction_id: str) -> bool:
        return interaction_id in self._cache

    def put(self, interaction_id: str, handlers: HandlerSet) -> None:
        """Store a copy of handlers, replacing any existing entry."""
        self._cache[interaction_id] = handlers.clone()
        logger.debug(f"Cached handlers for interaction {interaction_id}")

    def get(self, interaction_id: str) -> HandlerSet | None:
        """Return a copy of the cached handlers, or None if there is no entry."""
        handlers = self._cache.get(interaction_id)
        if handlers is None:
            return None
        return handlers.clone()

    def __contains__(self, interaction_id: object) -> bool:
        return interaction_id in self._cache

    def __len__(self) -> int:
        return len(self._cache)
