"""Interaction metadata for StateEditor Core."""

from stateeditor_core.interactions.catalog import (
    InteractionCatalog,
    InteractionSpec,
    MemoryInteractionCatalog,
)

__all__ = ["InteractionCatalog", "InteractionSpec", "MemoryInteractionCatalog"]
