"""Exploration state storage for StateEditor Core."""

from stateeditor_core.states.store import (
    MemoryStateGraphStore,
    StateGraphStore,
    StateRecord,
    get_handler_list,
    get_interaction_id,
    replace_rule_specs,
)

__all__ = [
    "StateGraphStore",
    "MemoryStateGraphStore",
    "StateRecord",
    "get_handler_list",
    "get_interaction_id",
    "replace_rule_specs",
]
