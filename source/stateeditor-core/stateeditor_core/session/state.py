"""Editing session state for StateEditor Core."""

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from stateeditor_core.rules.models import HandlerSet


class EditorMode(Enum):
    """What the author is doing with the active rule.

    - VIEWING: The active rule is shown read-only
    - EDITING: The active rule is open for editing
    - ADDING_NEW: A new rule is being drafted; nothing is mutated until it
      is confirmed
    """
    VIEWING = "viewing"
    EDITING = "editing"
    ADDING_NEW = "adding_new"


@dataclass
class RuleEditingSession:
    """Session data for editing the rules of one state.

    Attributes:
        state_name: The state whose rules are being edited.
        interaction_id: The state's current interaction type, if known.
        handlers: The live rule set.
        memento: Copy of the last committed rule set.
        active_rule_index: Index of the rule shown in the editor.
        mode: Current editor mode.
        handler_specs: Handler specs of the current interaction, or None when
            the interaction is unknown.
        revision: Incremented on every change to the session.
    """

    state_name: str
    interaction_id: str | None
    handlers: HandlerSet
    memento: HandlerSet
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    active_rule_index: int = 0
    mode: EditorMode = EditorMode.VIEWING
    handler_specs: list[dict[str, Any]] | None = None
    revision: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(
        cls,
        state_name: str,
        interaction_id: str | None,
        handlers: HandlerSet,
        handler_specs: list[dict[str, Any]] | None = None,
    ) -> "RuleEditingSession":
        """Create a session whose memento is a copy of handlers."""
        return cls(
            state_name=state_name,
            interaction_id=interaction_id,
            handlers=handlers,
            memento=handlers.clone(),
            handler_specs=copy.deepcopy(handler_specs),
        )

    @property
    def is_degraded(self) -> bool:
        """True when the interaction's handler specs could not be resolved."""
        return self.handler_specs is None

    def bump(self) -> int:
        self.revision += 1
        return self.revision
