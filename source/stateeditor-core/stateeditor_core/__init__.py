"""StateEditor Core - Rules editing session for exploration states."""

from stateeditor_core.config import Settings, configure_logging
from stateeditor_core.errors import (
    ConfigurationError,
    InvariantViolation,
    SessionNotOpenError,
    StaleOperationError,
    StateEditorError,
)
from stateeditor_core.events import (
    ActiveRuleChangedEvent,
    EditorEvent,
    EventBus,
    Notifier,
    RulesChangedEvent,
    WarningEvent,
    WarningsLog,
)
from stateeditor_core.rules import HandlerCache, HandlerSet, RuleDefinition, RuleSpec
from stateeditor_core.session import EditorMode, RuleEditingSession
from stateeditor_core.interactions import (
    InteractionCatalog,
    InteractionSpec,
    MemoryInteractionCatalog,
)
from stateeditor_core.changes import ChangeList, ChangeRecord, ChangeRecorder
from stateeditor_core.states import MemoryStateGraphStore, StateGraphStore
from stateeditor_core.graph import GraphData, GraphDataService, GraphRecompute
from stateeditor_core.hitl import (
    AutoConfirmPrompt,
    ConfirmationPrompt,
    PendingConfirmationPrompt,
)
from stateeditor_core.editor import RuleSetEditor

__version__ = "0.1.0"

__all__ = [
    # Config
    "Settings",
    "configure_logging",
    # Errors
    "StateEditorError",
    "ConfigurationError",
    "InvariantViolation",
    "SessionNotOpenError",
    "StaleOperationError",
    # Events
    "EditorEvent",
    "ActiveRuleChangedEvent",
    "RulesChangedEvent",
    "WarningEvent",
    "EventBus",
    "Notifier",
    "WarningsLog",
    # Rules
    "RuleDefinition",
    "RuleSpec",
    "HandlerSet",
    "HandlerCache",
    # Session
    "EditorMode",
    "RuleEditingSession",
    # Interactions
    "InteractionCatalog",
    "InteractionSpec",
    "MemoryInteractionCatalog",
    # Changes
    "ChangeRecorder",
    "ChangeList",
    "ChangeRecord",
    # States
    "StateGraphStore",
    "MemoryStateGraphStore",
    # Graph
    "GraphRecompute",
    "GraphData",
    "GraphDataService",
    # Confirmation
    "ConfirmationPrompt",
    "AutoConfirmPrompt",
    "PendingConfirmationPrompt",
    # Editor
    "RuleSetEditor",
]
