"""Session management for StateEditor Core."""

from stateeditor_core.session.state import EditorMode, RuleEditingSession

__all__ = ["EditorMode", "RuleEditingSession"]
