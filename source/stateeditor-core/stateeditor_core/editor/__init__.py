"""State rules editor for StateEditor Core."""

from stateeditor_core.editor.rule_set_editor import (
    DEFAULT_RULE_DESCRIPTION,
    RULES_PROPERTY_NAME,
    RuleSetEditor,
)

__all__ = ["RuleSetEditor", "RULES_PROPERTY_NAME", "DEFAULT_RULE_DESCRIPTION"]
