"""State rules for StateEditor Core.

This module provides the rule value types and the per-interaction cache
used by the rules editor.
"""

from stateeditor_core.rules.models import (
    ATOMIC_RULE_TYPE,
    DEFAULT_RULE_TYPE,
    HandlerSet,
    RuleDefinition,
    RuleSpec,
)
from stateeditor_core.rules.cache import HandlerCache

__all__ = [
    # Models
    "RuleDefinition",
    "RuleSpec",
    "HandlerSet",
    "DEFAULT_RULE_TYPE",
    "ATOMIC_RULE_TYPE",
    # Cache
    "HandlerCache",
]
