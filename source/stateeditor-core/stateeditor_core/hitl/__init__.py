"""Author confirmation for StateEditor Core."""

from stateeditor_core.hitl.protocol import (
    AutoConfirmPrompt,
    ConfirmationPrompt,
    PendingConfirmationPrompt,
)

__all__ = ["ConfirmationPrompt", "AutoConfirmPrompt", "PendingConfirmationPrompt"]
