"""Change recording for StateEditor Core."""

from stateeditor_core.changes.recorder import (
    EDIT_STATE_PROPERTY,
    ChangeList,
    ChangeRecord,
    ChangeRecorder,
)

__all__ = ["ChangeRecorder", "ChangeList", "ChangeRecord", "EDIT_STATE_PROPERTY"]
