"""Exceptions and warnings raised by StateEditor Core."""


class StateEditorError(Exception):
    """Base exception for StateEditor Core."""
    pass


class ConfigurationError(StateEditorError):
    """Raised when an interaction id is absent or unknown to the catalog."""

    def __init__(self, message: str, interaction_id: str | None = None):
        self.interaction_id = interaction_id
        super().__init__(message)


class StaleOperationError(StateEditorError, RuntimeError):
    """Raised when a deferred operation resolves against a session that has changed."""
    pass


class SessionNotOpenError(StateEditorError, RuntimeError):
    """Raised when an editing operation is called with no state open."""
    pass


class InvariantViolation(UserWarning):
    """Warning issued when an edit would break the default-rule invariant.

    Issued through ``warnings.warn`` so the session keeps running; the
    rejected operation performs no mutation.
    """
    pass


__all__ = [
    "StateEditorError",
    "ConfigurationError",
    "StaleOperationError",
    "SessionNotOpenError",
    "InvariantViolation",
]
