"""Configuration module for StateEditor Core."""

from stateeditor_core.config.settings import (
    DEFAULT_DELETE_CONFIRM_MESSAGE,
    DEFAULT_HANDLER_NAME,
    Settings,
    configure_logging,
)

__all__ = [
    "Settings",
    "configure_logging",
    "DEFAULT_HANDLER_NAME",
    "DEFAULT_DELETE_CONFIRM_MESSAGE",
]
