"""Configuration and settings for StateEditor Core."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import dotenv

if TYPE_CHECKING:
    from stateeditor_core.interactions import MemoryInteractionCatalog

dotenv.load_dotenv()

DEFAULT_HANDLER_NAME = "submit"
DEFAULT_DELETE_CONFIRM_MESSAGE = "Are you sure you want to delete this rule?"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Settings:
    """Global settings for StateEditor Core."""

    log_level: str = "INFO"
    handler_name: str = DEFAULT_HANDLER_NAME
    delete_confirm_message: str = DEFAULT_DELETE_CONFIRM_MESSAGE
    interaction_catalog_path: Path | None = None

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level!r}")
        if not self.handler_name or not self.handler_name.strip():
            raise ValueError("Handler name cannot be empty")

    @classmethod
    def from_environment(cls) -> "Settings":
        """Create settings from environment variables (and a local .env file)."""
        catalog_path = os.environ.get("STATEEDITOR_INTERACTION_CATALOG")
        return cls(
            log_level=os.environ.get("STATEEDITOR_LOG_LEVEL", "INFO"),
            handler_name=os.environ.get("STATEEDITOR_HANDLER_NAME", DEFAULT_HANDLER_NAME),
            delete_confirm_message=os.environ.get(
                "STATEEDITOR_DELETE_CONFIRM_MESSAGE", DEFAULT_DELETE_CONFIRM_MESSAGE
            ),
            interaction_catalog_path=Path(catalog_path) if catalog_path else None,
        )

    @property
    def has_catalog_file(self) -> bool:
        return self.interaction_catalog_path is not None

    def load_catalog(self) -> "MemoryInteractionCatalog":
        """Load the configured interaction catalog, or the built-in one."""
        from stateeditor_core.interactions import MemoryInteractionCatalog

        if self.interaction_catalog_path is not None:
            return MemoryInteractionCatalog.from_json_file(self.interaction_catalog_path)
        return MemoryInteractionCatalog.default()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure log output and the package log level."""
    settings = settings or Settings.from_environment()
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("stateeditor_core").setLevel(settings.log_level)
