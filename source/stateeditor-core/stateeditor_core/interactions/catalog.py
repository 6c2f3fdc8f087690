"""Interaction catalog.

Provides the metadata the rules editor needs about each interaction type:
the handler specs that describe which rule classifiers are available, and
whether the interaction is terminal (ends the exploration).
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stateeditor_core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class InteractionSpec:
    """Metadata for one interaction type.

    Attributes:
        interaction_id: Identifier of the interaction type (e.g. ``TextInput``).
        handler_specs: Handler descriptions, each ``{"name": ..., "rules": {...}}``.
        is_terminal: Whether the interaction ends the exploration.
    """

    interaction_id: str
    handler_specs: list[dict[str, Any]] = field(default_factory=list)
    is_terminal: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "handler_specs": copy.deepcopy(self.handler_specs),
            "is_terminal": self.is_terminal,
        }

    @classmethod
    def from_dict(cls, interaction_id: str, data: dict[str, Any]) -> InteractionSpec:
        return cls(
            interaction_id=interaction_id,
            handler_specs=copy.deepcopy(data.get("handler_specs", [])),
            is_terminal=bool(data.get("is_terminal", False)),
        )


def _submit_handler(*rule_names: str) -> list[dict[str, Any]]:
    return [{"name": "submit", "rules": {name: {} for name in rule_names}}]


_DEFAULT_SPECS: dict[str, dict[str, Any]] = {
    "Continue": {
        "handler_specs": _submit_handler(),
        "is_terminal": False,
    },
    "EndExploration": {
        "handler_specs": _submit_handler(),
        "is_terminal": True,
    },
    "MultipleChoiceInput": {
        "handler_specs": _submit_handler("Equals"),
        "is_terminal": False,
    },
    "NumericInput": {
        "handler_specs": _submit_handler(
            "Equals", "IsLessThan", "IsGreaterThan", "IsWithinTolerance"
        ),
        "is_terminal": False,
    },
    "TextInput": {
        "handler_specs": _submit_handler(
            "Equals", "CaseSensitiveEquals", "StartsWith", "Contains", "FuzzyEquals"
        ),
        "is_terminal": False,
    },
}


class InteractionCatalog(ABC):
    """Abstract source of interaction metadata."""

    @abstractmethod
    def spec_of(self, interaction_id: str | None) -> InteractionSpec:
        """Look up the spec of an interaction type.

        Args:
            interaction_id: The interaction type identifier.

        Returns:
            The InteractionSpec for that type.

        Raises:
            ConfigurationError: If interaction_id is absent or unknown.
        """
        ...

    @abstractmethod
    def list_interaction_ids(self) -> list[str]:
        """List the known interaction ids."""
        ...

    def is_terminal(self, interaction_id: str | None) -> bool:
        return self.spec_of(interaction_id).is_terminal


class MemoryInteractionCatalog(InteractionCatalog):
    """In-memory catalog of interaction specs."""

    def __init__(self, specs: dict[str, InteractionSpec] | None = None) -> None:
        self._specs: dict[str, InteractionSpec] = dict(specs or {})

    @classmethod
    def from_dict(cls, data: dict[str, dict[str, Any]]) -> MemoryInteractionCatalog:
        """Create from ``{interaction_id: {"handler_specs": ..., "is_terminal": ...}}``."""
        return cls({
            interaction_id: InteractionSpec.from_dict(interaction_id, spec)
            for interaction_id, spec in data.items()
        })

    @classmethod
    def from_json_file(cls, path: Path) -> MemoryInteractionCatalog:
        """Load a catalog from a JSON file.

        Raises:
            ConfigurationError: If the file cannot be read or is not a JSON object.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load interaction catalog {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Interaction catalog {path} must be a JSON object")
        logger.info(f"Loaded {len(data)} interaction specs from {path}")
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> MemoryInteractionCatalog:
        """Create a catalog with the built-in interaction types."""
        return cls.from_dict(_DEFAULT_SPECS)

    def register(self, spec: InteractionSpec) -> None:
        self._specs[spec.interaction_id] = spec

    def spec_of(self, interaction_id: str | None) -> InteractionSpec:
        if not interaction_id:
            raise ConfigurationError("Interaction id not specified.")
        spec = self._specs.get(interaction_id)
        if spec is None:
            raise ConfigurationError(
                f"Unknown interaction id: {interaction_id}", interaction_id=interaction_id
            )
        return copy.deepcopy(spec)

    def list_interaction_ids(self) -> list[str]:
        return sorted(self._specs)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {
            interaction_id: spec.to_dict()
            for interaction_id, spec in self._specs.items()
        }
