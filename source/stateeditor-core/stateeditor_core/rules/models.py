"""Data models for state rules.

This module defines the value types edited by the rules editor:
- RuleDefinition: The classifier part of a rule (what answers it matches)
- RuleSpec: A classifier plus its consequence (destination, feedback, params)
- HandlerSet: Rules grouped by handler name, evaluated in order

The last rule of a handler is its default rule: it always matches, so it
must stay last and can never be removed.

All three compare structurally with ``==`` and are copied with ``clone()``;
no two HandlerSets share a RuleSpec after cloning.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Iterator

from stateeditor_core.config.settings import DEFAULT_HANDLER_NAME

DEFAULT_RULE_TYPE = "default"
ATOMIC_RULE_TYPE = "atomic"
DEFAULT_SUBJECT = "answer"


@dataclass
class RuleDefinition:
    """Classifier over learner answers.

    Attributes:
        rule_type: ``"default"`` for the catch-all rule, ``"atomic"`` for
            authored rules.
        name: Name of the classifier within the interaction's handler specs.
        inputs: Classifier parameters keyed by input name.
        subject: What the classifier is applied to (normally ``"answer"``).
    """
    rule_type: str = ATOMIC_RULE_TYPE
    name: str | None = None
    inputs: dict[str, Any] = field(default_factory=dict)
    subject: str = DEFAULT_SUBJECT

    @classmethod
    def default(cls) -> "RuleDefinition":
        """Create the definition of a catch-all rule."""
        return cls(rule_type=DEFAULT_RULE_TYPE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_type": self.rule_type,
            "name": self.name,
            "inputs": copy.deepcopy(self.inputs),
            "subject": self.subject,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleDefinition":
        return cls(
            rule_type=data.get("rule_type", ATOMIC_RULE_TYPE),
            name=data.get("name"),
            inputs=copy.deepcopy(data.get("inputs") or {}),
            subject=data.get("subject", DEFAULT_SUBJECT),
        )


@dataclass
class RuleSpec:
    """A single rule: a classifier plus its consequence.

    Attributes:
        description: Human-readable description of the rule.
        definition: The classifier this rule applies.
        dest: Name of the state the learner is sent to when the rule matches.
        feedback: Feedback strings shown when the rule matches, in order.
        param_changes: Parameter changes applied when the rule matches.
    """
    description: str = ""
    definition: RuleDefinition = field(default_factory=RuleDefinition)
    dest: str | None = None
    feedback: list[str] = field(default_factory=list)
    param_changes: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        description: str,
        dest: str,
        definition: RuleDefinition | None = None,
    ) -> "RuleSpec":
        """Create an authored rule with no feedback or parameter changes."""
        return cls(
            description=description,
            definition=definition or RuleDefinition(),
            dest=dest,
        )

    def clone(self) -> "RuleSpec":
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "definition": self.definition.to_dict(),
            "dest": self.dest,
            "feedback": list(self.feedback),
            "param_changes": copy.deepcopy(self.param_changes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleSpec":
        return cls(
            description=data.get("description") or "",
            definition=RuleDefinition.from_dict(data.get("definition") or {}),
            dest=data.get("dest"),
            feedback=list(data.get("feedback") or []),
            param_changes=copy.deepcopy(data.get("param_changes") or []),
        )


class HandlerSet:
    """Rules grouped by handler name.

    Within a handler, rules are evaluated in order and the first match wins.
    A valid handler is never empty, so it always ends with a default rule.
    """

    def __init__(self, handlers: dict[str, list[RuleSpec]] | None = None) -> None:
        self._handlers: dict[str, list[RuleSpec]] = {}
        for name, rules in (handlers or {}).items():
            self._handlers[name] = list(rules)

    @classmethod
    def from_handler_list(cls, data: list[dict[str, Any]]) -> "HandlerSet":
        """Build from the stored state form ``[{"name": ..., "rule_specs": [...]}]``."""
        handlers: dict[str, list[RuleSpec]] = {}
        for handler in data:
            handlers[handler["name"]] = [
                RuleSpec.from_dict(rule) for rule in handler.get("rule_specs", [])
            ]
        return cls(handlers)

    @classmethod
    def from_dict(cls, data: dict[str, list[dict[str, Any]]]) -> "HandlerSet":
        """Build from the wire form ``{name: [rule dicts]}``."""
        return cls({
            name: [RuleSpec.from_dict(rule) for rule in rules]
            for name, rules in data.items()
        })

    @classmethod
    def with_rules(
        cls, rules: list[RuleSpec], handler_name: str = DEFAULT_HANDLER_NAME
    ) -> "HandlerSet":
        return cls({handler_name: rules})

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            name: [rule.to_dict() for rule in rules]
            for name, rules in self._handlers.items()
        }

    def to_handler_list(self) -> list[dict[str, Any]]:
        return [
            {"name": name, "rule_specs": [rule.to_dict() for rule in rules]}
            for name, rules in self._handlers.items()
        ]

    def clone(self) -> "HandlerSet":
        return HandlerSet(copy.deepcopy(self._handlers))

    def rules(self, handler_name: str = DEFAULT_HANDLER_NAME) -> list[RuleSpec]:
        """Return the live rule list of a handler.

        Raises:
            KeyError: If the handler does not exist.
        """
        return self._handlers[handler_name]

    def default_rule(self, handler_name: str = DEFAULT_HANDLER_NAME) -> RuleSpec:
        """Return the last rule of a handler (the catch-all rule)."""
        rules = self.rules(handler_name)
        if not rules:
            raise IndexError(f"Handler {handler_name!r} has no rules")
        return rules[-1]

    def is_valid(self, handler_name: str = DEFAULT_HANDLER_NAME) -> bool:
        """Check that the handler exists and has a default rule to end on."""
        return bool(self._handlers.get(handler_name))

    @property
    def handler_names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, handler_name: object) -> bool:
        return handler_name in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandlerSet):
            return NotImplemented
        return self._handlers == other._handlers

    def __repr__(self) -> str:
        counts = {name: len(rules) for name, rules in self._handlers.items()}
        return f"HandlerSet({counts})"
