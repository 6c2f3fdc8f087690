"""Rules editor for a single exploration state.

The editor owns the rules of the state that is open for editing. Every
mutation builds a new HandlerSet and passes it through ``_commit``, which
compares it with the memento (the last committed rules) and, only when they
differ, records the change, writes the rules back to the state store,
recomputes the exploration graph and updates the per-interaction cache.

The last rule of the submit handler is the default rule. It is never
deleted and never moved away from the last position.
"""

import copy
import logging
import warnings
from typing import Any

from stateeditor_core.changes import ChangeRecorder
from stateeditor_core.config import Settings
from stateeditor_core.errors import (
    ConfigurationError,
    InvariantViolation,
    SessionNotOpenError,
    StaleOperationError,
)
from stateeditor_core.events import (
    ActiveRuleChangedEvent,
    EditorEvent,
    EventBus,
    Notifier,
    RulesChangedEvent,
    WarningEvent,
    WarningsLog,
)
from stateeditor_core.graph import GraphRecompute
from stateeditor_core.hitl import ConfirmationPrompt
from stateeditor_core.interactions import InteractionCatalog, InteractionSpec
from stateeditor_core.rules import HandlerCache, HandlerSet, RuleDefinition, RuleSpec
from stateeditor_core.session import EditorMode, RuleEditingSession
from stateeditor_core.states import (
    StateGraphStore,
    get_handler_list,
    get_interaction_id,
    replace_rule_specs,
)


logger = logging.getLogger(__name__)

RULES_PROPERTY_NAME = "rules"
DEFAULT_RULE_DESCRIPTION = "Default"


class RuleSetEditor:
    """Editing session for the rules of one state.

    Operations run to completion one at a time. The only suspension point
    is the confirmation in ``delete_active_rule``; nothing is mutated until
    the confirmation resolves.
    """

    def __init__(
        self,
        catalog: InteractionCatalog,
        change_recorder: ChangeRecorder,
        state_store: StateGraphStore,
        graph: GraphRecompute,
        prompt: ConfirmationPrompt,
        notifier: Notifier | None = None,
        warnings_log: WarningsLog | None = None,
        settings: Settings | None = None,
        cache: HandlerCache | None = None,
    ) -> None:
        self._catalog = catalog
        self._change_recorder = change_recorder
        self._state_store = state_store
        self._graph = graph
        self._prompt = prompt
        self._notifier = notifier if notifier is not None else EventBus()
        self._warnings_log = warnings_log if warnings_log is not None else WarningsLog()
        self._settings = settings or Settings()
        self._cache = cache if cache is not None else HandlerCache()
        self._session: RuleEditingSession | None = None
        self._answer_choices: Any = None

    @property
    def handler_name(self) -> str:
        return self._settings.handler_name

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def warnings_log(self) -> WarningsLog:
        return self._warnings_log

    @property
    def cache(self) -> HandlerCache:
        return self._cache

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def state_name(self) -> str | None:
        return self._session.state_name if self._session else None

    @property
    def interaction_id(self) -> str | None:
        return self._session.interaction_id if self._session else None

    @property
    def mode(self) -> EditorMode | None:
        return self._session.mode if self._session else None

    @property
    def is_degraded(self) -> bool:
        return self._session is not None and self._session.is_degraded

    # Session lifecycle

    def initialize(
        self,
        handler_data: list[dict[str, Any]],
        current_interaction_id: str | None,
        current_state_name: str,
    ) -> None:
        """Start editing the rules of a state.

        A state stored without rules gets a default rule looping back to
        itself, which is committed like any other edit.

        Args:
            handler_data: The state's stored handlers, ``[{"name", "rule_specs"}]``.
            current_interaction_id: The state's interaction id. If it is absent
                or unknown, a configuration error is reported and the session
                continues without handler specs.
            current_state_name: The state being edited.
        """
        self._cache.reset()
        spec = self._lookup_interaction(current_interaction_id)

        stored = HandlerSet.from_handler_list(handler_data)
        handlers = stored
        if not stored.is_valid(self.handler_name):
            handlers = self._with_default_rule(stored, current_state_name)

        self._session = RuleEditingSession.create(
            state_name=current_state_name,
            interaction_id=current_interaction_id,
            handlers=handlers,
            handler_specs=spec.handler_specs if spec else None,
        )
        if current_interaction_id:
            self._cache.put(current_interaction_id, handlers)
        if handlers is not stored:
            self._session.memento = stored.clone()
            try:
                self._commit(handlers.clone(), reason="default_rule_added")
            except Exception:
                self._session = None
                self._cache.reset()
                raise

        logger.info(
            f"Opened rules of state {current_state_name} "
            f"({len(handlers.rules(self.handler_name))} rules, "
            f"interaction {current_interaction_id})"
        )
        self._publish_active_rule()

    def open_state(self, state_name: str) -> None:
        """Load a state from the store and start editing its rules.

        Raises:
            KeyError: If the state does not exist.
        """
        record = self._state_store.get_state(state_name)
        self.initialize(get_handler_list(record), get_interaction_id(record), state_name)

    def close(self) -> None:
        """End the editing session and discard its data."""
        if self._session is not None:
            logger.info(f"Closed rules of state {self._session.state_name}")
        self._session = None
        self._cache.reset()

    # Interaction changes

    def switch_interaction(
        self,
        new_interaction_id: str,
        current_state_name: str | None = None,
    ) -> None:
        """Change the interaction of the edited state.

        Rules previously committed under new_interaction_id in this session are
        restored. Otherwise only the default rule is kept, since the other rules
        are shaped by the old interaction; for a terminal interaction the
        default rule is turned into a self-loop.
        """
        session = self._require_session()
        current_state_name = current_state_name or session.state_name
        spec = self._lookup_interaction(new_interaction_id)

        cached = self._cache.get(new_interaction_id) if new_interaction_id else None
        if cached is not None:
            new_handlers = cached
        else:
            default_rule = session.handlers.default_rule(self.handler_name).clone()
            if spec is not None and spec.is_terminal:
                default_rule.dest = current_state_name
            new_handlers = HandlerSet.with_rules([default_rule], self.handler_name)

        previous_interaction = (session.interaction_id, session.handler_specs)
        session.interaction_id = new_interaction_id
        session.handler_specs = spec.handler_specs if spec else None
        try:
            self._commit(new_handlers, reason="interaction_changed")
        except Exception:
            session.interaction_id, session.handler_specs = previous_interaction
            raise

        if new_interaction_id:
            self._cache.put(new_interaction_id, new_handlers)
        session.memento = new_handlers.clone()
        session.active_rule_index = 0
        session.mode = EditorMode.VIEWING
        session.bump()

        logger.info(
            f"Switched state {session.state_name} to interaction {new_interaction_id} "
            f"({'restored from cache' if cached is not None else 'default rule only'})"
        )
        self._publish_active_rule()

    # Active rule

    def get_active_rule_index(self) -> int | None:
        return self._session.active_rule_index if self._session else None

    def change_active_index(self, new_index: int) -> None:
        """Select the rule shown in the editor.

        Raises:
            IndexError: If new_index is outside ``[0, len(rules) - 1]``.
        """
        session = self._require_session()
        self._check_index(new_index)
        session.active_rule_index = new_index
        session.mode = EditorMode.VIEWING
        session.bump()
        self._publish_active_rule()

    def get_active_rule(self) -> RuleSpec | None:
        """Return a copy of the active rule, or None if no state is open."""
        if self._session is None:
            return None
        rules = self._session.handlers.rules(self.handler_name)
        return rules[self._session.active_rule_index].clone()

    def set_active_rule(self, rule: RuleSpec) -> bool:
        """Replace the active rule and commit. Returns True if anything changed."""
        session = self._require_session()
        new_handlers = session.handlers.clone()
        new_handlers.rules(self.handler_name)[session.active_rule_index] = rule.clone()

        changed = self._commit(new_handlers, reason="rule_saved")
        session.mode = EditorMode.VIEWING
        self._publish_active_rule()
        return changed

    def begin_edit(self) -> RuleSpec:
        """Open the active rule for editing and return a copy of it."""
        session = self._require_session()
        session.mode = EditorMode.EDITING
        return self.get_active_rule()

    def cancel_edit(self) -> None:
        self._require_session().mode = EditorMode.VIEWING

    # Adding and removing rules

    def begin_add_rule(self) -> RuleDefinition:
        """Start drafting a new rule. Returns a blank definition to fill in."""
        session = self._require_session()
        session.mode = EditorMode.ADDING_NEW
        return RuleDefinition()

    def cancel_add_rule(self) -> None:
        """Abandon the draft. The active rule is left as it was."""
        self._require_session().mode = EditorMode.VIEWING

    def confirm_add_rule(
        self, description: str, definition: RuleDefinition | None = None
    ) -> int:
        """Add the drafted rule. Returns its index."""
        return self.create_rule(description, definition)

    def create_rule(
        self, description: str, definition: RuleDefinition | None = None
    ) -> int:
        """Add a rule that loops back to the edited state. Returns its index."""
        session = self._require_session()
        return self.add_rule(RuleSpec.new(description, session.state_name, definition))

    def add_rule(self, new_rule: RuleSpec) -> int:
        """Insert new_rule just before the default rule and make it active.

        Returns:
            The index of the new rule.
        """
        session = self._require_session()
        new_handlers = session.handlers.clone()
        rules = new_handlers.rules(self.handler_name)
        position = len(rules) - 1
        rules.insert(position, new_rule.clone())

        self._commit(new_handlers, reason="rule_added")
        session.active_rule_index = position
        session.mode = EditorMode.VIEWING
        session.bump()
        self._publish_active_rule()
        return position

    async def delete_active_rule(self) -> bool:
        """Delete the active rule after asking for confirmation.

        Returns:
            True if the rule was deleted, False if the deletion was refused
            (default rule) or declined.

        Raises:
            asyncio.CancelledError: If the confirmation was cancelled. Nothing
                is mutated.
            StaleOperationError: If the session changed while the confirmation
                was pending. Nothing is mutated.
        """
        session = self._require_session()
        index = session.active_rule_index
        if index == len(session.handlers.rules(self.handler_name)) - 1:
            self._reject("Cannot delete default rule.")
            return False

        revision = session.revision
        confirmed = await self._prompt.ask(self._settings.delete_confirm_message)
        if not confirmed:
            logger.info(f"Deletion of rule {index} in state {session.state_name} declined")
            return False
        if self._session is not session or session.revision != revision:
            raise StaleOperationError(
                f"Rules of state {session.state_name} changed while deletion was pending"
            )

        new_handlers = session.handlers.clone()
        del new_handlers.rules(self.handler_name)[index]
        self._commit(new_handlers, reason="rule_deleted")
        session.active_rule_index = 0
        session.mode = EditorMode.VIEWING
        session.bump()
        self._publish_active_rule()
        return True

    def move_rule(self, old_index: int, new_index: int) -> bool:
        """Move a rule to another position. The default rule cannot be moved.

        Returns:
            True if the move was committed.

        Raises:
            IndexError: If either index is out of range.
        """
        session = self._require_session()
        self._check_index(old_index)
        self._check_index(new_index)
        last = len(session.handlers.rules(self.handler_name)) - 1
        if last in (old_index, new_index):
            self._reject("Cannot move the default rule.")
            return False

        new_handlers = session.handlers.clone()
        rules = new_handlers.rules(self.handler_name)
        rules.insert(new_index, rules.pop(old_index))
        changed = self._commit(new_handlers, reason="rule_moved")
        session.active_rule_index = new_index
        session.bump()
        self._publish_active_rule()
        return changed

    def save(self, handlers: HandlerSet) -> bool:
        """Commit an externally edited rule set, such as a reordered list.

        The rule set is rejected unless it ends with the current default rule
        unchanged. Only the rules before it may be reordered, edited, added or
        removed.
        """
        session = self._require_session()
        if not handlers.is_valid(self.handler_name):
            self._reject("Cannot save rules without a default rule.")
            return False
        rules = handlers.rules(self.handler_name)
        if rules[-1] != session.handlers.default_rule(self.handler_name):
            self._reject("The default rule must stay last.")
            return False

        changed = self._commit(handlers.clone(), reason="rules_saved")
        if session.active_rule_index >= len(rules):
            session.active_rule_index = 0
            self._publish_active_rule()
        return changed

    # Read-only views

    def get_interaction_handlers(self) -> HandlerSet | None:
        return self._session.handlers.clone() if self._session else None

    def get_interaction_handler_specs(self) -> list[dict[str, Any]] | None:
        if self._session is None:
            return None
        return copy.deepcopy(self._session.handler_specs)

    def update_answer_choices(self, answer_choices: Any) -> None:
        """Store the answer choices offered by the current interaction."""
        self._answer_choices = copy.deepcopy(answer_choices)

    def get_answer_choices(self) -> Any:
        return copy.deepcopy(self._answer_choices)

    # Internals

    def _commit(self, new_handlers: HandlerSet, reason: str) -> bool:
        """Make new_handlers the live rules, persisting them if they changed.

        Returns:
            True if new_handlers differed from the memento.
        """
        session = self._require_session()
        if new_handlers == session.memento:
            session.handlers = new_handlers
            logger.debug(f"No change to rules of state {session.state_name} ({reason})")
            return False

        try:
            self._change_recorder.record_property_edit(
                session.state_name,
                RULES_PROPERTY_NAME,
                session.memento.to_dict(),
                new_handlers.to_dict(),
            )
            record = self._state_store.get_state(session.state_name)
            self._state_store.set_state(
                session.state_name, replace_rule_specs(record, new_handlers)
            )
            self._graph.recompute()
        except Exception as e:
            logger.error(f"Failed to commit rules of state {session.state_name}: {e}")
            session.handlers = session.memento.clone()
            raise

        session.handlers = new_handlers
        session.memento = new_handlers.clone()
        if session.interaction_id:
            self._cache.put(session.interaction_id, new_handlers)
        session.bump()

        logger.info(f"Committed rules of state {session.state_name} ({reason})")
        self._publish(RulesChangedEvent(
            state_name=session.state_name,
            interaction_id=session.interaction_id,
            handlers=new_handlers.to_dict(),
            reason=reason,
        ))
        return True

    def _lookup_interaction(self, interaction_id: str | None) -> InteractionSpec | None:
        try:
            return self._catalog.spec_of(interaction_id)
        except ConfigurationError as e:
            self._report(str(e), category=ConfigurationError.__name__, level=logging.ERROR)
            return None

    def _with_default_rule(self, handlers: HandlerSet, state_name: str) -> HandlerSet:
        self._report(
            f"State {state_name} has no default rule; adding one.",
            category=InvariantViolation.__name__,
        )
        default_rule = RuleSpec(
            description=DEFAULT_RULE_DESCRIPTION,
            definition=RuleDefinition.default(),
            dest=state_name,
        )
        rules = {name: handlers.rules(name) for name in handlers}
        rules[self.handler_name] = [default_rule]
        return HandlerSet(rules)

    def _check_index(self, index: int) -> None:
        rules = self._require_session().handlers.rules(self.handler_name)
        if not 0 <= index < len(rules):
            raise IndexError(f"Rule index {index} out of range [0, {len(rules) - 1}]")

    def _require_session(self) -> RuleEditingSession:
        if self._session is None:
            raise SessionNotOpenError("No state is open for rule editing")
        return self._session

    def _reject(self, message: str) -> None:
        warnings.warn(message, InvariantViolation, stacklevel=3)
        self._report(message, category=InvariantViolation.__name__)

    def _report(self, message: str, category: str, level: int = logging.WARNING) -> None:
        logger.log(level, message)
        self._warnings_log.add_warning(message)
        self._publish(WarningEvent(message=message, category=category))

    def _publish_active_rule(self) -> None:
        session = self._require_session()
        rule = self.get_active_rule()
        self._publish(ActiveRuleChangedEvent(
            state_name=session.state_name,
            active_rule_index=session.active_rule_index,
            rule=rule.to_dict() if rule else None,
        ))

    def _publish(self, event: EditorEvent) -> None:
        self._notifier.publish(event.event_type, event.to_dict())
