"""Exploration graph data.

Rule destinations are the edges of an exploration's state graph, so any
committed rule edit can change its topology. ``GraphDataService`` rebuilds
the graph from the state store whenever it is asked to recompute.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from stateeditor_core.errors import ConfigurationError
from stateeditor_core.interactions import InteractionCatalog
from stateeditor_core.states import StateGraphStore, get_handler_list, get_interaction_id


logger = logging.getLogger(__name__)


class GraphRecompute(Protocol):
    """Protocol for services notified when the state graph may have changed."""

    def recompute(self) -> None:
        """Rebuild any derived graph data."""
        ...


@dataclass
class GraphData:
    """Snapshot of the exploration graph.

    Attributes:
        nodes: State names mapped to their display labels.
        links: Directed edges ``{"source": ..., "target": ...}``, one per
            distinct rule destination.
        init_state_name: The state the exploration starts from.
        final_state_names: States whose interaction is terminal.
    """
    nodes: dict[str, str] = field(default_factory=dict)
    links: list[dict[str, str]] = field(default_factory=list)
    init_state_name: str | None = None
    final_state_names: list[str] = field(default_factory=list)

    def successors(self, state_name: str) -> list[str]:
        return [link["target"] for link in self.links if link["source"] == state_name]

    def reachable_from(self, state_name: str) -> set[str]:
        """Names of states reachable from state_name, including itself."""
        if state_name not in self.nodes:
            return set()
        seen = {state_name}
        queue = deque([state_name])
        while queue:
            current = queue.popleft()
            for target in self.successors(current):
                if target not in seen and target in self.nodes:
                    seen.add(target)
                    queue.append(target)
        return seen

    def unreachable_state_names(self) -> list[str]:
        """States that cannot be reached from the initial state."""
        if self.init_state_name is None:
            return sorted(self.nodes)
        reachable = self.reachable_from(self.init_state_name)
        return sorted(name for name in self.nodes if name not in reachable)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": dict(self.nodes),
            "links": [dict(link) for link in self.links],
            "init_state_name": self.init_state_name,
            "final_state_names": list(self.final_state_names),
        }


class GraphDataService:
    """Computes GraphData from a state store.

    Subscribers registered with ``on_recompute`` are called with the new
    GraphData after every recompute.
    """

    def __init__(
        self,
        store: StateGraphStore,
        catalog: InteractionCatalog | None = None,
        init_state_name: str | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._init_state_name = init_state_name
        self._graph_data: GraphData | None = None
        self._listeners: list[Callable[[GraphData], None]] = []
        self.recompute_count = 0

    @property
    def graph_data(self) -> GraphData | None:
        return self._graph_data

    def on_recompute(self, listener: Callable[[GraphData], None]) -> None:
        self._listeners.append(listener)

    def recompute(self) -> None:
        self._graph_data = self._compute()
        self.recompute_count += 1
        logger.debug(
            f"Recomputed graph: {len(self._graph_data.nodes)} nodes, "
            f"{len(self._graph_data.links)} links"
        )
        for listener in self._listeners:
            listener(self._graph_data)

    def _compute(self) -> GraphData:
        data = GraphData(
            init_state_name=self._init_state_name
            or getattr(self._store, "init_state_name", None)
        )
        for state_name in self._store.list_state_names():
            record = self._store.get_state(state_name)
            data.nodes[state_name] = state_name

            if self._is_terminal(get_interaction_id(record)):
                data.final_state_names.append(state_name)

            seen_targets: set[str] = set()
            for handler in get_handler_list(record):
                for rule in handler.get("rule_specs", []):
                    dest = rule.get("dest")
                    if dest and dest not in seen_targets:
                        seen_targets.add(dest)
                        data.links.append({"source": state_name, "target": dest})
        return data

    def _is_terminal(self, interaction_id: str | None) -> bool:
        if self._catalog is None or not interaction_id:
            return False
        try:
            return self._catalog.is_terminal(interaction_id)
        except ConfigurationError:
            logger.warning(f"Unknown interaction id in graph: {interaction_id}")
            return False
