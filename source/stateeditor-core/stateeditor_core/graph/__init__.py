"""Exploration graph data for StateEditor Core."""

from stateeditor_core.graph.recompute import GraphData, GraphDataService, GraphRecompute

__all__ = ["GraphRecompute", "GraphData", "GraphDataService"]
