"""
Relationship Graph
==================

Directed symbol graph accumulated across turns.

ALLOWED:
- Node registration (idempotent)
- Edge registration with never-reused integer ids
- Structural metrics (counts, density, weak components)
- Exporting a node/edge list

FORBIDDEN:
- Layout or rasterization (belongs to the renderer collaborator)
- Centrality or ranking of symbols
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import networkx as nx

from ..contracts.events import GraphEdge, GraphExport


@dataclass(frozen=True)
class GraphConfig:
    """Configuration for the relationship graph."""
    # Repeated (from, to) pairs create new edges unless this is set
    deduplicate_edges: bool = False


@dataclass(frozen=True)
class GraphMetrics:
    """Immutable structural metrics."""
    node_count: int
    edge_count: int
    density: float
    weak_components_count: int


class RelationshipGraph:
    """
    Wraps a networkx MultiDiGraph. Edge keys are the edge ids.
    """

    def __init__(self, config: Optional[GraphConfig] = None):
        self._config = config or GraphConfig()
        self._graph = nx.MultiDiGraph()
        self._next_edge_id: int = 0

    def add_symbol(self, symbol: str) -> None:
        if symbol not in self._graph:
            self._graph.add_node(symbol)

    def add_relationship(self, source: str, target: str) -> Optional[GraphEdge]:
        """
        Append a directed edge; returns None only when deduplication
        suppressed it.
        """
        self.add_symbol(source)
        self.add_symbol(target)

        if self._config.deduplicate_edges and self._graph.has_edge(source, target):
            return None

        edge = GraphEdge(source=source, target=target, edge_id=self._next_edge_id)
        self._next_edge_id += 1
        self._graph.add_edge(source, target, key=edge.edge_id, label=edge.label)
        return edge

    def export(self) -> GraphExport:
        edges = sorted(
            (GraphEdge(source=u, target=v, edge_id=k) for u, v, k in self._graph.edges(keys=True)),
            key=lambda e: e.edge_id
        )
        return GraphExport(nodes=tuple(self._graph.nodes), edges=tuple(edges))

    def compute_metrics(self) -> GraphMetrics:
        if not self._graph:
            return GraphMetrics(0, 0, 0.0, 0)

        return GraphMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            density=nx.density(self._graph),
            weak_components_count=nx.number_weakly_connected_components(self._graph),
        )

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()
