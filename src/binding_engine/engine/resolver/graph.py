"""
Dependency graph snapshot and upstream search.

Graphs come from the embedding application and may be malformed: edges can
reference nodes that are not declared, and cycles are possible. Nothing here
raises for such shapes; traversal is bounded by a visited set.

Traversal is synchronous and iterative (explicit work-list) so adversarial
graphs cannot exhaust the call stack.
"""

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class FlowNode(BaseModel):
    """Node of an automation flow, as seen by the resolver."""

    model_config = {"extra": "ignore"}

    id: str = Field(min_length=1, description="Node id, unique within the graph")
    type: str | None = Field(default=None, description="Node type identifier")
    label: str | None = Field(default=None, description="Display label")
    alias: str | None = Field(default=None, description="User-assigned display alias")
    output_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Custom display names keyed by full path or output name",
    )
    inputs: dict[str, Any] = Field(
        default_factory=dict, description="Configured inputs (drive dynamic outputs)"
    )
    loop_enabled: bool = Field(default=False, description="Node iterates over a collection")

    @property
    def display_label(self) -> str:
        return self.alias or self.label or self.id


class Edge(BaseModel):
    """Directed dependency edge: target depends on source."""

    model_config = {"extra": "ignore"}

    source: str
    target: str


class DependencyGraph(BaseModel):
    """
    Immutable snapshot of a flow's nodes and edges.

    Example:
        >>> graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
        >>> graph.upstream_node_ids("c")
        ['b', 'a']
    """

    model_config = {"frozen": True}

    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    @classmethod
    def from_edges(
        cls, edges: Iterable[tuple[str, str]], nodes: Iterable[FlowNode] | None = None
    ) -> "DependencyGraph":
        """Build a graph from (source, target) pairs."""
        return cls(
            nodes=list(nodes or ()),
            edges=[Edge(source=source, target=target) for source, target in edges],
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "DependencyGraph":
        """
        Build a graph from an editor document payload.

        Accepts {"nodes": [...], "edges": [...]} where node attributes may sit
        at top level or under a "data" key.
        """
        nodes = []
        for raw in payload.get("nodes") or ():
            data = dict(raw.get("data") or {})
            data.update({key: value for key, value in raw.items() if key != "data"})
            nodes.append(FlowNode.model_validate(data))
        edges = [Edge.model_validate(raw) for raw in payload.get("edges") or ()]
        return cls(nodes=nodes, edges=edges)

    def node(self, node_id: str) -> FlowNode | None:
        for candidate in self.nodes:
            if candidate.id == node_id:
                return candidate
        return None

    def node_ids(self) -> set[str]:
        """Declared node ids plus every id mentioned by an edge."""
        ids = {node.id for node in self.nodes}
        for edge in self.edges:
            ids.add(edge.source)
            ids.add(edge.target)
        return ids

    def has_node(self, node_id: str) -> bool:
        return node_id in self.node_ids()

    def incoming(self) -> dict[str, list[str]]:
        """Adjacency snapshot: node id -> source ids of its incoming edges."""
        adjacency: dict[str, list[str]] = {}
        for edge in self.edges:
            sources = adjacency.setdefault(edge.target, [])
            if edge.source not in sources:
                sources.append(edge.source)
        return adjacency

    def upstream_node_ids(self, target_node_id: str) -> list[str]:
        """
        All nodes the target transitively depends on, nearest first.

        The target itself is never included, even when it sits on a cycle.
        An unknown target yields an empty list.
        """
        if not self.has_node(target_node_id):
            logger.debug(f"Upstream search for unknown node '{target_node_id}'")
            return []

        incoming = self.incoming()
        visited = {target_node_id}
        upstream: list[str] = []
        queue = deque([target_node_id])

        while queue:
            current = queue.popleft()
            for source in incoming.get(current, ()):
                if source in visited:
                    continue
                visited.add(source)
                upstream.append(source)
                queue.append(source)

        logger.debug(f"Node '{target_node_id}' has {len(upstream)} upstream nodes")
        return upstream

    def has_cycle(self) -> bool:
        """Check for cycles with Kahn's algorithm."""
        ids = self.node_ids()
        in_degree = dict.fromkeys(ids, 0)
        outgoing: dict[str, list[str]] = {node_id: [] for node_id in ids}
        for edge in self.edges:
            outgoing[edge.source].append(edge.target)
            in_degree[edge.target] += 1

        queue = deque(node_id for node_id in ids if in_degree[node_id] == 0)
        processed = 0
        while queue:
            current = queue.popleft()
            processed += 1
            for neighbor in outgoing[current]:
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        return processed != len(ids)


__all__ = [
    "FlowNode",
    "Edge",
    "DependencyGraph",
]
