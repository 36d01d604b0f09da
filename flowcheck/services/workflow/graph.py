"""Directed graph view over a workflow snapshot.

This module provides an adjacency-list view of a workflow's nodes and
edges for the validation passes. The view indexes the raw snapshot and
never changes it.

Edges whose endpoints do not resolve to a node are still indexed, so
per-node degree counts always match the edge list. Such endpoints never
become nodes of the view; ``node_type`` returns ``None`` for them.

Time Complexity:
- Construction: O(V + E)
- Node/type lookup, degree: O(1)

Space Complexity: O(V + E)
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator

from flowcheck.schemas.workflow import NodeType, WorkflowEdge, WorkflowNode
from flowcheck.services.workflow.exceptions import (
    DuplicateIdentifierError,
    GraphTooLargeError,
)


class WorkflowGraph:
    """Directed graph of workflow nodes.

    Maintains both forward and reverse adjacency for efficient
    predecessor/successor lookups.

    Example:
        >>> graph = WorkflowGraph.from_workflow(nodes, edges)
        >>> graph.get_successors("start-1")
        ['approve-1']
        >>> graph.node_type("approve-1")
        'approval'
    """

    __slots__ = ("_adjacency", "_edges", "_nodes", "_reverse_adjacency")

    def __init__(self) -> None:
        """Initialize an empty directed graph."""
        self._nodes: dict[str, WorkflowNode] = {}
        self._edges: list[WorkflowEdge] = []
        self._adjacency: defaultdict[str, list[str]] = defaultdict(list)
        self._reverse_adjacency: defaultdict[str, list[str]] = defaultdict(list)

    @classmethod
    def from_workflow(
        cls,
        nodes: Iterable[WorkflowNode],
        edges: Iterable[WorkflowEdge],
    ) -> WorkflowGraph:
        """Build a graph view from a workflow snapshot.

        Args:
            nodes: Workflow nodes, in editor order.
            edges: Workflow edges, in editor order.

        Returns:
            A populated WorkflowGraph.
        """
        graph = cls()
        for node in nodes:
            graph.add_node(node)
        for edge in edges:
            graph.add_edge(edge)
        return graph

    @property
    def node_count(self) -> int:
        """Get the number of nodes in the graph."""
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Get the number of edges in the graph, dangling ones included."""
        return len(self._edges)

    @property
    def nodes(self) -> list[WorkflowNode]:
        """Nodes in insertion order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> list[WorkflowEdge]:
        """Edges in insertion order."""
        return list(self._edges)

    @property
    def node_ids(self) -> list[str]:
        return list(self._nodes)

    @property
    def connected_ids(self) -> set[str]:
        """Every id that appears as the source or target of some edge."""
        connected: set[str] = set()
        for edge in self._edges:
            connected.add(edge.source)
            connected.add(edge.target)
        return connected

    def add_node(self, node: WorkflowNode) -> None:
        """Add a node to the graph.

        If a node with the same id already exists, the first one is kept.
        """
        self._nodes.setdefault(node.id, node)

    def add_edge(self, edge: WorkflowEdge) -> None:
        """Add a directed edge from ``edge.source`` to ``edge.target``.

        Endpoints are not added as nodes. Duplicate edges are allowed.
        """
        self._edges.append(edge)
        self._adjacency[edge.source].append(edge.target)
        self._reverse_adjacency[edge.target].append(edge.source)

    def get_node(self, node_id: str) -> WorkflowNode | None:
        return self._nodes.get(node_id)

    def node_type(self, node_id: str) -> str | None:
        """Type of the node with ``node_id``, or None if it does not exist."""
        node = self._nodes.get(node_id)
        return node.type if node is not None else None

    def nodes_of_type(self, node_type: NodeType | str) -> list[WorkflowNode]:
        """All nodes with the given type, in insertion order."""
        wanted = NodeType(node_type).value if isinstance(node_type, NodeType) else node_type
        return [node for node in self._nodes.values() if node.type == wanted]

    def get_successors(self, node_id: str) -> list[str]:
        """Get all successor ids (outgoing neighbors).

        Returns:
            List of successor ids. Empty list if node has no successors.
        """
        return self._adjacency.get(node_id, [])

    def get_predecessors(self, node_id: str) -> list[str]:
        """Get all predecessor ids (incoming neighbors).

        Returns:
            List of predecessor ids. Empty list if node has no predecessors.
        """
        return self._reverse_adjacency.get(node_id, [])

    def get_in_degree(self, node_id: str) -> int:
        """Get the number of incoming edges for a node."""
        return len(self._reverse_adjacency.get(node_id, []))

    def get_out_degree(self, node_id: str) -> int:
        """Get the number of outgoing edges for a node."""
        return len(self._adjacency.get(node_id, []))

    def __contains__(self, node_id: object) -> bool:
        """Check if a node exists in the graph."""
        return node_id in self._nodes

    def __iter__(self) -> Iterator[WorkflowNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        """Get the number of nodes in the graph."""
        return len(self._nodes)

    def __repr__(self) -> str:
        """Return string representation of the graph."""
        return f"WorkflowGraph(nodes={self.node_count}, edges={self.edge_count})"


def _duplicates(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in ids:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def ensure_graph_input_contract(
    nodes: list[WorkflowNode],
    edges: list[WorkflowEdge],
    max_nodes: int,
    max_edges: int,
) -> None:
    """Reject snapshots outside the validator's input contract.

    The validator assumes unique ids and a bounded graph size. Callers
    that accept graphs from untrusted sources run this check first.

    Raises:
        GraphTooLargeError: If node or edge count exceeds its limit.
        DuplicateIdentifierError: If node ids or edge ids repeat.
    """
    if len(nodes) > max_nodes:
        raise GraphTooLargeError(len(nodes), max_nodes, metric="nodes")
    if len(edges) > max_edges:
        raise GraphTooLargeError(len(edges), max_edges, metric="edges")

    duplicate_nodes = _duplicates(node.id for node in nodes)
    if duplicate_nodes:
        raise DuplicateIdentifierError("node", duplicate_nodes)
    duplicate_edges = _duplicates(edge.id for edge in edges)
    if duplicate_edges:
        raise DuplicateIdentifierError("edge", duplicate_edges)


__all__ = [
    "WorkflowGraph",
    "ensure_graph_input_contract",
]
