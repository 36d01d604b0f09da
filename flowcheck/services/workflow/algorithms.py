"""Graph algorithms for workflow validation.

This module provides the traversal primitives the validation passes are
built on:
- Cycle detection using DFS with path tracking
- Terminal and orphaned node detection
- Downstream reachability by node type
- Strongly connected components (Tarjan)
- Longest path depth from the workflow entry points

Every traversal uses an explicit stack, so graph depth is not bounded
by the interpreter recursion limit.

Time Complexity:
- Cycle detection: O(V + E)
- Terminal / orphan detection: O(V + E)
- Downstream reachability: O(V + E)
- Strongly connected components: O(V + E)
- Max depth: O(V * E)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from flowcheck.schemas.workflow import NodeType, WorkflowNode

if TYPE_CHECKING:
    from flowcheck.services.workflow.graph import WorkflowGraph


class GraphAlgorithms:
    """Collection of graph algorithms for workflow validation.

    All algorithms are static, read-only and allocate their working
    state per call.

    Example:
        >>> graph = WorkflowGraph.from_workflow(nodes, edges)
        >>> cycle = GraphAlgorithms.detect_cycle(graph)
        >>> if cycle:
        ...     print(" -> ".join(cycle))
    """

    @staticmethod
    def detect_cycles(graph: WorkflowGraph) -> list[list[str]]:
        """Detect cycles using DFS with a recursion stack.

        A DFS is started from every node not visited yet, so every
        connected component is searched. When an edge leads back to a
        node on the current path, the closed path from that node to the
        revisit is recorded and the search from this root stops.

        Args:
            graph: The graph to check for cycles.

        Returns:
            At most one closed path per DFS root, e.g. ``[a, b, c, a]``.

        Time Complexity: O(V + E)
        Space Complexity: O(V)

        Example:
            >>> # a -> b -> c -> a
            >>> GraphAlgorithms.detect_cycles(graph)
            [['a', 'b', 'c', 'a']]
        """
        visited: set[str] = set()
        cycles: list[list[str]] = []

        for root in graph.node_ids:
            if root in visited:
                continue

            visited.add(root)
            path: list[str] = [root]
            on_path: set[str] = {root}
            stack: list[Iterator[str]] = [iter(graph.get_successors(root))]

            while stack:
                neighbor = next(stack[-1], None)
                if neighbor is None:
                    stack.pop()
                    on_path.discard(path.pop())
                    continue

                if neighbor in on_path:
                    # Back edge - extract the cycle path
                    cycle_start = path.index(neighbor)
                    cycles.append([*path[cycle_start:], neighbor])
                    break

                if neighbor not in visited:
                    visited.add(neighbor)
                    on_path.add(neighbor)
                    path.append(neighbor)
                    stack.append(iter(graph.get_successors(neighbor)))

        return cycles

    @staticmethod
    def detect_cycle(graph: WorkflowGraph) -> list[str] | None:
        """First cycle found, or None for an acyclic graph."""
        cycles = GraphAlgorithms.detect_cycles(graph)
        return cycles[0] if cycles else None

    @staticmethod
    def find_terminal_nodes(graph: WorkflowGraph) -> list[WorkflowNode]:
        """Find nodes where execution naturally completes.

        A terminal node has no outgoing edges. Start nodes only count
        when they are completely unconnected: an isolated trigger is a
        single-step workflow, while a start node with incoming edges
        is part of a loop rather than an exit.

        Args:
            graph: The graph to analyze.

        Returns:
            Terminal nodes in insertion order.

        Time Complexity: O(V)
        """
        terminal: list[WorkflowNode] = []
        for node in graph:
            if graph.get_out_degree(node.id) > 0:
                continue
            if node.type == NodeType.START.value and graph.get_in_degree(node.id) > 0:
                continue
            terminal.append(node)
        return terminal

    @staticmethod
    def find_orphaned_nodes(graph: WorkflowGraph) -> list[WorkflowNode]:
        """Find non-start nodes that no edge touches.

        Args:
            graph: The graph to analyze.

        Returns:
            Orphaned nodes in insertion order.

        Time Complexity: O(V + E)
        """
        connected = graph.connected_ids
        return [
            node
            for node in graph
            if node.id not in connected and node.type != NodeType.START.value
        ]

    @staticmethod
    def has_downstream_node_type(
        graph: WorkflowGraph,
        node_id: str,
        node_type: NodeType | str,
    ) -> bool:
        """Check whether a node of ``node_type`` is reachable from ``node_id``.

        Follows outgoing edges only and stops at the first match. The
        origin node matches only if some path re-enters it.

        Args:
            graph: The graph to search.
            node_id: Node to search from.
            node_type: Node type to look for.

        Returns:
            True if a matching node lies on a forward path from node_id.

        Time Complexity: O(V + E)
        Space Complexity: O(V)
        """
        wanted = node_type.value if isinstance(node_type, NodeType) else node_type
        visited: set[str] = set()
        stack: list[str] = [node_id]

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)

            for successor in graph.get_successors(current):
                if graph.node_type(successor) == wanted:
                    return True
                if successor not in visited:
                    stack.append(successor)

        return False

    @staticmethod
    def strongly_connected_components(graph: WorkflowGraph) -> list[list[str]]:
        """Group ids into strongly connected components (Tarjan).

        Ids reached only as edge targets (dangling endpoints) form
        components of their own.

        Args:
            graph: The graph to analyze.

        Returns:
            Components in reverse topological order: every component
            comes after all components reachable from it.

        Time Complexity: O(V + E)
        Space Complexity: O(V)
        """
        index: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        components: list[list[str]] = []

        def visit(node_id: str) -> tuple[str, Iterator[str]]:
            index[node_id] = lowlink[node_id] = len(index)
            stack.append(node_id)
            on_stack.add(node_id)
            return node_id, iter(graph.get_successors(node_id))

        for root in graph.node_ids:
            if root in index:
                continue

            work: list[tuple[str, Iterator[str]]] = [visit(root)]
            while work:
                node_id, successors = work[-1]
                successor = next(successors, None)
                if successor is not None:
                    if successor not in index:
                        work.append(visit(successor))
                    elif successor in on_stack:
                        lowlink[node_id] = min(lowlink[node_id], index[successor])
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node_id])

                if lowlink[node_id] == index[node_id]:
                    component: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node_id:
                            break
                    components.append(component)

        return components

    @staticmethod
    def calculate_max_depth(graph: WorkflowGraph, roots: Iterable[str]) -> int:
        """Length in nodes of the longest path starting at any root.

        Each branch keeps its own set of nodes on the path: re-entering
        one of them counts that step and ends the branch, and a node with
        no successors ends the branch. Paths may re-converge (diamonds).

        Strongly connected components are collapsed, and the depth of a
        branch entering each component is computed once, sinks first.
        Inside a component that is a single loop the walk is followed
        exactly. Inside denser cyclic regions every member is counted
        once, which bounds the depth from above.

        Args:
            graph: The graph to analyze.
            roots: Entry node ids (usually the start nodes).

        Returns:
            Maximum depth, 0 when there are no roots.

        Time Complexity: O(V * E)

        Example:
            >>> # s -> a -> b, s -> b
            >>> GraphAlgorithms.calculate_max_depth(graph, ["s"])
            3
        """
        roots = list(roots)
        if not roots:
            return 0

        entry_depth: dict[str, int] = {}

        for component in GraphAlgorithms.strongly_connected_components(graph):
            members = set(component)
            inner: dict[str, list[str]] = {}
            # Deepest branch after leaving the component from each member
            exits: dict[str, int] = {}
            for node_id in component:
                successors = list(dict.fromkeys(graph.get_successors(node_id)))
                inner[node_id] = [s for s in successors if s in members]
                outer = [entry_depth[s] for s in successors if s not in members]
                if outer:
                    exits[node_id] = max(outer)

            size = len(component)
            inner_edges = sum(len(targets) for targets in inner.values())

            for entry in component:
                if inner_edges == 0:
                    entry_depth[entry] = 1 + exits.get(entry, 0)
                elif inner_edges == size:
                    # Single loop: walk it once, then re-enter the entry
                    best = size + 1
                    current = entry
                    for steps in range(1, size + 1):
                        if current in exits:
                            best = max(best, steps + exits[current])
                        current = inner[current][0]
                    entry_depth[entry] = best
                else:
                    best = size + 1
                    for node_id, depth in exits.items():
                        steps = 1 if node_id == entry else size
                        best = max(best, steps + depth)
                    entry_depth[entry] = best

        return max(entry_depth[root] for root in roots)


__all__ = [
    "GraphAlgorithms",
]
