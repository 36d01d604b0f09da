"""Tests for graph algorithms.

Test suite for cycle detection, terminal/orphan detection, downstream
reachability and max path depth.
"""

import time

import pytest

from flowcheck.schemas.workflow import NodeType, WorkflowEdge, WorkflowNode
from flowcheck.services.workflow.algorithms import GraphAlgorithms
from flowcheck.services.workflow.graph import WorkflowGraph


def build_graph(
    nodes: list[tuple[str, str]],
    edges: list[tuple[str, str]],
) -> WorkflowGraph:
    """Build a graph from (id, type) pairs and (source, target) pairs."""
    return WorkflowGraph.from_workflow(
        [WorkflowNode(id=node_id, type=node_type) for node_id, node_type in nodes],
        [
            WorkflowEdge(id=f"e{i}", source=source, target=target)
            for i, (source, target) in enumerate(edges)
        ],
    )


def chain(length: int) -> WorkflowGraph:
    ids = [f"n{i}" for i in range(length)]
    nodes = [(ids[0], "start"), *[(node_id, "action") for node_id in ids[1:]]]
    return build_graph(nodes, list(zip(ids, ids[1:], strict=False)))


def layered(layers: int, width: int, self_loop: bool = False) -> WorkflowGraph:
    """Start node followed by fully connected layers of action nodes.

    With ``self_loop`` the first node of the last layer loops onto itself.
    """
    rows = [[f"l{layer}-{i}" for i in range(width)] for layer in range(layers)]
    nodes = [("s", "start"), *[(node_id, "action") for row in rows for node_id in row]]
    edges = [("s", node_id) for node_id in rows[0]]
    for upper, lower in zip(rows, rows[1:], strict=False):
        edges.extend((source, target) for source in upper for target in lower)
    if self_loop:
        edges.append((rows[-1][0], rows[-1][0]))
    return build_graph(nodes, edges)


# =============================================================================
# Cycle Detection
# =============================================================================


class TestCycleDetection:
    """Tests for detect_cycles / detect_cycle."""

    def test_acyclic_graph(self) -> None:
        graph = build_graph(
            [("s", "start"), ("a", "action"), ("b", "action"), ("c", "end")],
            [("s", "a"), ("s", "b"), ("a", "c"), ("b", "c")],
        )

        assert GraphAlgorithms.detect_cycles(graph) == []
        assert GraphAlgorithms.detect_cycle(graph) is None

    def test_simple_cycle_path(self) -> None:
        """The cycle is reported as a closed path."""
        graph = build_graph(
            [("a", "action"), ("b", "action"), ("c", "action")],
            [("a", "b"), ("b", "c"), ("c", "a")],
        )

        assert GraphAlgorithms.detect_cycles(graph) == [["a", "b", "c", "a"]]

    def test_cycle_through_start_node(self) -> None:
        graph = build_graph([("s", "start"), ("a", "action")], [("s", "a"), ("a", "s")])

        assert GraphAlgorithms.detect_cycle(graph) == ["s", "a", "s"]

    def test_self_loop(self) -> None:
        graph = build_graph([("a", "action")], [("a", "a")])

        assert GraphAlgorithms.detect_cycles(graph) == [["a", "a"]]

    def test_cycle_not_reachable_from_start(self) -> None:
        """Every component is searched, not only the ones reachable from a start."""
        graph = build_graph(
            [("s", "start"), ("e", "end"), ("x", "action"), ("y", "action")],
            [("s", "e"), ("x", "y"), ("y", "x")],
        )

        assert GraphAlgorithms.detect_cycles(graph) == [["x", "y", "x"]]

    def test_one_cycle_per_component(self) -> None:
        graph = build_graph(
            [("a", "action"), ("b", "action"), ("c", "action"), ("d", "action")],
            [("a", "b"), ("b", "a"), ("c", "d"), ("d", "c")],
        )

        assert GraphAlgorithms.detect_cycles(graph) == [["a", "b", "a"], ["c", "d", "c"]]

    def test_dangling_edge_is_not_a_cycle(self) -> None:
        graph = build_graph([("s", "start")], [("s", "ghost")])

        assert GraphAlgorithms.detect_cycles(graph) == []

    @pytest.mark.slow
    def test_deep_chain_does_not_hit_recursion_limit(self) -> None:
        graph = chain(5000)

        assert GraphAlgorithms.detect_cycles(graph) == []


# =============================================================================
# Terminal and Orphaned Nodes
# =============================================================================


class TestTerminalNodes:
    """Tests for find_terminal_nodes."""

    def test_nodes_without_outgoing_edges(self) -> None:
        graph = build_graph(
            [("s", "start"), ("a", "action"), ("b", "action")],
            [("s", "a"), ("s", "b")],
        )

        assert [n.id for n in GraphAlgorithms.find_terminal_nodes(graph)] == ["a", "b"]

    def test_isolated_start_is_terminal(self) -> None:
        graph = build_graph([("s", "start")], [])

        assert [n.id for n in GraphAlgorithms.find_terminal_nodes(graph)] == ["s"]

    def test_start_with_incoming_edges_is_not_terminal(self) -> None:
        graph = build_graph([("s", "start"), ("a", "action")], [("a", "s")])

        assert GraphAlgorithms.find_terminal_nodes(graph) == []

    def test_pure_cycle_has_no_terminal(self) -> None:
        graph = build_graph([("s", "start"), ("a", "action")], [("s", "a"), ("a", "s")])

        assert GraphAlgorithms.find_terminal_nodes(graph) == []


class TestOrphanedNodes:
    """Tests for find_orphaned_nodes."""

    def test_unconnected_non_start_nodes(self) -> None:
        graph = build_graph(
            [("s", "start"), ("x", "action"), ("e", "end"), ("y", "decision")],
            [("s", "e")],
        )

        assert [n.id for n in GraphAlgorithms.find_orphaned_nodes(graph)] == ["x", "y"]

    def test_isolated_start_is_not_orphaned(self) -> None:
        graph = build_graph([("s", "start")], [])

        assert GraphAlgorithms.find_orphaned_nodes(graph) == []

    def test_dangling_edge_connects_its_existing_endpoint(self) -> None:
        graph = build_graph([("s", "start"), ("x", "action")], [("x", "ghost")])

        assert GraphAlgorithms.find_orphaned_nodes(graph) == []


# =============================================================================
# Downstream Reachability
# =============================================================================


class TestDownstreamNodeType:
    """Tests for has_downstream_node_type."""

    @pytest.fixture
    def graph(self) -> WorkflowGraph:
        return build_graph(
            [("s", "start"), ("a", "action"), ("p", "approval"), ("e", "end")],
            [("s", "a"), ("a", "p"), ("p", "e")],
        )

    def test_finds_transitive_successor(self, graph: WorkflowGraph) -> None:
        assert GraphAlgorithms.has_downstream_node_type(graph, "s", NodeType.APPROVAL)
        assert GraphAlgorithms.has_downstream_node_type(graph, "a", "approval")

    def test_does_not_look_upstream(self, graph: WorkflowGraph) -> None:
        assert not GraphAlgorithms.has_downstream_node_type(graph, "e", NodeType.APPROVAL)
        assert not GraphAlgorithms.has_downstream_node_type(graph, "p", NodeType.APPROVAL)

    def test_origin_matches_only_when_re_entered(self) -> None:
        graph = build_graph(
            [("p", "approval"), ("a", "action")],
            [("p", "a"), ("a", "p")],
        )

        assert GraphAlgorithms.has_downstream_node_type(graph, "p", NodeType.APPROVAL)

    def test_terminates_on_cycles_without_match(self) -> None:
        graph = build_graph(
            [("a", "action"), ("b", "action")],
            [("a", "b"), ("b", "a")],
        )

        assert not GraphAlgorithms.has_downstream_node_type(graph, "a", NodeType.APPROVAL)


# =============================================================================
# Strongly Connected Components
# =============================================================================


class TestStronglyConnectedComponents:
    """Tests for strongly_connected_components."""

    def test_acyclic_graph_has_singleton_components(self) -> None:
        graph = build_graph([("s", "start"), ("a", "action")], [("s", "a")])

        assert GraphAlgorithms.strongly_connected_components(graph) == [["a"], ["s"]]

    def test_loop_members_are_grouped(self) -> None:
        """Downstream components come first."""
        graph = build_graph(
            [("s", "start"), ("a", "action"), ("b", "action")],
            [("s", "a"), ("a", "b"), ("b", "a")],
        )

        components = GraphAlgorithms.strongly_connected_components(graph)

        assert [sorted(component) for component in components] == [["a", "b"], ["s"]]

    def test_dangling_target_is_its_own_component(self) -> None:
        graph = build_graph([("s", "start")], [("s", "ghost")])

        assert GraphAlgorithms.strongly_connected_components(graph) == [["ghost"], ["s"]]

    @pytest.mark.slow
    def test_deep_chain_does_not_recurse(self) -> None:
        assert len(GraphAlgorithms.strongly_connected_components(chain(5000))) == 5000


# =============================================================================
# Max Depth
# =============================================================================


class TestMaxDepth:
    """Tests for calculate_max_depth."""

    def test_no_roots(self) -> None:
        graph = build_graph([("a", "action")], [])

        assert GraphAlgorithms.calculate_max_depth(graph, []) == 0

    def test_single_node(self) -> None:
        graph = build_graph([("s", "start")], [])

        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 1

    def test_longest_branch_wins(self) -> None:
        graph = build_graph(
            [("s", "start"), ("a", "action"), ("b", "action")],
            [("s", "a"), ("a", "b"), ("s", "b")],
        )

        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 3

    def test_multiple_roots(self) -> None:
        graph = build_graph(
            [("s1", "start"), ("s2", "start"), ("a", "action"), ("b", "action")],
            [("s1", "a"), ("s2", "b"), ("b", "a")],
        )

        assert GraphAlgorithms.calculate_max_depth(graph, ["s1", "s2"]) == 3

    def test_dangling_successor_counts_as_leaf(self) -> None:
        graph = build_graph([("s", "start")], [("s", "ghost")])

        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 2

    def test_cycle_re_entry_counts_one_step(self) -> None:
        """s -> a -> s measures s, a and the re-entered s."""
        graph = build_graph([("s", "start"), ("a", "action")], [("s", "a"), ("a", "s")])

        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 3

    def test_ring_counts_every_member_and_re_entry(self) -> None:
        ids = [f"n{i}" for i in range(30)]
        edges = [*zip(ids, ids[1:], strict=False), (ids[-1], ids[0])]
        graph = build_graph([(node_id, "action") for node_id in ids], edges)

        assert GraphAlgorithms.calculate_max_depth(graph, ["n0"]) == 31

    def test_self_loop_counts_one_step(self) -> None:
        """s -> x -> x measures s, x and the re-entered x."""
        graph = build_graph(
            [("s", "start"), ("x", "action"), ("e", "end")],
            [("s", "x"), ("x", "x"), ("x", "e")],
        )

        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 3

    def test_loop_is_walked_once_before_re_entry(self) -> None:
        graph = build_graph(
            [("s", "start"), ("a", "action"), ("b", "decision"), ("c", "action")],
            [("s", "a"), ("a", "b"), ("b", "c"), ("c", "a"), ("b", "e")],
        )

        # s, a, b, c and the re-entered a
        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 5

    def test_loop_exit_leads_to_longer_branch(self) -> None:
        """Leaving a loop from its second member counts two loop steps."""
        ids = [f"t{i}" for i in range(6)]
        graph = build_graph(
            [("s", "start"), ("a", "action"), ("b", "action"), *[(i, "action") for i in ids]],
            [("s", "a"), ("a", "b"), ("b", "a"), ("b", ids[0]), *zip(ids, ids[1:], strict=False)],
        )

        # s, a, b, then the six-node tail
        assert GraphAlgorithms.calculate_max_depth(graph, ["s"]) == 9

    def test_dense_cyclic_region(self) -> None:
        graph = build_graph(
            [("a", "start"), ("b", "action"), ("c", "action")],
            [("a", "b"), ("b", "a"), ("b", "c"), ("c", "b")],
        )

        assert GraphAlgorithms.calculate_max_depth(graph, ["a"]) == 4

    def test_wide_layered_graph_with_loop_is_fast(self) -> None:
        """Path count grows exponentially with the layers; work does not."""
        graph = layered(layers=11, width=4, self_loop=True)

        started = time.time()
        depth = GraphAlgorithms.calculate_max_depth(graph, ["s"])
        elapsed = time.time() - started

        # s, eleven layers, then the re-entered looping node
        assert depth == 13
        assert elapsed < 1.0

    @pytest.mark.slow
    def test_deep_chain_is_exact(self) -> None:
        graph = chain(5000)

        assert GraphAlgorithms.calculate_max_depth(graph, ["n0"]) == 5000
