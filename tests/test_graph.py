"""Tests for topological ordering of workflow graphs."""

from __future__ import annotations

import random

from edgeflow.engine.graph import build_execution_order, find_unordered_nodes
from edgeflow.engine.types import Connection, Workflow

from helpers import make_chain, make_node


def _workflow(node_ids: list[str], edges: list[tuple[str, str]]) -> Workflow:
    return Workflow(
        name="graph",
        nodes=[make_node(node_id, "TRANSFORM") for node_id in node_ids],
        connections=[Connection(a, b) for a, b in edges],
    )


class TestBuildExecutionOrder:
    def test_chain_order_is_exact(self):
        workflow = make_chain(*(make_node(f"n{i}", "TRANSFORM") for i in range(5)))
        assert build_execution_order(workflow) == ["n0", "n1", "n2", "n3", "n4"]

    def test_chain_declared_out_of_order(self):
        workflow = _workflow(["c", "a", "b"], [("a", "b"), ("b", "c")])
        assert build_execution_order(workflow) == ["a", "b", "c"]

    def test_diamond_breaks_ties_by_node_order(self):
        workflow = _workflow(
            ["a", "b", "c", "d"],
            [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")],
        )
        assert build_execution_order(workflow) == ["a", "b", "c", "d"]

    def test_isolated_nodes_are_included(self):
        workflow = _workflow(["x", "a", "y", "b"], [("a", "b")])
        assert build_execution_order(workflow) == ["x", "a", "y", "b"]

    def test_random_dags_respect_every_connection(self):
        rng = random.Random(42)
        for _ in range(50):
            size = rng.randint(2, 12)
            ids = [f"n{i}" for i in range(size)]
            # Edges only go from lower to higher rank, so the graph is acyclic.
            rank = ids[:]
            rng.shuffle(rank)
            edges = [
                (rank[i], rank[j])
                for i in range(size)
                for j in range(i + 1, size)
                if rng.random() < 0.3
            ]
            workflow = _workflow(ids, edges)

            order = build_execution_order(workflow)

            assert sorted(order) == sorted(ids)
            for source, target in edges:
                assert order.index(source) < order.index(target)

    def test_is_deterministic(self):
        workflow = _workflow(["a", "b", "c", "d"], [("a", "d"), ("b", "d"), ("c", "d")])
        assert build_execution_order(workflow) == build_execution_order(workflow)

    def test_cycle_members_are_omitted(self):
        workflow = _workflow(["a", "b", "c"], [("a", "b"), ("b", "a")])

        order = build_execution_order(workflow)

        assert order == ["c"]
        assert find_unordered_nodes(workflow, order) == ["a", "b"]

    def test_nodes_downstream_of_cycle_are_omitted(self):
        workflow = _workflow(["a", "b", "c"], [("a", "b"), ("b", "a"), ("b", "c")])
        assert build_execution_order(workflow) == []

    def test_edge_to_unknown_node_is_tolerated(self):
        workflow = _workflow(["a", "b"], [("a", "ghost")])
        assert build_execution_order(workflow) == ["a", "b"]

    def test_edge_from_unknown_node_is_tolerated(self):
        workflow = _workflow(["a", "b"], [("ghost", "b")])

        order = build_execution_order(workflow)

        assert order == ["a", "b"]
        assert find_unordered_nodes(workflow, order) == []

    def test_dangling_edges_do_not_hide_a_real_cycle(self):
        workflow = _workflow(["a", "b", "c"], [("ghost", "a"), ("b", "c"), ("c", "b")])

        order = build_execution_order(workflow)

        assert order == ["a"]
        assert find_unordered_nodes(workflow, order) == ["b", "c"]
