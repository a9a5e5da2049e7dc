"""Execution ordering for workflow graphs (Kahn's algorithm)."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Workflow


def build_execution_order(workflow: Workflow) -> list[str]:
    """
    Return node ids so that every connection's source precedes its target.

    Ties are broken by node order: among nodes that become ready together,
    the one discovered first runs first. Nodes on a cycle never reach zero
    in-degree and are left out. Connections naming an unknown source or
    target are skipped, so they neither block nor add nodes.
    """
    in_degree: dict[str, int] = {}
    adjacency: dict[str, list[str]] = {}

    for node in workflow.nodes:
        in_degree[node.id] = 0
        adjacency[node.id] = []

    for conn in workflow.connections:
        if conn.source not in adjacency or conn.target not in in_degree:
            continue
        adjacency[conn.source].append(conn.target)
        in_degree[conn.target] += 1

    queue: deque[str] = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
    order: list[str] = []

    while queue:
        node_id = queue.popleft()
        order.append(node_id)

        for next_id in adjacency.get(node_id, []):
            in_degree[next_id] -= 1
            if in_degree[next_id] == 0:
                queue.append(next_id)

    return order


def find_unordered_nodes(workflow: Workflow, order: list[str]) -> list[str]:
    """Return ids of workflow nodes missing from an execution order."""
    scheduled = set(order)
    return [node.id for node in workflow.nodes if node.id not in scheduled]
