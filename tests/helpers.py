"""Builders shared by the test modules."""

from __future__ import annotations

from typing import Any

from edgeflow.engine.types import (
    Connection,
    ExecutionContext,
    NodeDefinition,
    NodeServices,
    Workflow,
)


def make_node(node_id: str, node_type: str, name: str = "", **config: Any) -> NodeDefinition:
    return NodeDefinition(id=node_id, node_type=node_type, name=name or node_id, config=config)


def make_chain(*nodes: NodeDefinition, name: str = "test", workflow_id: str | None = "wf-test") -> Workflow:
    """Workflow whose connections link the nodes in the given order."""
    connections = [Connection(a.id, b.id) for a, b in zip(nodes, nodes[1:])]
    return Workflow(name=name, nodes=list(nodes), connections=connections, id=workflow_id)


def make_context(
    data: dict[str, Any] | None = None,
    trigger_data: dict[str, Any] | None = None,
    services: NodeServices | None = None,
    results: dict[str, dict[str, Any]] | None = None,
) -> ExecutionContext:
    trigger_data = dict(trigger_data or {})
    return ExecutionContext(
        execution_id="exec-test",
        workflow=Workflow(name="test", nodes=[]),
        trigger_data=trigger_data,
        services=services or NodeServices(),
        data={**trigger_data, **(data or {})},
        results=dict(results or {}),
    )


def completion_body(content: Any) -> dict[str, Any]:
    """Chat-completion response body in the OpenAI wire shape."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "qwen-turbo",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }
