"""Webhook node - entry point for HTTP-triggered runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...engine.types import META_KEY, NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class WebhookNode(BaseNode):
    """Webhook trigger node - exposes the incoming request to later nodes."""

    node_description = NodeTypeDescription(
        name=NodeType.WEBHOOK.value,
        display_name="Webhook",
        description="Trigger workflow via HTTP webhook",
        icon="fa:bolt",
        group=["trigger"],
        properties=[
            NodeProperty(
                display_name="Path",
                name="path",
                type="string",
                default="/webhook",
                placeholder="/orders",
            ),
            NodeProperty(
                display_name="HTTP Method",
                name="method",
                type="options",
                default="POST",
                options=[
                    NodePropertyOption(name="POST", value="POST"),
                    NodePropertyOption(name="GET", value="GET"),
                    NodePropertyOption(name="PUT", value="PUT"),
                    NodePropertyOption(name="DELETE", value="DELETE"),
                ],
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.WEBHOOK.value

    @property
    def description(self) -> str:
        return "Trigger workflow via HTTP webhook"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        meta = context.meta
        body = {key: value for key, value in context.data.items() if key != META_KEY}

        # Manual runs carry no request metadata; fall back to the node's own config
        return self.output({
            "triggered": True,
            "method": meta.get("method") or self.get_parameter(node, "method", "POST"),
            "headers": dict(meta.get("headers") or {}),
            "body": body,
        })
