"""Response node - describe the HTTP response returned to the caller."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription, NodeProperty
from ...engine.expression_engine import stringify
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class ResponseNode(BaseNode):
    """Build the status, content type and body of the caller-facing response."""

    node_description = NodeTypeDescription(
        name=NodeType.RESPONSE.value,
        display_name="HTTP Response",
        description="Return an HTTP response to the caller",
        icon="fa:reply",
        group=["output"],
        properties=[
            NodeProperty(
                display_name="Status Code",
                name="statusCode",
                type="number",
                default=200,
            ),
            NodeProperty(
                display_name="Content Type",
                name="contentType",
                type="string",
                default="application/json",
            ),
            NodeProperty(
                display_name="Body",
                name="body",
                type="string",
                description="Response body. Defaults to the current data as JSON.",
                interpolated=True,
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.RESPONSE.value

    @property
    def description(self) -> str:
        return "Return an HTTP response to the caller"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        status_code = self.get_int_parameter(node, "statusCode", 200) or 200
        content_type = self.get_parameter(node, "contentType", "application/json")

        body = node.config.get("body")
        if body:
            body = self.interpolate(body, context)
        else:
            body = stringify(context.data)

        return self.output({"statusCode": status_code, "contentType": content_type, "body": body})
