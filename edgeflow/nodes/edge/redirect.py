"""Edge redirect node - ask the caller-facing adapter to redirect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult

REDIRECT_STATUS_CODES = (301, 302, 303, 307, 308)


class EdgeRedirectNode(BaseNode):
    """Produce a redirect instruction for the response adapter."""

    node_description = NodeTypeDescription(
        name=NodeType.EDGE_REDIRECT.value,
        display_name="Edge Redirect",
        description="Redirect the requester to another URL",
        icon="fa:directions",
        group=["edge"],
        properties=[
            NodeProperty(
                display_name="URL",
                name="url",
                type="string",
                default="/",
                placeholder="https://${country}.example.com",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Status Code",
                name="statusCode",
                type="options",
                default="302",
                options=[
                    NodePropertyOption(name=f"{code}", value=str(code))
                    for code in REDIRECT_STATUS_CODES
                ],
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.EDGE_REDIRECT.value

    @property
    def description(self) -> str:
        return "Redirect the requester to another URL"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        url = self.interpolate(str(self.get_parameter(node, "url", "/")), context)
        status_code = self.get_int_parameter(node, "statusCode", 302)

        return self.output({"redirect": True, "url": url, "statusCode": status_code})
