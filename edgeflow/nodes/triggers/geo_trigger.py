"""Geo trigger node - gate a run on the requester's country."""

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


UNKNOWN_COUNTRY = "unknown"


class GeoTriggerNode(BaseNode):
    """Continue the run only when the request's country matches the rule."""

    node_description = NodeTypeDescription(
        name=NodeType.GEO_TRIGGER.value,
        display_name="Geo Trigger",
        description="Trigger workflow based on visitor geography",
        icon="fa:globe-asia",
        group=["trigger"],
        properties=[
            NodeProperty(
                display_name="Countries",
                name="countries",
                type="string",
                default="",
                placeholder="CN,HK,TW",
                description="Comma-separated ISO country codes",
            ),
            NodeProperty(
                display_name="Action",
                name="action",
                type="options",
                default="include",
                options=[
                    NodePropertyOption(
                        name="Include",
                        value="include",
                        description="Continue only for listed countries",
                    ),
                    NodePropertyOption(
                        name="Exclude",
                        value="exclude",
                        description="Continue only for countries not listed",
                    ),
                ],
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.GEO_TRIGGER.value

    @property
    def description(self) -> str:
        return "Trigger workflow based on visitor geography"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        geo = context.meta.get("geo") or {}
        country = geo.get("country") or UNKNOWN_COUNTRY

        countries = [
            c.strip().upper() for c in str(self.get_parameter(node, "countries", "")).split(",")
        ]
        action = self.get_parameter(node, "action", "include")

        is_match = country in countries if action == "include" else country not in countries

        result = {
            "triggered": is_match,
            "country": country,
            "city": geo.get("city"),
            "continent": geo.get("continent"),
            "latitude": geo.get("latitude"),
            "longitude": geo.get("longitude"),
        }
        if not is_match:
            return self.terminate(result)
        return self.output(result)
