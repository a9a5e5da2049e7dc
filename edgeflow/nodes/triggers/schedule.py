"""Schedule node - entry point for timer-triggered runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription, NodeProperty
from ...engine.types import NodeType, utc_now

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class ScheduleNode(BaseNode):
    """Schedule trigger node - executes on a cron schedule."""

    node_description = NodeTypeDescription(
        name=NodeType.SCHEDULE.value,
        display_name="Schedule",
        description="Trigger workflow on a schedule",
        icon="fa:clock",
        group=["trigger"],
        properties=[
            NodeProperty(
                display_name="Cron Expression",
                name="cron",
                type="string",
                default="0 * * * *",
                placeholder="0 9 * * *",
                description="Standard cron expression (minute hour day month weekday)",
            ),
            NodeProperty(
                display_name="Timezone",
                name="timezone",
                type="string",
                default="UTC",
                placeholder="Asia/Shanghai",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.SCHEDULE.value

    @property
    def description(self) -> str:
        return "Trigger workflow on a schedule"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        meta = context.meta

        return self.output({
            "triggered": True,
            "scheduledTime": meta.get("scheduledTime") or utc_now().isoformat(),
            "cron": self.get_parameter(node, "cron"),
            "timezone": self.get_parameter(node, "timezone", "UTC"),
        })
