"""Merge node - combine the results of every node that ran so far."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class MergeNode(BaseNode):
    """Merge node - combine all prior node results in execution order."""

    node_description = NodeTypeDescription(
        name=NodeType.MERGE.value,
        display_name="Merge",
        description="Combine the results of all previous nodes",
        icon="fa:compress-arrows-alt",
        group=["transform"],
        properties=[
            NodeProperty(
                display_name="Strategy",
                name="strategy",
                type="options",
                default="merge",
                options=[
                    NodePropertyOption(
                        name="Merge",
                        value="merge",
                        description="Union of result fields, later results win",
                    ),
                    NodePropertyOption(
                        name="Concat",
                        value="concat",
                        description="Flatten results into one list",
                    ),
                    NodePropertyOption(
                        name="Zip",
                        value="zip",
                        description="Keep results as a positional list",
                    ),
                ],
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.MERGE.value

    @property
    def description(self) -> str:
        return "Combine the results of all previous nodes"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        strategy = self.get_parameter(node, "strategy", "merge")
        inputs = list(context.results.values())

        merged: Any
        if strategy == "concat":
            merged = []
            for item in inputs:
                if isinstance(item, (list, tuple)):
                    merged.extend(item)
                else:
                    merged.append(item)

        elif strategy == "merge":
            merged = {}
            for item in inputs:
                if isinstance(item, dict):
                    merged.update(item)

        else:
            merged = inputs

        return self.output({"merged": merged})
