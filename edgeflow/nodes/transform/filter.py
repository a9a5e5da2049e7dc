"""Filter node - stop the run when a condition does not hold."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription, NodeProperty
from ...core.exceptions import ExpressionError
from ...engine.expression_engine import expression_engine
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class FilterNode(BaseNode):
    """
    Filter node - gate the rest of the run on a boolean expression.

    A false condition ends the run early; the run still counts as
    successful because nothing went wrong, the data was just filtered out.
    """

    node_description = NodeTypeDescription(
        name=NodeType.FILTER.value,
        display_name="Filter",
        description="Continue only when a condition evaluates to true",
        icon="fa:filter",
        group=["transform"],
        properties=[
            NodeProperty(
                display_name="Condition",
                name="condition",
                type="string",
                default="true",
                placeholder='data.score >= 70 and data.status != "spam"',
                description="Expression that evaluates to true/false",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.FILTER.value

    @property
    def description(self) -> str:
        return "Continue only when a condition evaluates to true"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        condition = self.get_parameter(node, "condition", "true")

        # Plain booleans are allowed when the config is authored as JSON
        if isinstance(condition, bool):
            passed = condition
        else:
            try:
                passed = bool(expression_engine.evaluate(str(condition), context.data))
            except ExpressionError as e:
                raise ExpressionError(
                    f"Filter condition error: {e.message}",
                    expression=str(condition),
                    node_id=node.id,
                ) from e

        if not passed:
            return self.terminate({"passed": False})
        return self.output({"passed": True})
