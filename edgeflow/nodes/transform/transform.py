"""Transform node - compute a new value from the context data."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription, NodeProperty
from ...core.exceptions import ExpressionError
from ...engine.expression_engine import expression_engine
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class TransformNode(BaseNode):
    """Evaluate an expression and store the result under an output key."""

    node_description = NodeTypeDescription(
        name=NodeType.TRANSFORM.value,
        display_name="Transform",
        description="Compute a value from the workflow data with an expression",
        icon="fa:exchange-alt",
        group=["transform"],
        properties=[
            NodeProperty(
                display_name="Expression",
                name="expression",
                type="string",
                default="data",
                placeholder='{**data, "processed": true}',
                description="Expression evaluated against the current data",
            ),
            NodeProperty(
                display_name="Output Key",
                name="outputKey",
                type="string",
                default="transformed",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.TRANSFORM.value

    @property
    def description(self) -> str:
        return "Compute a value from the workflow data with an expression"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        expression = self.get_parameter(node, "expression", "data")
        output_key = self.get_parameter(node, "outputKey", "transformed")

        try:
            value = expression_engine.evaluate(expression, context.data)
        except ExpressionError as e:
            raise ExpressionError(
                f"Transform failed: {e.message}", expression=expression, node_id=node.id
            ) from e

        return self.output({output_key: value})
