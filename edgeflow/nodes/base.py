"""Base node class for all workflow nodes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from ..core.exceptions import ExecutorError
from ..engine.expression_engine import expression_engine
from ..engine.types import NodeResult, RunControl

if TYPE_CHECKING:
    from ..engine.types import ContextView, NodeDefinition


@dataclass
class NodePropertyOption:
    """Option for a node property."""

    name: str
    value: str
    description: str | None = None


@dataclass
class NodeProperty:
    """Configuration field definition for the node palette."""

    display_name: str
    name: str
    type: str  # string, number, boolean, options, json
    default: Any = None
    required: bool = False
    description: str | None = None
    placeholder: str | None = None
    options: list[NodePropertyOption] | None = None
    interpolated: bool = False


@dataclass
class NodeTypeDescription:
    """Full description of a node type for UI generation."""

    name: str
    display_name: str
    description: str
    icon: str | None = None
    group: list[str] = field(default_factory=lambda: ["transform"])
    properties: list[NodeProperty] = field(default_factory=list)


class BaseNode(ABC):
    """
    Abstract base class for all workflow node executors.

    Executors are stateless; the registry keeps one instance per type.
    Nodes should define a class-level `node_description` for schema-driven UI.
    """

    node_description: NodeTypeDescription | None = None

    @property
    @abstractmethod
    def type(self) -> str:
        """Node type tag."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Short description of what the node does."""
        ...

    @abstractmethod
    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        """Execute the node logic."""
        ...

    def get_parameter(self, node: NodeDefinition, key: str, default: Any = None) -> Any:
        """Get a config value from the node, falling back to ``default``."""
        value = node.config.get(key)
        if value is None or value == "":
            if default is None and self._is_required_parameter(key):
                raise ExecutorError(
                    f'Missing required parameter "{key}" in node "{node.display_name}"',
                    node_id=node.id,
                )
            return default
        return value

    def get_int_parameter(self, node: NodeDefinition, key: str, default: int) -> int:
        """Get an integer config value; unparsable values fall back to ``default``."""
        value = self.get_parameter(node, key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def interpolate(self, value: Any, context: ContextView) -> Any:
        """Resolve ``${key}`` placeholders against the current context data."""
        return expression_engine.interpolate(value, context.data)

    def _is_required_parameter(self, key: str) -> bool:
        """Check if a parameter is required."""
        if not self.node_description:
            return False
        for prop in self.node_description.properties:
            if prop.name == key:
                return prop.required
        return False

    def output(self, data: dict[str, Any]) -> NodeResult:
        """Helper to create a result that lets the run continue."""
        return NodeResult(data=data)

    def terminate(self, data: dict[str, Any]) -> NodeResult:
        """Helper to create a result that ends the run without failing it."""
        return NodeResult(data=data, control=RunControl.TERMINATE)
