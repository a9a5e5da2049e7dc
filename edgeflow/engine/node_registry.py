"""Node registry for managing workflow node types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from ..core.exceptions import UnknownNodeTypeError

if TYPE_CHECKING:
    from ..nodes.base import BaseNode, NodeProperty


@dataclass
class NodeTypeInfo:
    """Node type information for the node palette."""

    type: str
    display_name: str
    description: str
    icon: str | None = None
    group: list[str] | None = None
    properties: list[dict[str, Any]] = field(default_factory=list)


class NodeRegistry:
    """Registry mapping node type tags to executor instances."""

    def __init__(self) -> None:
        self._nodes: dict[str, type[BaseNode]] = {}
        self._instances: dict[str, BaseNode] = {}

    def get(self, node_type: str) -> BaseNode:
        """
        Get the cached executor for a node type.

        Executors are stateless, so one instance serves every run.

        Raises:
            UnknownNodeTypeError: If node type is not registered
        """
        if node_type not in self._instances:
            raise UnknownNodeTypeError(node_type)
        return self._instances[node_type]

    def has(self, node_type: str) -> bool:
        """Check if node type is registered."""
        return node_type in self._nodes

    def list(self) -> list[str]:
        """List all registered node types."""
        return list(self._nodes.keys())

    def describe(self) -> list[NodeTypeInfo]:
        """Describe every registered node type for UI rendering."""
        return [self._build_node_type_info(instance) for instance in self._instances.values()]

    def _build_node_type_info(self, instance: BaseNode) -> NodeTypeInfo:
        desc = instance.node_description
        return NodeTypeInfo(
            type=instance.type,
            display_name=desc.display_name if desc else instance.type,
            description=instance.description,
            icon=desc.icon if desc else None,
            group=desc.group if desc else None,
            properties=self._convert_properties(desc.properties) if desc else [],
        )

    def _convert_properties(self, properties: list[NodeProperty]) -> list[dict[str, Any]]:
        """Convert properties to dict format for API responses."""
        result = []
        for prop in properties:
            prop_dict: dict[str, Any] = {
                "displayName": prop.display_name,
                "name": prop.name,
                "type": prop.type,
                "default": prop.default,
            }
            if prop.required:
                prop_dict["required"] = True
            if prop.description:
                prop_dict["description"] = prop.description
            if prop.placeholder:
                prop_dict["placeholder"] = prop.placeholder
            if prop.interpolated:
                prop_dict["interpolated"] = True
            if prop.options:
                prop_dict["options"] = [
                    {"name": o.name, "value": o.value, "description": o.description}
                    for o in prop.options
                ]
            result.append(prop_dict)
        return result

    def register(self, node_class: type[BaseNode]) -> None:
        """Register a node class if not already registered."""
        instance = node_class()
        if instance.type not in self._nodes:
            self._nodes[instance.type] = node_class
            self._instances[instance.type] = instance


# Singleton instance
node_registry = NodeRegistry()


def register_builtin_nodes(registry: NodeRegistry | None = None) -> NodeRegistry:
    """Register all built-in nodes."""
    from ..nodes import (
        # Triggers
        WebhookNode,
        ScheduleNode,
        GeoTriggerNode,
        # Data processing
        TransformNode,
        FilterNode,
        MergeNode,
        # AI
        AIAnalyzeNode,
        AIGenerateNode,
        AIClassifyNode,
        # Edge
        EdgeCacheNode,
        EdgeKVNode,
        EdgeRedirectNode,
        # Output
        HttpRequestNode,
        EmailNode,
        ResponseNode,
    )

    registry = registry if registry is not None else node_registry
    all_node_classes: list[type[BaseNode]] = [
        WebhookNode,
        ScheduleNode,
        GeoTriggerNode,
        TransformNode,
        FilterNode,
        MergeNode,
        AIAnalyzeNode,
        AIGenerateNode,
        AIClassifyNode,
        EdgeCacheNode,
        EdgeKVNode,
        EdgeRedirectNode,
        HttpRequestNode,
        EmailNode,
        ResponseNode,
    ]

    for node_class in all_node_classes:
        registry.register(node_class)
    return registry
