"""Node catalog service backing the editor palette."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..core.exceptions import UnknownNodeTypeError

if TYPE_CHECKING:
    from ..engine.node_registry import NodeRegistry, NodeTypeInfo

# Palette order; groups not listed here sort after these.
GROUP_ORDER = ("trigger", "transform", "ai", "edge", "output")


class NodeService:
    """Read-only view of the registered node types."""

    def __init__(self, node_registry: NodeRegistry) -> None:
        self._node_registry = node_registry

    def list_nodes(self) -> list[dict[str, Any]]:
        return [self._to_dict(info) for info in self._node_registry.describe()]

    def get_node(self, node_type: str) -> dict[str, Any]:
        """Describe one node type.

        Raises:
            UnknownNodeTypeError: If no executor is registered for the type.
        """
        if not self._node_registry.has(node_type):
            raise UnknownNodeTypeError(node_type)
        return next(n for n in self.list_nodes() if n["type"] == node_type)

    def get_nodes_by_group(self, group: str) -> list[dict[str, Any]]:
        return [n for n in self.list_nodes() if group in (n["group"] or [])]

    def list_groups(self) -> list[dict[str, Any]]:
        """Palette groups with the node types they contain."""
        groups: dict[str, list[str]] = {}
        for node in self.list_nodes():
            for group in node["group"] or []:
                groups.setdefault(group, []).append(node["type"])

        def rank(name: str) -> tuple[int, str]:
            return (GROUP_ORDER.index(name) if name in GROUP_ORDER else len(GROUP_ORDER), name)

        return [{"name": name, "types": groups[name]} for name in sorted(groups, key=rank)]

    def _to_dict(self, info: NodeTypeInfo) -> dict[str, Any]:
        return {
            "type": info.type,
            "displayName": info.display_name,
            "description": info.description,
            "icon": info.icon,
            "group": info.group,
            "properties": info.properties,
        }
