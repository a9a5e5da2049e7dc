"""Edge cache node - TTL cache reads and writes keyed by interpolated strings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...core.config import settings
from ...core.exceptions import ExecutorError
from ...engine.types import NodeType
from ...storage.cache_store import MISS

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult
    from ...storage.cache_store import CacheStore

class EdgeCacheNode(BaseNode):
    """Get, set or delete a cache entry."""

    node_description = NodeTypeDescription(
        name=NodeType.EDGE_CACHE.value,
        display_name="Edge Cache",
        description="Read or write the edge cache",
        icon="fa:database",
        group=["edge"],
        properties=[
            NodeProperty(
                display_name="Action",
                name="action",
                type="options",
                default="get",
                options=[
                    NodePropertyOption(name="Get", value="get"),
                    NodePropertyOption(name="Set", value="set", description="Store the current data"),
                    NodePropertyOption(name="Delete", value="delete"),
                ],
            ),
            NodeProperty(
                display_name="Key",
                name="key",
                type="string",
                default="cache-key",
                placeholder="cache:${url}",
                interpolated=True,
            ),
            NodeProperty(
                display_name="TTL (seconds)",
                name="ttl",
                type="number",
                default=settings.cache_default_ttl,
                description="Entries with a TTL of 0 or less use the configured default",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.EDGE_CACHE.value

    @property
    def description(self) -> str:
        return "Read or write the edge cache"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        cache = self._get_cache(node, context)
        action = self.get_parameter(node, "action", "get")
        key = self.interpolate(str(self.get_parameter(node, "key", "cache-key")), context)

        if action == "get":
            value = await cache.get(key)
            if value is MISS:
                return self.output({"cached": False, "data": None})
            return self.output({"cached": True, "data": value})

        if action == "set":
            ttl = self.get_int_parameter(node, "ttl", settings.cache_default_ttl)
            if ttl <= 0:
                ttl = settings.cache_default_ttl
            await cache.set(key, dict(context.data), ttl)
            return self.output({"cached": True, "key": key, "ttl": ttl})

        if action == "delete":
            await cache.delete(key)
            return self.output({"deleted": True, "key": key})

        raise ExecutorError(f'Unknown cache action: "{action}"', node_id=node.id)

    def _get_cache(self, node: NodeDefinition, context: ContextView) -> CacheStore:
        cache = context.services.cache
        if cache is None:
            raise ExecutorError("Cache store is not configured", node_id=node.id)
        return cache
