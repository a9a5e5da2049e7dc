"""Edge KV node - namespaced key-value operations."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...core.config import settings
from ...core.exceptions import ExecutorError
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult
    from ...storage.kv_store import KVStore

class EdgeKVNode(BaseNode):
    """Get, put, delete, list or increment keys in a KV namespace."""

    node_description = NodeTypeDescription(
        name=NodeType.EDGE_KV.value,
        display_name="Edge KV",
        description="Read or write the edge key-value store",
        icon="fa:key",
        group=["edge"],
        properties=[
            NodeProperty(
                display_name="Namespace",
                name="namespace",
                type="string",
                default="default",
            ),
            NodeProperty(
                display_name="Action",
                name="action",
                type="options",
                default="get",
                options=[
                    NodePropertyOption(name="Get", value="get"),
                    NodePropertyOption(name="Put", value="put"),
                    NodePropertyOption(name="Delete", value="delete"),
                    NodePropertyOption(name="List", value="list"),
                    NodePropertyOption(name="Increment", value="increment"),
                ],
            ),
            NodeProperty(
                display_name="Key",
                name="key",
                type="string",
                default="key",
                placeholder="user:${userId}",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Value",
                name="value",
                type="json",
                description="Value to put. Defaults to the current data.",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Expiration TTL (seconds)",
                name="expirationTtl",
                type="number",
            ),
            NodeProperty(
                display_name="Prefix",
                name="prefix",
                type="string",
                default="",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Limit",
                name="limit",
                type="number",
                default=settings.kv_list_limit,
                description="Page size, capped at the configured KV list limit",
            ),
            NodeProperty(
                display_name="Cursor",
                name="cursor",
                type="string",
                default="",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Delta",
                name="delta",
                type="number",
                default=1,
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.EDGE_KV.value

    @property
    def description(self) -> str:
        return "Read or write the edge key-value store"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        kv = self._get_store(node, context)
        namespace = self.get_parameter(node, "namespace", "default")
        action = self.get_parameter(node, "action", "get")
        key = self.interpolate(str(self.get_parameter(node, "key", "key")), context)

        result: dict[str, Any] = {"action": action, "namespace": namespace, "key": key}

        if action == "get":
            entry = await kv.get(namespace, key)
            if entry is None:
                result.update(success=False, value=None, error="Key not found")
            else:
                result.update(success=True, value=entry.value, metadata=entry.metadata)

        elif action == "put":
            value = node.config.get("value")
            value = dict(context.data) if value is None else self.interpolate(value, context)
            ttl = node.config.get("expirationTtl")
            await kv.put(namespace, key, value, expiration_ttl=int(ttl) if ttl else None)
            result.update(success=True, expirationTtl=int(ttl) if ttl else None)

        elif action == "delete":
            existed = await kv.delete(namespace, key)
            result.update(success=True, deleted=existed)

        elif action == "list":
            prefix = self.interpolate(self.get_parameter(node, "prefix", ""), context)
            cursor = self.interpolate(self.get_parameter(node, "cursor", ""), context)
            limit = self.get_int_parameter(node, "limit", settings.kv_list_limit)
            page = await kv.list(
                namespace,
                prefix=prefix or None,
                limit=min(max(limit, 1), settings.kv_list_limit),
                cursor=cursor or None,
            )
            result.update(
                success=True,
                keys=page.keys,
                list_complete=page.list_complete,
                cursor=page.cursor,
            )

        elif action == "increment":
            delta = self.get_parameter(node, "delta", 1)
            if not isinstance(delta, (int, float)) or isinstance(delta, bool):
                try:
                    delta = float(delta) if "." in str(delta) else int(delta)
                except (TypeError, ValueError):
                    raise ExecutorError(f"Invalid increment delta: {delta!r}", node_id=node.id)
            previous, new_value = await kv.increment(namespace, key, delta)
            result.update(success=True, previousValue=previous, newValue=new_value, delta=delta)

        else:
            raise ExecutorError(f'Unknown KV action: "{action}"', node_id=node.id)

        return self.output(result)

    def _get_store(self, node: NodeDefinition, context: ContextView) -> KVStore:
        kv = context.services.kv
        if kv is None:
            raise ExecutorError("KV store is not configured", node_id=node.id)
        return kv
