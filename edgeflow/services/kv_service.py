"""KV service - direct key-value access for the /api/kv routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..core.config import settings
from ..core.exceptions import UnsupportedActionError

if TYPE_CHECKING:
    from ..storage.kv_store import KVStore

logger = logging.getLogger(__name__)

BATCH_ACTIONS = ("get", "put", "delete", "increment")


class KVService:
    """Get, put, delete, list and batch operations on the shared KV store.

    Results use the same wire shape as the EDGE_KV node. A missing key is a
    ``success: false`` result, not an exception.
    """

    def __init__(self, kv: KVStore) -> None:
        self._kv = kv

    async def get(self, namespace: str, key: str) -> dict[str, Any]:
        entry = await self._kv.get(namespace, key)
        if entry is None:
            return {"success": False, "namespace": namespace, "key": key, "error": "Key not found"}
        return {
            "success": True,
            "namespace": namespace,
            "key": key,
            "value": entry.value,
            "metadata": entry.metadata,
        }

    async def put(
        self,
        namespace: str,
        key: str,
        value: Any,
        expiration_ttl: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        ttl = expiration_ttl if expiration_ttl and expiration_ttl > 0 else None
        await self._kv.put(namespace, key, value, expiration_ttl=ttl, metadata=metadata)
        return {
            "success": True,
            "namespace": namespace,
            "key": key,
            "message": "Value saved",
            "expirationTtl": ttl,
            "metadata": metadata or {},
        }

    async def delete(self, namespace: str, key: str) -> dict[str, Any]:
        existed = await self._kv.delete(namespace, key)
        return {
            "success": True,
            "namespace": namespace,
            "key": key,
            "deleted": existed,
            "message": "Value deleted",
        }

    async def list(
        self,
        namespace: str,
        prefix: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """List one page of keys; ``limit`` is clamped to 1..``settings.kv_list_limit``."""
        if limit is None:
            limit = settings.kv_list_limit
        page_size = min(max(limit, 1), settings.kv_list_limit)
        page = await self._kv.list(namespace, prefix=prefix or None, limit=page_size, cursor=cursor or None)
        return {
            "success": True,
            "namespace": namespace,
            "keys": page.keys,
            "list_complete": page.list_complete,
            "cursor": page.cursor,
        }

    async def increment(self, namespace: str, key: str, delta: int | float = 1) -> dict[str, Any]:
        previous, new_value = await self._kv.increment(namespace, key, delta)
        return {
            "success": True,
            "namespace": namespace,
            "key": key,
            "previousValue": previous,
            "newValue": new_value,
            "delta": delta,
        }

    async def batch(self, operations: list[dict[str, Any]]) -> dict[str, Any]:
        """Run operations in order; one failing operation does not stop the rest."""
        results = []
        for op in operations:
            result = await self._run_operation(op)
            results.append({**op, "result": result})

        return {
            "success": True,
            "total": len(operations),
            "successful": sum(1 for r in results if r["result"].get("success")),
            "results": results,
        }

    async def _run_operation(self, op: dict[str, Any]) -> dict[str, Any]:
        action = op.get("action")
        namespace = op.get("namespace") or "default"
        key = op.get("key")

        if action not in BATCH_ACTIONS:
            return {"success": False, "error": UnsupportedActionError(str(action), BATCH_ACTIONS).message}
        if not key:
            return {"success": False, "error": "Missing key"}

        if action == "get":
            return await self.get(namespace, key)
        if action == "put":
            return await self.put(namespace, key, op.get("value"), op.get("expirationTtl"), op.get("metadata"))
        if action == "delete":
            return await self.delete(namespace, key)

        delta = op.get("delta", 1)
        if isinstance(delta, bool) or not isinstance(delta, (int, float)):
            return {"success": False, "error": f"Invalid increment delta: {delta!r}"}
        return await self.increment(namespace, key, delta)
