"""Namespaced key-value store backing the EDGE_KV node."""

from __future__ import annotations

import asyncio
import base64
import copy
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class KVEntry:
    """Stored value plus its metadata."""

    value: Any
    metadata: dict[str, Any] = field(default_factory=dict)
    expiration: float | None = None


@dataclass
class KVListResult:
    """One page of a ``list`` call."""

    keys: list[dict[str, Any]]
    list_complete: bool
    cursor: str | None = None


class KVStore(ABC):
    """Key-value storage partitioned by namespace."""

    @abstractmethod
    async def get(self, namespace: str, key: str) -> KVEntry | None:
        """Return the entry for ``key`` or None."""

    @abstractmethod
    async def put(
        self,
        namespace: str,
        key: str,
        value: Any,
        expiration_ttl: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Store ``value`` under ``key``; last writer wins."""

    @abstractmethod
    async def delete(self, namespace: str, key: str) -> bool:
        """Remove ``key``; returns whether it existed."""

    @abstractmethod
    async def list(
        self,
        namespace: str,
        prefix: str | None = None,
        limit: int = 100,
        cursor: str | None = None,
    ) -> KVListResult:
        """List keys in name order, ``limit`` at a time.

        Raises:
            ValueError: If ``limit`` is less than 1.
        """

    @abstractmethod
    async def increment(self, namespace: str, key: str, delta: int | float = 1) -> tuple[Any, Any]:
        """Add ``delta`` to a numeric value; returns (previous, new)."""


def encode_cursor(key: str) -> str:
    return base64.urlsafe_b64encode(key.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    return base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")


class InMemoryKVStore(KVStore):
    """Process-local KV store for development and tests."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._namespaces: dict[str, dict[str, KVEntry]] = {}
        self._clock = clock
        self._lock = asyncio.Lock()

    def _namespace(self, namespace: str) -> dict[str, KVEntry]:
        return self._namespaces.setdefault(namespace, {})

    def _live_entry(self, namespace: str, key: str) -> KVEntry | None:
        entries = self._namespace(namespace)
        entry = entries.get(key)
        if entry is not None and entry.expiration is not None and entry.expiration <= self._clock():
            del entries[key]
            return None
        return entry

    async def get(self, namespace: str, key: str) -> KVEntry | None:
        entry = self._live_entry(namespace, key)
        return copy.deepcopy(entry) if entry else None

    async def put(
        self,
        namespace: str,
        key: str,
        value: Any,
        expiration_ttl: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        expiration = self._clock() + expiration_ttl if expiration_ttl else None
        self._namespace(namespace)[key] = KVEntry(
            value=copy.deepcopy(value),
            metadata=dict(metadata or {}),
            expiration=expiration,
        )

    async def delete(self, namespace: str, key: str) -> bool:
        return self._namespace(namespace).pop(key, None) is not None

    async def list(
        self,
        namespace: str,
        prefix: str | None = None,
        limit: int = 100,
        cursor: str | None = None,
    ) -> KVListResult:
        if limit < 1:
            raise ValueError(f"KV list limit must be at least 1, got {limit}")

        async with self._lock:
            after = decode_cursor(cursor) if cursor else None
            names = sorted(
                name
                for name in list(self._namespace(namespace))
                if self._live_entry(namespace, name) is not None
                and (not prefix or name.startswith(prefix))
                and (after is None or name > after)
            )

            page = names[:limit]
            entries = self._namespace(namespace)
            keys = [
                {
                    "name": name,
                    "expiration": entries[name].expiration,
                    "metadata": dict(entries[name].metadata),
                }
                for name in page
            ]
            complete = len(names) <= limit
            return KVListResult(
                keys=keys,
                list_complete=complete,
                cursor=None if complete or not page else encode_cursor(page[-1]),
            )

    async def increment(self, namespace: str, key: str, delta: int | float = 1) -> tuple[Any, Any]:
        async with self._lock:
            entry = self._live_entry(namespace, key)
            previous = entry.value if entry else 0
            base = previous if isinstance(previous, (int, float)) and not isinstance(previous, bool) else 0
            new_value = base + delta
            self._namespace(namespace)[key] = KVEntry(
                value=new_value,
                metadata=entry.metadata if entry else {},
                expiration=entry.expiration if entry else None,
            )
            return previous, new_value
