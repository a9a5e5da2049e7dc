"""TTL cache backing the EDGE_CACHE node."""

from __future__ import annotations

import asyncio
import copy
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable


class _Miss:
    """Sentinel returned by ``CacheStore.get`` when a key is absent or expired."""

    _instance: _Miss | None = None

    def __new__(cls) -> _Miss:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS = _Miss()


class CacheStore(ABC):
    """Key/value cache with per-entry time-to-live."""

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Return the stored value or ``MISS``."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store ``value`` for ``ttl_seconds``; last writer wins."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float


class InMemoryCacheStore(CacheStore):
    """Process-local cache; values are copied in and out so runs never share objects."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, _CacheEntry] = {}
        self._clock = clock
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return MISS
        if entry.expires_at <= self._clock():
            self._entries.pop(key, None)
            return MISS
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = _CacheEntry(
            value=copy.deepcopy(value),
            expires_at=self._clock() + max(ttl_seconds, 0),
        )

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        async with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
