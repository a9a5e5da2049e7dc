"""Storage layer for workflows, runs, cache and KV data."""

from .cache_store import MISS, CacheStore, InMemoryCacheStore
from .kv_store import KVEntry, KVListResult, KVStore, InMemoryKVStore
from .workflow_store import WorkflowStore, WebhookRegistration, workflow_from_dict
from .execution_store import ExecutionStore

__all__ = [
    "MISS",
    "CacheStore",
    "InMemoryCacheStore",
    "KVEntry",
    "KVListResult",
    "KVStore",
    "InMemoryKVStore",
    "WorkflowStore",
    "WebhookRegistration",
    "workflow_from_dict",
    "ExecutionStore",
]
