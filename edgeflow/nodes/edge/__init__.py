"""Edge nodes - cache, key-value storage and redirects."""

from .cache import EdgeCacheNode
from .kv import EdgeKVNode
from .redirect import EdgeRedirectNode

__all__ = [
    "EdgeCacheNode",
    "EdgeKVNode",
    "EdgeRedirectNode",
]
