"""
Key-value storage adapters.

The engine only needs get/set/delete/list-by-prefix over opaque string
values; Redis backs it in deployment and a dict backs it in tests.
"""

from .kv_store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
]
