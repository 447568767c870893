"""Key-value storage backends and namespacing."""

from .keyvalue import (
    InMemoryKeyValueStore,
    KeyValueStore,
    Namespace,
    RedisKeyValueStore,
    build_store,
)

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "Namespace",
    "build_store",
]
