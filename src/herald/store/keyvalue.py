"""Namespaced key-value storage for robot and authorization data.

This module provides an abstract store interface with in-memory (for
development and tests) and Redis-backed (for production) implementations,
plus a Namespace wrapper that isolates subsystems within a shared store.
"""

import fnmatch
import re
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import redis

from ..infrastructure.logging_config import get_logger

if TYPE_CHECKING:
    from ..models.config import RedisSection

logger = get_logger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[])")


def escape_pattern(text: str) -> str:
    """Escape glob metacharacters so text only matches itself.

    Each one is wrapped in a character class, which both fnmatch and Redis
    treat as a literal.
    """
    return _GLOB_SPECIAL.sub(r"[\1]", text)


class KeyValueStore(ABC):
    """Abstract base class for key-value store implementations.

    Set operations return plain booleans: ``sadd`` and ``srem`` report
    whether the set actually changed.
    """

    @abstractmethod
    def sadd(self, key: str, member: str) -> bool:
        """Add a member to the set at key. Returns True if it was not already present."""

    @abstractmethod
    def srem(self, key: str, member: str) -> bool:
        """Remove a member from the set at key. Returns True if it was present."""

    @abstractmethod
    def sismember(self, key: str, member: str) -> bool:
        """Check whether member belongs to the set at key."""

    @abstractmethod
    def smembers(self, key: str) -> set[str]:
        """Return all members of the set at key (empty if absent)."""

    @abstractmethod
    def keys(self, pattern: str = "*") -> list[str]:
        """Return every key matching a glob-style pattern."""

    @abstractmethod
    def hset(self, key: str, mapping: dict[str, str]) -> None:
        """Set fields on the hash at key."""

    @abstractmethod
    def hgetall(self, key: str) -> dict[str, str]:
        """Return all fields of the hash at key (empty if absent)."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set a string value."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a string value, or None if absent."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""

    def namespaced(self, namespace: str) -> "Namespace":
        """Return a view of this store with keys prefixed by namespace."""
        return Namespace(namespace, self)


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory store for development and testing.

    Mirrors Redis semantics closely enough for the runtime: empty sets
    disappear, and a key holding one type cannot be used as another.
    Not suitable for multi-process deployments.
    """

    def __init__(self) -> None:
        self._data: dict[str, set[str] | dict[str, str] | str] = {}
        self._lock = threading.RLock()

    def _typed(self, key: str, kind: type) -> set[str] | dict[str, str] | str | None:
        value = self._data.get(key)
        if value is not None and not isinstance(value, kind):
            raise TypeError(f"WRONGTYPE key '{key}' holds a {type(value).__name__}")
        return value

    def sadd(self, key: str, member: str) -> bool:
        with self._lock:
            members = self._typed(key, set)
            if members is None:
                members = self._data[key] = set()
            if member in members:
                return False
            members.add(member)
            return True

    def srem(self, key: str, member: str) -> bool:
        with self._lock:
            members = self._typed(key, set)
            if not members or member not in members:
                return False
            members.discard(member)
            if not members:
                del self._data[key]
            return True

    def sismember(self, key: str, member: str) -> bool:
        with self._lock:
            members = self._typed(key, set)
            return bool(members) and member in members

    def smembers(self, key: str) -> set[str]:
        with self._lock:
            return set(self._typed(key, set) or ())

    def keys(self, pattern: str = "*") -> list[str]:
        with self._lock:
            return [key for key in self._data if fnmatch.fnmatchcase(key, pattern)]

    def hset(self, key: str, mapping: dict[str, str]) -> None:
        with self._lock:
            fields = self._typed(key, dict)
            if fields is None:
                fields = self._data[key] = {}
            fields.update({k: str(v) for k, v in mapping.items()})

    def hgetall(self, key: str) -> dict[str, str]:
        with self._lock:
            return dict(self._typed(key, dict) or {})

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = str(value)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._typed(key, str)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store for production use.

    The client is created lazily on first use. Connection errors are not
    caught here; they propagate to the caller as ``redis.RedisError``.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis store.

        Args:
            redis_url: Redis connection URL
            client: Optional pre-built client (mainly for tests)
        """
        self.redis_url = redis_url
        self._client = client
        self._lock = threading.Lock()

    @property
    def client(self) -> redis.Redis:
        """Get or create the Redis client."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = redis.Redis.from_url(self.redis_url, decode_responses=True)
        return self._client

    def sadd(self, key: str, member: str) -> bool:
        return self.client.sadd(key, member) > 0

    def srem(self, key: str, member: str) -> bool:
        return self.client.srem(key, member) > 0

    def sismember(self, key: str, member: str) -> bool:
        return bool(self.client.sismember(key, member))

    def smembers(self, key: str) -> set[str]:
        return set(self.client.smembers(key))

    def keys(self, pattern: str = "*") -> list[str]:
        return list(self.client.scan_iter(match=pattern))

    def hset(self, key: str, mapping: dict[str, str]) -> None:
        self.client.hset(key, mapping=mapping)

    def hgetall(self, key: str) -> dict[str, str]:
        return dict(self.client.hgetall(key))

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def get(self, key: str) -> str | None:
        return self.client.get(key)

    def delete(self, key: str) -> bool:
        return self.client.delete(key) > 0

    def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            self._client.close()
            self._client = None


class Namespace(KeyValueStore):
    """A view over another store that prefixes every key with ``<namespace>:``.

    Namespaces nest: ``Namespace("auth", Namespace("herald", store))`` writes
    the group ``ops`` to ``herald:auth:ops``. Keys returned by :meth:`keys`
    have the prefix stripped.
    """

    def __init__(self, namespace: str, store: KeyValueStore) -> None:
        self.namespace = namespace
        self.store = store
        self._prefix = f"{namespace}:"
        self._pattern_prefix = escape_pattern(self._prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def sadd(self, key: str, member: str) -> bool:
        return self.store.sadd(self._key(key), member)

    def srem(self, key: str, member: str) -> bool:
        return self.store.srem(self._key(key), member)

    def sismember(self, key: str, member: str) -> bool:
        return self.store.sismember(self._key(key), member)

    def smembers(self, key: str) -> set[str]:
        return self.store.smembers(self._key(key))

    def keys(self, pattern: str = "*") -> list[str]:
        return [key[len(self._prefix) :] for key in self.store.keys(f"{self._pattern_prefix}{pattern}")]

    def hset(self, key: str, mapping: dict[str, str]) -> None:
        self.store.hset(self._key(key), mapping)

    def hgetall(self, key: str) -> dict[str, str]:
        return self.store.hgetall(self._key(key))

    def set(self, key: str, value: str) -> None:
        self.store.set(self._key(key), value)

    def get(self, key: str) -> str | None:
        return self.store.get(self._key(key))

    def delete(self, key: str) -> bool:
        return self.store.delete(self._key(key))

    def __repr__(self) -> str:
        return f"<Namespace {self.namespace!r} over {self.store!r}>"


def build_store(redis_config: "RedisSection") -> KeyValueStore:
    """Factory function to create the store described by a config's redis section.

    Args:
        redis_config: The ``redis`` section of a RobotConfig.

    Returns:
        Configured store instance
    """
    if redis_config.backend == "memory":
        logger.info("store_initialized", backend="memory")
        return InMemoryKeyValueStore()

    logger.info("store_initialized", backend="redis")
    return RedisKeyValueStore(redis_url=redis_config.url)
