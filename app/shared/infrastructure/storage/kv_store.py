# 📄 File: app/shared/infrastructure/storage/kv_store.py

# 🧭 Purpose (Layman Explanation):
# The one place that knows how to read and write raw values in our store, whether that is
# Redis in production or a simple in-memory dictionary for tests and local runs.

# 🧪 Purpose (Technical Summary):
# Async key-value store contract (get/set/delete/list-by-prefix over opaque strings) with
# an in-memory implementation and a redis.asyncio implementation. Backend failures are
# surfaced as StorageError so callers can apply the write retry policy.

# 🔗 Dependencies:
# - redis.asyncio: production backend
# - app.shared.core.exceptions: StorageError
# - app.shared.utils.logging: structured logging

# 🔄 Connected Modules / Calls From:
# Used by: plant_health KV repositories (users, usage, plants, session pointer),
# app.modules.plant_health.container

from abc import ABC, abstractmethod
from typing import Dict, Optional, Set

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.shared.core.exceptions import StorageError
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """
    Key-value store contract consumed by the repositories.

    Values are opaque strings; serialization belongs to the caller.
    Every method may raise StorageError when the backend is unavailable.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """Store value under key. Returns False when the backend rejected the write."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key. Returns True when something was removed."""

    @abstractmethod
    async def list(self, prefix: str) -> Set[str]:
        """Return every key starting with prefix."""

    async def close(self) -> None:
        """Release backend resources."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store for tests and single-process development runs."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    async def list(self, prefix: str) -> Set[str]:
        return {key for key in self.data if key.startswith(prefix)}


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed store.

    Keys may be namespaced with a prefix so several deployments can share
    one Redis database; the namespace is invisible to callers.
    """

    def __init__(self, client: Redis, namespace: str = "", scan_count: int = 500):
        self.client = client
        self.namespace = namespace
        self.scan_count = scan_count

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    @staticmethod
    def _escape_pattern(text: str) -> str:
        for char in ("\\", "*", "?", "[", "]"):
            text = text.replace(char, "\\" + char)
        return text

    def _strip(self, key: str) -> str:
        return key[len(self.namespace):] if self.namespace else key

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.client.get(self._key(key))
        except RedisError as e:
            logger.warning(f"Redis GET failed for {key}: {e}")
            raise StorageError(str(e), key=key, operation="get") from e

    async def set(self, key: str, value: str) -> bool:
        try:
            return bool(await self.client.set(self._key(key), value))
        except RedisError as e:
            logger.warning(f"Redis SET failed for {key}: {e}")
            raise StorageError(str(e), key=key, operation="set") from e

    async def delete(self, key: str) -> bool:
        try:
            return await self.client.delete(self._key(key)) > 0
        except RedisError as e:
            logger.warning(f"Redis DEL failed for {key}: {e}")
            raise StorageError(str(e), key=key, operation="delete") from e

    async def list(self, prefix: str) -> Set[str]:
        try:
            return {
                self._strip(key)
                async for key in self.client.scan_iter(
                    match=f"{self._escape_pattern(self._key(prefix))}*",
                    count=self.scan_count,
                )
            }
        except RedisError as e:
            logger.warning(f"Redis SCAN failed for prefix {prefix}: {e}")
            raise StorageError(str(e), key=prefix, operation="list") from e

    async def close(self) -> None:
        await self.client.aclose()
