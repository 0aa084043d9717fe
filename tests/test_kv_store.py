"""
Key-Value Store Tests
=====================
In-memory store semantics and the Redis adapter over a mocked client.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.shared.config.redis import check_redis_health
from app.shared.core.exceptions import StorageError
from app.shared.infrastructure.storage import InMemoryKeyValueStore, RedisKeyValueStore


def scan_results(*keys):
    """Build a scan_iter replacement yielding keys and recording its arguments."""
    calls = []

    def scan_iter(**kwargs):
        calls.append(kwargs)

        async def iterate():
            for key in keys:
                yield key

        return iterate()

    scan_iter.calls = calls
    return scan_iter


@pytest.fixture()
def redis_client():
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    return client


class TestInMemoryStore:

    def test_set_get_delete(self):
        store = InMemoryKeyValueStore()

        assert asyncio.run(store.set("user:a", "{}")) is True
        assert asyncio.run(store.get("user:a")) == "{}"
        assert asyncio.run(store.delete("user:a")) is True
        assert asyncio.run(store.delete("user:a")) is False
        assert asyncio.run(store.get("user:a")) is None

    def test_list_by_prefix(self):
        store = InMemoryKeyValueStore({"plant:a:1": "x", "plant:a:2": "y", "plant:ab:3": "z", "usage:a": "u"})

        assert asyncio.run(store.list("plant:a:")) == {"plant:a:1", "plant:a:2"}
        assert asyncio.run(store.list("nothing:")) == set()


class TestRedisStore:

    def test_get_and_set_use_namespace(self, redis_client):
        redis_client.get.return_value = '{"email": "a"}'
        store = RedisKeyValueStore(redis_client, namespace="plants:")

        assert asyncio.run(store.get("user:a")) == '{"email": "a"}'
        assert asyncio.run(store.set("user:a", "{}")) is True

        redis_client.get.assert_awaited_once_with("plants:user:a")
        redis_client.set.assert_awaited_once_with("plants:user:a", "{}")

    def test_rejected_set_returns_false(self, redis_client):
        redis_client.set.return_value = None

        assert asyncio.run(RedisKeyValueStore(redis_client).set("k", "v")) is False

    def test_delete_reports_removal(self, redis_client):
        store = RedisKeyValueStore(redis_client)

        assert asyncio.run(store.delete("k")) is True
        redis_client.delete.return_value = 0
        assert asyncio.run(store.delete("k")) is False

    def test_list_strips_namespace_and_escapes_pattern(self, redis_client):
        redis_client.scan_iter = scan_results("ns:plant:a*b@x.com:1", "ns:plant:a*b@x.com:2")
        store = RedisKeyValueStore(redis_client, namespace="ns:", scan_count=50)

        keys = asyncio.run(store.list("plant:a*b@x.com:"))

        assert keys == {"plant:a*b@x.com:1", "plant:a*b@x.com:2"}
        assert redis_client.scan_iter.calls == [{"match": "ns:plant:a\\*b@x.com:*", "count": 50}]

    @pytest.mark.parametrize("operation", ["get", "set", "delete"])
    def test_redis_errors_become_storage_errors(self, redis_client, operation):
        getattr(redis_client, operation).side_effect = RedisConnectionError("connection refused")
        store = RedisKeyValueStore(redis_client)
        args = ("k", "v") if operation == "set" else ("k",)

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(getattr(store, operation)(*args))

        assert exc_info.value.details == {"key": "k", "operation": operation}
        assert exc_info.value.status_code == 503

    def test_scan_error_becomes_storage_error(self, redis_client):
        def broken_scan(**kwargs):
            raise RedisConnectionError("connection refused")

        redis_client.scan_iter = broken_scan

        with pytest.raises(StorageError):
            asyncio.run(RedisKeyValueStore(redis_client).list("plant:a:"))

    def test_close(self, redis_client):
        asyncio.run(RedisKeyValueStore(redis_client).close())

        redis_client.aclose.assert_awaited_once()


class TestRedisHealth:

    def test_healthy(self, redis_client):
        assert asyncio.run(check_redis_health(redis_client)) == {"status": "healthy", "ping": True}

    def test_unhealthy(self, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("down")

        result = asyncio.run(check_redis_health(redis_client))

        assert result["status"] == "unhealthy"
        assert result["type"] == "ConnectionError"
