# 📄 File: app/shared/config/redis.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration for the Redis store where our Plant Health app keeps users,
# saved plants and monthly diagnosis counts.
#
# 🧪 Purpose (Technical Summary):
# Redis configuration with connection pooling and environment-specific
# socket settings for the key-value store adapter.
#
# 🔗 Dependencies:
# - redis Python package (redis.asyncio)
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app.shared.infrastructure.storage.kv_store (RedisKeyValueStore)
# - app.modules.plant_health.container

from typing import Any, Dict, Optional

import redis.asyncio as redis
from redis.asyncio import ConnectionPool, Redis

from .settings import Settings, get_settings


class RedisConfig:
    """Redis configuration class with connection management."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._connection_pool: ConnectionPool | None = None
        self._redis_client: Redis | None = None

    @property
    def redis_url(self) -> str:
        """Get Redis connection URL."""
        return self.settings.redis_url

    @property
    def connection_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection configuration."""

        base_config = {
            "encoding": "utf-8",
            "decode_responses": True,
            "retry_on_timeout": True,
            "health_check_interval": 30,
        }

        # Environment-specific configurations
        if self.settings.is_production:
            base_config.update({
                "socket_timeout": 5.0,
                "socket_connect_timeout": 5.0,
                "socket_keepalive": True,
            })
        elif self.settings.is_development:
            base_config.update({
                "socket_timeout": 10.0,
                "socket_connect_timeout": 10.0,
            })

        return base_config

    @property
    def pool_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection pool configuration."""
        return {
            "max_connections": self.settings.REDIS_MAX_CONNECTIONS,
            **self.connection_kwargs
        }

    def create_connection_pool(self) -> ConnectionPool:
        """Create Redis connection pool."""
        if self._connection_pool is None:
            self._connection_pool = ConnectionPool.from_url(
                self.redis_url,
                **self.pool_kwargs
            )
        return self._connection_pool

    def create_redis_client(self) -> Redis:
        """Create Redis client with connection pool."""
        if self._redis_client is None:
            pool = self.create_connection_pool()
            self._redis_client = Redis(connection_pool=pool)
        return self._redis_client

    async def close_connections(self):
        """Close Redis connections and cleanup."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None

        if self._connection_pool:
            await self._connection_pool.disconnect()
            self._connection_pool = None


async def check_redis_health(client: Redis) -> Dict[str, Any]:
    """
    Check Redis connectivity.

    Returns:
        Dict containing Redis health status
    """
    try:
        ping_result = await client.ping()
        return {"status": "healthy", "ping": ping_result}
    except redis.RedisError as e:
        return {
            "status": "unhealthy",
            "error": str(e),
            "type": type(e).__name__,
        }
