"""
Redis client abstraction for clean architecture.

The client is the window store behind the push rate limiter: plain key
reads, TTL introspection, deletes and server-side script execution.
"""

from typing import Optional, Sequence

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.commands.core import AsyncScript
from redis.exceptions import RedisError

from pushgate.core.logging import get_logger
from pushgate.core.redis_config import RedisConfig, redis_config
from pushgate.dtos.rate_limit_dto import WindowStoreError

logger = get_logger(__name__)


class RedisClient:
    """Async Redis client wrapper."""

    def __init__(self, redis_instance: Redis):
        """
        Initialize Redis client.

        Args:
            redis_instance: Redis connection instance
        """
        self._redis = redis_instance
        self._scripts: dict[str, AsyncScript] = {}

    async def get(self, key: str) -> Optional[str]:
        """
        Get value from Redis.

        Args:
            key: Redis key

        Returns:
            Value or None if not found

        Raises:
            WindowStoreError: If the store call fails
        """
        try:
            return await self._redis.get(key)
        except RedisError as e:
            logger.error(f"redis_get_error: {e}", key=key)
            raise WindowStoreError(f"GET {key} failed: {e}") from e

    async def ttl(self, key: str) -> int:
        """
        Get time to live for key.

        Args:
            key: Redis key

        Returns:
            TTL in seconds, -1 if no expiration, -2 if key doesn't exist

        Raises:
            WindowStoreError: If the store call fails
        """
        try:
            return await self._redis.ttl(key)
        except RedisError as e:
            logger.error(f"redis_ttl_error: {e}", key=key)
            raise WindowStoreError(f"TTL {key} failed: {e}") from e

    async def delete(self, *keys: str) -> int:
        """
        Delete keys from Redis.

        Args:
            keys: Keys to delete

        Returns:
            Number of keys deleted

        Raises:
            WindowStoreError: If the store call fails
        """
        try:
            return await self._redis.delete(*keys)
        except RedisError as e:
            logger.error(f"redis_delete_error: {e}", keys=keys)
            raise WindowStoreError(f"DEL {', '.join(keys)} failed: {e}") from e

    async def eval_script(
            self,
            script: str,
            keys: Sequence[str],
            args: Sequence[str | int],
    ) -> list:
        """
        Run a Lua script atomically on the server.

        Scripts are registered once per client and invoked by SHA,
        falling back to EVAL when the server script cache was flushed.

        Args:
            script: Lua source
            keys: KEYS passed to the script
            args: ARGV passed to the script

        Returns:
            The script's reply

        Raises:
            WindowStoreError: If the store call fails
        """
        registered = self._scripts.get(script)
        if registered is None:
            registered = self._redis.register_script(script)
            self._scripts[script] = registered

        try:
            return await registered(keys=list(keys), args=list(args))
        except RedisError as e:
            logger.error(f"redis_script_error: {e}", keys=keys)
            raise WindowStoreError(f"script on {', '.join(keys)} failed: {e}") from e

    async def ping(self) -> bool:
        """
        Ping Redis to check connection.

        Returns:
            True if connected
        """
        try:
            return await self._redis.ping()
        except RedisError as e:
            logger.error(f"redis_ping_error: {e}")
            return False

    async def close(self):
        """Close Redis connection."""
        await self._redis.aclose()


async def create_redis_client(settings: RedisConfig = redis_config) -> Redis:
    """
    Create Redis connection.

    Args:
        settings: Redis connection settings

    Returns:
        Redis client instance
    """
    return await redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=settings.REDIS_DECODE_RESPONSES,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_CONNECT_TIMEOUT,
    )
