"""
Redis provider for dependency injection.
"""

from typing import AsyncIterable

from dishka import Provider, Scope, from_context, provide
from redis.asyncio import Redis

from pushgate.core.config import Config
from pushgate.core.redis_config import RedisConfig
from pushgate.infrastructure.redis_client import RedisClient, create_redis_client
from pushgate.repositories.push_rate_repository import PushRateRepository


class RedisProvider(Provider):
    """Provider for Redis-related dependencies."""

    # Connection settings injected from container context at startup
    redis_settings = from_context(provides=RedisConfig, scope=Scope.APP)

    @provide(scope=Scope.APP)
    async def get_redis_connection(self, settings: RedisConfig) -> AsyncIterable[Redis]:
        """
        Provide Redis connection (singleton).

        Args:
            settings: Redis connection settings

        Yields:
            Redis connection instance
        """
        redis = await create_redis_client(settings)
        try:
            yield redis
        finally:
            await redis.aclose()

    @provide(scope=Scope.APP)
    def get_redis_client(self, redis: Redis) -> RedisClient:
        """
        Provide Redis client wrapper.

        Args:
            redis: Redis connection

        Returns:
            RedisClient instance
        """
        return RedisClient(redis)

    @provide(scope=Scope.APP)
    def get_push_rate_repository(
            self, redis_client: RedisClient, config: Config
    ) -> PushRateRepository:
        """
        Provide push rate repository.

        Args:
            redis_client: Redis client instance
            config: Application configuration (key prefix)

        Returns:
            PushRateRepository instance
        """
        return PushRateRepository(redis_client, key_prefix=config.PUSH_RATE_KEY_PREFIX)
