"""
Container bootstrap for embedding the notification gate in a delivery pipeline.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dishka import AsyncContainer, make_async_container

from pushgate.core.config import Config, config
from pushgate.core.logging import get_logger, setup_logging
from pushgate.core.redis_config import RedisConfig, redis_config
from pushgate.dtos.rate_limit_dto import WindowStoreError
from pushgate.infrastructure.redis_client import RedisClient
from pushgate.ioc import AppProvider
from pushgate.services.notification_gate_service import NotificationGateService

logger = get_logger(__name__)


def create_container(
        app_config: Config = config,
        store_config: RedisConfig = redis_config,
) -> AsyncContainer:
    """Build the dependency container; one per Redis connection pool."""
    return make_async_container(
        AppProvider(),
        context={Config: app_config, RedisConfig: store_config},
    )


@asynccontextmanager
async def notification_gate(
        app_config: Config = config,
        store_config: RedisConfig = redis_config,
) -> AsyncIterator[NotificationGateService]:
    """
    Configure logging, connect to the window store and yield a ready gate.

    The container, and with it the Redis pool, is closed on exit.

    Raises:
        WindowStoreError: If Redis does not answer at startup
    """
    setup_logging(
        level=app_config.log_level,
        json_logs=not app_config.DEBUG,
    )
    logger.info("application_startup", app_name=app_config.APP_NAME)

    container = create_container(app_config, store_config)
    try:
        redis_client = await container.get(RedisClient)
        if not await redis_client.ping():
            raise WindowStoreError(f"Redis unreachable at {store_config.REDIS_HOST}:{store_config.REDIS_PORT}")
        logger.info("startup_redis_connected")

        yield await container.get(NotificationGateService)
    finally:
        await container.close()
        logger.info("application_shutdown", app_name=app_config.APP_NAME)
