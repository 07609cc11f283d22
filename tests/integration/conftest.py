"""
Integration test configuration with testcontainers.

A Redis 7 container is started once per test session; every test gets a
fresh client and the database is flushed afterwards.

Note: Docker must be running for these fixtures to work. When it is not,
the integration tests are skipped.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
import redis.asyncio as aioredis
from testcontainers.redis import RedisContainer

from pushgate.infrastructure.redis_client import RedisClient


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer, None, None]:
    """Session-scoped Redis 7 container."""
    try:
        container = RedisContainer("redis:7-alpine").start()
    except Exception as exc:  # docker daemon missing or image pull failed
        pytest.skip(f"Redis container unavailable: {exc}")

    try:
        yield container
    finally:
        container.stop()


@pytest_asyncio.fixture
async def redis_client(
    redis_container: RedisContainer,
) -> AsyncGenerator[RedisClient, None]:
    """Per-test Redis client with FLUSHDB isolation."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)

    connection = aioredis.Redis(host=host, port=int(port), decode_responses=True)

    yield RedisClient(connection)

    await connection.flushdb()
    await connection.aclose()
