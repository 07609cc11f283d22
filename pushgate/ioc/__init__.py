"""
Dependency injection container configuration using Dishka.
"""

from pushgate.ioc.redis_provider import RedisProvider
from pushgate.ioc.service_provider import ServiceProvider


class AppProvider(
    ServiceProvider,
    RedisProvider,
):
    """
    Main dependency injection provider for the application.

    Combines all provider modules:
    - RedisProvider: Redis connection, client wrapper, push rate repository
    - ServiceProvider: Quiet hours, rate limiter and gate services
    """
    pass


__all__ = ["AppProvider"]
