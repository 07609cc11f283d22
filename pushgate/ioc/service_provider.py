"""
Service provider for dependency injection.
"""

from dishka import Provider, Scope, from_context, provide

from pushgate.core.config import Config
from pushgate.repositories.push_rate_repository import PushRateRepository
from pushgate.services.notification_gate_service import NotificationGateService
from pushgate.services.push_rate_limiter_service import PushRateLimiterService
from pushgate.services.quiet_hours_service import QuietHoursService


class ServiceProvider(Provider):
    """
    Provider for service dependencies.

    Every service is stateless over the shared store, so one instance per
    container (i.e. per Redis connection pool) is shared by all callers.
    """

    # Config injected from container context at startup
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_quiet_hours_service(self, config: Config) -> QuietHoursService:
        return QuietHoursService(default_timezone=config.DEFAULT_QUIET_HOURS_TIMEZONE)

    @provide(scope=Scope.APP)
    def get_push_rate_limiter_service(
        self, repository: PushRateRepository
    ) -> PushRateLimiterService:
        return PushRateLimiterService(repository)

    @provide(scope=Scope.APP)
    def get_notification_gate_service(
        self,
        quiet_hours_service: QuietHoursService,
        rate_limiter_service: PushRateLimiterService,
    ) -> NotificationGateService:
        """Gate composing quiet hours and the push rate limiter."""
        return NotificationGateService(quiet_hours_service, rate_limiter_service)
