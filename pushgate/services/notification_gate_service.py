"""
Notification gate: the single admission decision for a push notification.

Quiet hours are evaluated first and never touch the store's counters, so a
notification suppressed overnight does not eat into the hourly budget.
Only notifications that pass quiet hours go through the atomic rate check.
"""

from datetime import datetime
from typing import Optional

from pushgate.core.logging import get_logger
from pushgate.dtos.gate_dto import GateDecision
from pushgate.dtos.quiet_hours_dto import NotificationEvent, NotificationSeverity, QuietHoursPrefs
from pushgate.dtos.rate_limit_dto import RateLimitPrefs, RateLimitStatus
from pushgate.services.push_rate_limiter_service import PushRateLimiterService
from pushgate.services.quiet_hours_service import QuietHoursService

logger = get_logger(__name__)


class NotificationGateService:
    """Composes quiet hours and rate limiting into one decision."""

    def __init__(
            self,
            quiet_hours_service: QuietHoursService,
            rate_limiter_service: PushRateLimiterService,
    ):
        self.quiet_hours = quiet_hours_service
        self.rate_limiter = rate_limiter_service

    async def decide(
            self,
            device_session_id: str,
            quiet_prefs: QuietHoursPrefs,
            rate_prefs: RateLimitPrefs,
            severity: NotificationSeverity,
            now: Optional[datetime] = None,
    ) -> GateDecision:
        """
        Decide whether a notification may be delivered now.

        Args:
            device_session_id: Target device session
            quiet_prefs: Device quiet hours preferences
            rate_prefs: Device delivery caps
            severity: Notification severity
            now: Instant to evaluate, defaults to the current time

        Returns:
            GateDecision, with ``reason`` set when denied

        Raises:
            WindowStoreError: If the store is unavailable
        """
        if not self.quiet_hours.should_send(quiet_prefs, severity, now):
            status = await self.rate_limiter.get_status(device_session_id, rate_prefs)
            logger.info(
                "notification_suppressed_quiet_hours",
                device_session_id=device_session_id,
                severity=NotificationSeverity(severity).value,
            )
            return GateDecision.quiet_hours(status)

        result = await self.rate_limiter.check_and_record(device_session_id, rate_prefs)
        decision = GateDecision.from_rate_limit(result)

        if decision.allowed:
            logger.debug(
                "notification_allowed",
                device_session_id=device_session_id,
                remaining_minute=decision.remaining_minute,
                remaining_hour=decision.remaining_hour,
            )
        else:
            logger.info(
                "notification_rate_limited",
                device_session_id=device_session_id,
                exceeded_limit=decision.exceeded_limit.value,
            )

        return decision

    async def decide_event(
            self,
            device_session_id: str,
            quiet_prefs: QuietHoursPrefs,
            rate_prefs: RateLimitPrefs,
            event: NotificationEvent,
            now: Optional[datetime] = None,
    ) -> GateDecision:
        """Decide for a lifecycle event, using its fixed severity."""
        return await self.decide(
            device_session_id,
            quiet_prefs,
            rate_prefs,
            NotificationEvent(event).severity,
            now,
        )

    async def get_status(self, device_session_id: str, rate_prefs: RateLimitPrefs) -> RateLimitStatus:
        """Remaining budget for a session, without recording anything."""
        return await self.rate_limiter.get_status(device_session_id, rate_prefs)

    async def reset(self, device_session_id: str) -> None:
        """Clear a session's counters (admin/testing)."""
        await self.rate_limiter.reset(device_session_id)
