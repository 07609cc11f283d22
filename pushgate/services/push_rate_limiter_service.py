"""
Push rate limiter service enforcing per-minute and per-hour caps
for each device session.
"""

from pushgate.core.logging import get_logger
from pushgate.dtos.rate_limit_dto import (
    RateLimitPrefs,
    RateLimitResult,
    RateLimitStatus,
    RateLimitWindow,
)
from pushgate.repositories.push_rate_repository import PushRateRepository, WindowCounters

logger = get_logger(__name__)


def _reset_in(ttl: int, window: RateLimitWindow) -> int:
    # Missing key (-2) or no expiry (-1): the next event opens a full window
    return ttl if ttl > 0 else window.seconds


class PushRateLimiterService:
    """Service for push notification rate limiting logic."""

    def __init__(self, push_rate_repository: PushRateRepository):
        """
        Initialize push rate limiter service.

        Args:
            push_rate_repository: Repository for window counter operations
        """
        self.repository = push_rate_repository

    @staticmethod
    def _status_from(counters: WindowCounters, prefs: RateLimitPrefs) -> RateLimitStatus:
        return RateLimitStatus(
            remaining_minute=max(0, prefs.max_per_minute - counters.minute_count),
            remaining_hour=max(0, prefs.max_per_hour - counters.hour_count),
            reset_minute_in=_reset_in(counters.minute_ttl, RateLimitWindow.MINUTE),
            reset_hour_in=_reset_in(counters.hour_ttl, RateLimitWindow.HOUR),
        )

    async def check_and_record(
            self,
            device_session_id: str,
            prefs: RateLimitPrefs,
    ) -> RateLimitResult:
        """
        Check whether a notification is allowed and record it if so.

        The check and both increments run as one server-side script, so
        concurrent callers for the same session can never both slip under
        a cap. A denied check leaves the counters untouched.

        Args:
            device_session_id: Device session identifier
            prefs: Caps for this session

        Returns:
            RateLimitResult with remaining budget and reset timing

        Raises:
            WindowStoreError: If the store is unavailable
        """
        allowed, exceeded, counters = await self.repository.record_if_under_limit(
            device_session_id, prefs
        )
        status = self._status_from(counters, prefs)

        if not allowed:
            # Minute is checked first, so a request over both caps reports minute
            exceeded = exceeded or RateLimitWindow.MINUTE
            logger.warning(
                "push_rate_limit_exceeded",
                device_session_id=device_session_id,
                period=exceeded.value,
                minute_count=counters.minute_count,
                hour_count=counters.hour_count,
                retry_after=(
                    status.reset_minute_in
                    if exceeded is RateLimitWindow.MINUTE
                    else status.reset_hour_in
                ),
            )
            return RateLimitResult(
                allowed=False,
                remaining_minute=0 if exceeded is RateLimitWindow.MINUTE else status.remaining_minute,
                remaining_hour=0 if exceeded is RateLimitWindow.HOUR else status.remaining_hour,
                reset_minute_in=status.reset_minute_in,
                reset_hour_in=status.reset_hour_in,
                exceeded_limit=exceeded,
            )

        logger.debug(
            "push_rate_recorded",
            device_session_id=device_session_id,
            minute_remaining=status.remaining_minute,
            hour_remaining=status.remaining_hour,
        )

        return RateLimitResult(
            allowed=True,
            remaining_minute=status.remaining_minute,
            remaining_hour=status.remaining_hour,
            reset_minute_in=status.reset_minute_in,
            reset_hour_in=status.reset_hour_in,
        )

    async def get_status(
            self,
            device_session_id: str,
            prefs: RateLimitPrefs,
    ) -> RateLimitStatus:
        """
        Get current rate limit status without recording (for UI display).

        Args:
            device_session_id: Device session identifier
            prefs: Caps for this session

        Returns:
            Current RateLimitStatus
        """
        counters = await self.repository.get_counters(device_session_id)
        return self._status_from(counters, prefs)

    async def reset(self, device_session_id: str) -> None:
        """
        Reset rate limits for a session (admin/testing function).

        Args:
            device_session_id: Device session identifier
        """
        await self.repository.reset(device_session_id)
        logger.info("push_rate_limits_reset_by_admin", device_session_id=device_session_id)
