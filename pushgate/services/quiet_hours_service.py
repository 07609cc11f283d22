"""
Quiet hours service.

Suppresses non-critical notifications during user-configured quiet hours.
Times are compared in the device's own timezone and windows may wrap
past midnight (e.g. 23:00 - 07:00). Both boundaries are inclusive.
"""

from datetime import datetime, time, timezone, tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pushgate.core.logging import get_logger
from pushgate.dtos.quiet_hours_dto import (
    NotificationEvent,
    NotificationSeverity,
    QuietHoursPrefs,
    parse_time_of_day,
)

logger = get_logger(__name__)


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


class QuietHoursService:
    """Evaluates quiet hours windows. Holds no per-device state."""

    def __init__(self, default_timezone: str = "UTC"):
        """
        Initialize quiet hours service.

        Args:
            default_timezone: Zone used when a device has none configured
        """
        self.default_timezone = default_timezone

    def _resolve_timezone(self, name: Optional[str]) -> tzinfo:
        name = name or self.default_timezone
        if not name:
            return timezone.utc
        # Directory names ("Etc") and overlong names fail as OSError
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
            logger.warning("quiet_hours_invalid_timezone", timezone=name, fallback="UTC")
            return timezone.utc

    def _resolve_window(self, prefs: QuietHoursPrefs) -> Optional[Tuple[time, time]]:
        if not prefs.enabled or not prefs.start or not prefs.end:
            return None
        try:
            return parse_time_of_day(prefs.start), parse_time_of_day(prefs.end)
        except ValueError:
            logger.warning(
                "quiet_hours_invalid_time",
                start=prefs.start,
                end=prefs.end,
            )
            return None

    def local_time(self, prefs: QuietHoursPrefs, now: Optional[datetime] = None) -> time:
        """
        Wall-clock time of ``now`` in the device's timezone.

        Naive datetimes are taken to be UTC.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self._resolve_timezone(prefs.timezone)).time()

    def is_quiet_time(self, prefs: QuietHoursPrefs, now: Optional[datetime] = None) -> bool:
        """
        Check if ``now`` is within quiet hours for a device.

        Args:
            prefs: Device quiet hours preferences
            now: Instant to evaluate, defaults to the current time

        Returns:
            True if currently in quiet hours
        """
        window = self._resolve_window(prefs)
        if window is None:
            return False

        start, end = (_minutes(t) for t in window)
        current = _minutes(self.local_time(prefs, now))

        if start > end:
            # Window spans midnight
            return current >= start or current <= end

        return start <= current <= end

    def should_send(
            self,
            prefs: QuietHoursPrefs,
            severity: NotificationSeverity,
            now: Optional[datetime] = None,
    ) -> bool:
        """
        Should a notification be sent given quiet hours and severity?

        Only ``high`` severity may bypass quiet hours, and only when the
        device opted into critical overrides. ``warning`` is suppressed
        like ``low``.

        Args:
            prefs: Device quiet hours preferences
            severity: Notification severity
            now: Instant to evaluate, defaults to the current time

        Returns:
            True if the notification should be sent
        """
        if not self.is_quiet_time(prefs, now):
            return True

        return prefs.override_critical and NotificationSeverity(severity) is NotificationSeverity.HIGH

    def should_send_event(
            self,
            prefs: QuietHoursPrefs,
            event: NotificationEvent,
            now: Optional[datetime] = None,
    ) -> bool:
        """
        Should a lifecycle event notification be sent?

        ``server_down`` is treated as high severity, every other event as low.
        """
        return self.should_send(prefs, NotificationEvent(event).severity, now)
