"""
Quiet hours preferences and notification severity.
"""

import re
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any, Mapping, Optional, Union


class NotificationSeverity(str, Enum):
    """Severity attached to a candidate notification."""
    LOW = "low"
    WARNING = "warning"
    HIGH = "high"


class NotificationEvent(str, Enum):
    """Server lifecycle events that produce push notifications."""
    SESSION_STARTED = "session_started"
    SESSION_STOPPED = "session_stopped"
    SERVER_DOWN = "server_down"
    SERVER_UP = "server_up"

    @property
    def severity(self) -> NotificationSeverity:
        if self is NotificationEvent.SERVER_DOWN:
            return NotificationSeverity.HIGH
        return NotificationSeverity.LOW


TimeOfDay = Union[time, str, None]

_TIME_OF_DAY = re.compile(r"([01]?[0-9]|2[0-3]):([0-5][0-9])(?::[0-5][0-9])?")


@dataclass(frozen=True)
class QuietHoursPrefs:
    """
    Quiet hours configuration for one device.

    ``start`` and ``end`` are times of day, either ``datetime.time`` values
    or ``"HH:MM"`` strings as stored in notification settings. The window
    has no effect unless both are present. Without a ``timezone`` the
    service's configured default zone applies.
    """
    enabled: bool
    start: TimeOfDay = None
    end: TimeOfDay = None
    timezone: Optional[str] = None
    override_critical: bool = False

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], default_timezone: Optional[str] = None):
        """Create prefs from a notification settings row."""
        return cls(
            enabled=bool(settings.get("quiet_hours_enabled", False)),
            start=settings.get("quiet_hours_start"),
            end=settings.get("quiet_hours_end"),
            timezone=settings.get("quiet_hours_timezone") or default_timezone,
            override_critical=bool(settings.get("quiet_hours_override_critical", False)),
        )


def parse_time_of_day(value: TimeOfDay) -> Optional[time]:
    """
    Parse an ``"HH:MM"`` string (an optional ``:SS`` part is validated,
    then ignored) into a ``time``. Only ASCII digits are accepted.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    if value is None or isinstance(value, time):
        return value

    match = _TIME_OF_DAY.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"invalid time of day: {value!r}")

    return time(hour=int(match.group(1)), minute=int(match.group(2)))
