"""
Push rate limiting domain models and exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RateLimitWindow(str, Enum):
    """Rolling windows tracked per device session."""
    MINUTE = "minute"
    HOUR = "hour"

    @property
    def seconds(self) -> int:
        """Window length, also the TTL set on a fresh counter."""
        if self is RateLimitWindow.MINUTE:
            return 60
        return 3600


@dataclass(frozen=True)
class RateLimitPrefs:
    """Per-device delivery caps. A cap of 0 denies every notification."""
    max_per_minute: int
    max_per_hour: int

    @classmethod
    def from_config(cls, config):
        """Build the fallback caps from application config."""
        return cls(
            max_per_minute=config.DEFAULT_MAX_PER_MINUTE,
            max_per_hour=config.DEFAULT_MAX_PER_HOUR,
        )


@dataclass(frozen=True)
class RateLimitStatus:
    """Remaining budget for a device session, read without recording."""
    remaining_minute: int
    remaining_hour: int
    reset_minute_in: int
    reset_hour_in: int

    @property
    def requests_remaining(self) -> int:
        """Get minimum remaining notifications across both windows."""
        return min(self.remaining_minute, self.remaining_hour)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of an atomic check-and-record."""
    allowed: bool
    remaining_minute: int
    remaining_hour: int
    reset_minute_in: int
    reset_hour_in: int
    exceeded_limit: Optional[RateLimitWindow] = None


class WindowStoreError(Exception):
    """Raised when the window store cannot be read or updated."""
