"""
Gate decision returned for every candidate push notification.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

from pushgate.dtos.rate_limit_dto import RateLimitResult, RateLimitStatus, RateLimitWindow


class DenialReason(str, Enum):
    """Why a notification was held back."""
    QUIET_HOURS = "quiet_hours"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True)
class GateDecision:
    """Admission decision for one notification candidate."""
    allowed: bool
    reason: Optional[DenialReason]
    remaining_minute: int
    remaining_hour: int
    reset_minute_in: int
    reset_hour_in: int
    exceeded_limit: Optional[RateLimitWindow] = None

    @classmethod
    def from_rate_limit(cls, result: RateLimitResult):
        """Translate a rate limiter result into a decision."""
        return cls(
            allowed=result.allowed,
            reason=None if result.allowed else DenialReason.RATE_LIMITED,
            remaining_minute=result.remaining_minute,
            remaining_hour=result.remaining_hour,
            reset_minute_in=result.reset_minute_in,
            reset_hour_in=result.reset_hour_in,
            exceeded_limit=result.exceeded_limit,
        )

    @classmethod
    def quiet_hours(cls, status: RateLimitStatus):
        """Suppressed by quiet hours; budget reported from a non-mutating read."""
        return cls(
            allowed=False,
            reason=DenialReason.QUIET_HOURS,
            remaining_minute=status.remaining_minute,
            remaining_hour=status.remaining_hour,
            reset_minute_in=status.reset_minute_in,
            reset_hour_in=status.reset_hour_in,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["reason"] = self.reason.value if self.reason else None
        data["exceeded_limit"] = self.exceeded_limit.value if self.exceeded_limit else None
        return data
