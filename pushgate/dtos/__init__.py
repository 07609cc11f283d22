"""
Data Transfer Objects (DTOs) package.

DTOs are simple dataclasses used to transfer data between layers.
"""

from pushgate.dtos.rate_limit_dto import (
    RateLimitWindow,
    RateLimitPrefs,
    RateLimitStatus,
    RateLimitResult,
    WindowStoreError,
)
from pushgate.dtos.quiet_hours_dto import (
    NotificationSeverity,
    NotificationEvent,
    QuietHoursPrefs,
)
from pushgate.dtos.gate_dto import (
    DenialReason,
    GateDecision,
)

__all__ = [
    "RateLimitWindow",
    "RateLimitPrefs",
    "RateLimitStatus",
    "RateLimitResult",
    "WindowStoreError",
    "NotificationSeverity",
    "NotificationEvent",
    "QuietHoursPrefs",
    "DenialReason",
    "GateDecision",
]
