"""
Push rate limit repository for Redis operations.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Tuple

from pushgate.core.logging import get_logger
from pushgate.dtos.rate_limit_dto import RateLimitPrefs, RateLimitWindow
from pushgate.infrastructure.redis_client import RedisClient

logger = get_logger(__name__)


# KEYS[1] = minute key, KEYS[2] = hour key
# ARGV[1] = max per minute, ARGV[2] = max per hour,
# ARGV[3] = minute window seconds, ARGV[4] = hour window seconds
#
# Returns {allowed (0/1), minute count, hour count, minute TTL, hour TTL,
#          exceeded (0 = none, 1 = minute, 2 = hour)}
CHECK_AND_RECORD_SCRIPT = """
local minuteKey = KEYS[1]
local hourKey = KEYS[2]
local maxPerMinute = tonumber(ARGV[1])
local maxPerHour = tonumber(ARGV[2])

local minuteCount = tonumber(redis.call('GET', minuteKey) or '0')
local hourCount = tonumber(redis.call('GET', hourKey) or '0')
local minuteTTL = redis.call('TTL', minuteKey)
local hourTTL = redis.call('TTL', hourKey)

if minuteCount >= maxPerMinute then
  return {0, minuteCount, hourCount, minuteTTL, hourTTL, 1}
end

if hourCount >= maxPerHour then
  return {0, minuteCount, hourCount, minuteTTL, hourTTL, 2}
end

local newMinuteCount = redis.call('INCR', minuteKey)
if minuteTTL < 0 then
  redis.call('EXPIRE', minuteKey, tonumber(ARGV[3]))
  minuteTTL = tonumber(ARGV[3])
end

local newHourCount = redis.call('INCR', hourKey)
if hourTTL < 0 then
  redis.call('EXPIRE', hourKey, tonumber(ARGV[4]))
  hourTTL = tonumber(ARGV[4])
end

return {1, newMinuteCount, newHourCount, minuteTTL, hourTTL, 0}
"""

_EXCEEDED_CODES = {
    0: None,
    1: RateLimitWindow.MINUTE,
    2: RateLimitWindow.HOUR,
}


@dataclass(frozen=True)
class WindowCounters:
    """Raw counter state; TTL is -2 for a missing key, -1 for no expiry."""
    minute_count: int
    hour_count: int
    minute_ttl: int
    hour_ttl: int


class PushRateRepository:
    """Repository for per-session push window counters stored in Redis."""

    def __init__(self, redis_client: RedisClient, key_prefix: str = "push_rate"):
        """
        Initialize push rate repository.

        Args:
            redis_client: Redis client instance
            key_prefix: Namespace for counter keys
        """
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _get_key(self, device_session_id: str, window: RateLimitWindow) -> str:
        """
        Generate Redis key for a session's window counter.

        Args:
            device_session_id: Device session identifier
            window: Counter window

        Returns:
            Redis key
        """
        if not device_session_id:
            raise ValueError("device_session_id must be a non-empty string")
        return f"{self.key_prefix}:{device_session_id}:{window.value}"

    def _get_keys(self, device_session_id: str) -> Tuple[str, str]:
        return (
            self._get_key(device_session_id, RateLimitWindow.MINUTE),
            self._get_key(device_session_id, RateLimitWindow.HOUR),
        )

    async def record_if_under_limit(
            self,
            device_session_id: str,
            prefs: RateLimitPrefs,
    ) -> Tuple[bool, Optional[RateLimitWindow], WindowCounters]:
        """
        Atomically check both windows and increment them if neither is full.

        Args:
            device_session_id: Device session identifier
            prefs: Caps to enforce

        Returns:
            Tuple of (allowed, exceeded window or None, counters)
        """
        minute_key, hour_key = self._get_keys(device_session_id)

        reply = await self.redis.eval_script(
            CHECK_AND_RECORD_SCRIPT,
            keys=[minute_key, hour_key],
            args=[
                prefs.max_per_minute,
                prefs.max_per_hour,
                RateLimitWindow.MINUTE.seconds,
                RateLimitWindow.HOUR.seconds,
            ],
        )
        allowed, minute_count, hour_count, minute_ttl, hour_ttl, exceeded = (int(v) for v in reply)

        counters = WindowCounters(
            minute_count=minute_count,
            hour_count=hour_count,
            minute_ttl=minute_ttl,
            hour_ttl=hour_ttl,
        )

        logger.debug(
            "push_rate_checked",
            device_session_id=device_session_id,
            allowed=bool(allowed),
            minute_count=minute_count,
            hour_count=hour_count,
        )

        return bool(allowed), _EXCEEDED_CODES[exceeded], counters

    async def get_counters(self, device_session_id: str) -> WindowCounters:
        """
        Read both counters and their TTLs without modifying them.

        Args:
            device_session_id: Device session identifier

        Returns:
            Current WindowCounters (absent keys read as 0)
        """
        minute_key, hour_key = self._get_keys(device_session_id)

        minute_raw, hour_raw, minute_ttl, hour_ttl = await asyncio.gather(
            self.redis.get(minute_key),
            self.redis.get(hour_key),
            self.redis.ttl(minute_key),
            self.redis.ttl(hour_key),
        )

        return WindowCounters(
            minute_count=int(minute_raw) if minute_raw else 0,
            hour_count=int(hour_raw) if hour_raw else 0,
            minute_ttl=minute_ttl,
            hour_ttl=hour_ttl,
        )

    async def reset(self, device_session_id: str) -> int:
        """
        Delete both window counters for a session.

        Args:
            device_session_id: Device session identifier

        Returns:
            Number of keys deleted
        """
        deleted = await self.redis.delete(*self._get_keys(device_session_id))

        logger.info(
            "push_rate_counters_reset",
            device_session_id=device_session_id,
            keys_deleted=deleted,
        )

        return deleted
