"""
Push rate limiting against a real Redis server.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from pushgate.dtos.gate_dto import DenialReason
from pushgate.dtos.quiet_hours_dto import NotificationSeverity, QuietHoursPrefs
from pushgate.dtos.rate_limit_dto import RateLimitPrefs, RateLimitWindow
from pushgate.repositories.push_rate_repository import PushRateRepository
from pushgate.services.notification_gate_service import NotificationGateService
from pushgate.services.push_rate_limiter_service import PushRateLimiterService
from pushgate.services.quiet_hours_service import QuietHoursService

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest.fixture
def repository(redis_client):
    return PushRateRepository(redis_client)


@pytest.fixture
def limiter(repository):
    return PushRateLimiterService(repository)


async def test_five_per_minute_scenario(limiter):
    prefs = RateLimitPrefs(max_per_minute=5, max_per_hour=100)

    results = [await limiter.check_and_record("s1", prefs) for _ in range(6)]

    assert [r.allowed for r in results] == [True] * 5 + [False]
    assert [r.remaining_minute for r in results[:5]] == [4, 3, 2, 1, 0]
    assert results[5].exceeded_limit is RateLimitWindow.MINUTE
    assert results[5].remaining_minute == 0
    assert results[5].remaining_hour == 95


async def test_first_increment_sets_window_ttls(limiter, redis_client):
    await limiter.check_and_record("s1", RateLimitPrefs(max_per_minute=5, max_per_hour=100))

    assert 0 < await redis_client.ttl("push_rate:s1:minute") <= 60
    assert 3540 < await redis_client.ttl("push_rate:s1:hour") <= 3600


async def test_denied_check_does_not_touch_counters(limiter, repository):
    prefs = RateLimitPrefs(max_per_minute=2, max_per_hour=100)
    for _ in range(2):
        await limiter.check_and_record("s1", prefs)
    before = await repository.get_counters("s1")

    for _ in range(3):
        assert (await limiter.check_and_record("s1", prefs)).allowed is False

    after = await repository.get_counters("s1")
    assert (after.minute_count, after.hour_count) == (before.minute_count, before.hour_count) == (2, 2)


async def test_hour_cap(limiter):
    prefs = RateLimitPrefs(max_per_minute=10, max_per_hour=3)

    results = [await limiter.check_and_record("s1", prefs) for _ in range(4)]

    assert results[-1].allowed is False
    assert results[-1].exceeded_limit is RateLimitWindow.HOUR
    assert results[-1].remaining_hour == 0
    assert results[-1].remaining_minute == 7


async def test_both_caps_reached_reports_minute(limiter):
    prefs = RateLimitPrefs(max_per_minute=2, max_per_hour=2)
    for _ in range(2):
        await limiter.check_and_record("s1", prefs)

    result = await limiter.check_and_record("s1", prefs)

    assert result.exceeded_limit is RateLimitWindow.MINUTE


async def test_concurrent_checks_never_exceed_cap(limiter):
    prefs = RateLimitPrefs(max_per_minute=10, max_per_hour=100)

    results = await asyncio.gather(*(limiter.check_and_record("s1", prefs) for _ in range(50)))

    allowed = [r for r in results if r.allowed]
    denied = [r for r in results if not r.allowed]
    assert len(allowed) == 10
    assert len(denied) == 40
    assert all(r.exceeded_limit is RateLimitWindow.MINUTE for r in denied)
    assert sorted(r.remaining_minute for r in allowed) == list(range(10))


async def test_sessions_are_independent(limiter):
    prefs = RateLimitPrefs(max_per_minute=1, max_per_hour=10)

    assert (await limiter.check_and_record("s1", prefs)).allowed is True
    assert (await limiter.check_and_record("s2", prefs)).allowed is True
    assert (await limiter.check_and_record("s1", prefs)).allowed is False


async def test_status_and_reset(limiter):
    prefs = RateLimitPrefs(max_per_minute=3, max_per_hour=10)

    fresh = await limiter.get_status("s1", prefs)
    assert (fresh.remaining_minute, fresh.reset_minute_in, fresh.reset_hour_in) == (3, 60, 3600)

    await limiter.check_and_record("s1", prefs)
    status = await limiter.get_status("s1", prefs)
    assert status.remaining_minute == 2
    assert status.remaining_hour == 9

    await limiter.reset("s1")
    assert (await limiter.get_status("s1", prefs)).remaining_minute == 3


async def test_gate_quiet_hours_leave_budget_untouched(limiter):
    gate = NotificationGateService(QuietHoursService(), limiter)
    quiet = QuietHoursPrefs(enabled=True, start="22:00", end="06:00")
    caps = RateLimitPrefs(max_per_minute=5, max_per_hour=100)
    night = datetime(2026, 3, 2, 23, 0, tzinfo=timezone.utc)

    decision = await gate.decide("s1", quiet, caps, NotificationSeverity.LOW, night)

    assert decision.reason is DenialReason.QUIET_HOURS
    assert decision.remaining_hour == 100
    assert (await gate.get_status("s1", caps)).remaining_hour == 100
