from datetime import datetime, timedelta

import pytz

from shadow_race.services.rate_limiter import (
    RATE_LIMIT_DAILY,
    RATE_LIMIT_SPACING,
    check_rate_limit,
)

NOW = datetime(2024, 6, 12, 14, 30)


def test_allows_first_notification():
    decision = check_rate_limit(0, None, NOW, max_per_day=10, min_spacing_seconds=900)
    assert decision.allowed
    assert decision.reason is None


def test_daily_cap_wins_over_spacing():
    decision = check_rate_limit(10, NOW - timedelta(seconds=30), NOW, max_per_day=10, min_spacing_seconds=900)
    assert not decision.allowed
    assert decision.reason == RATE_LIMIT_DAILY


def test_spacing_rejects_recent_send():
    decision = check_rate_limit(2, NOW - timedelta(minutes=5), NOW, max_per_day=10, min_spacing_seconds=900)
    assert decision.reason == RATE_LIMIT_SPACING


def test_spacing_boundary_is_allowed():
    decision = check_rate_limit(2, NOW - timedelta(seconds=900), NOW, max_per_day=10, min_spacing_seconds=900)
    assert decision.allowed


def test_zero_cap_rejects_everything():
    decision = check_rate_limit(0, None, NOW, max_per_day=0, min_spacing_seconds=0)
    assert decision.reason == RATE_LIMIT_DAILY


def test_mixes_aware_and_naive_timestamps():
    aware_now = pytz.utc.localize(NOW)
    decision = check_rate_limit(1, NOW - timedelta(minutes=1), aware_now, max_per_day=10, min_spacing_seconds=900)
    assert decision.reason == RATE_LIMIT_SPACING
