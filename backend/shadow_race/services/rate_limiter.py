"""Notification rate limiting: a daily cap plus minimum spacing."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shadow_race.timeutils import as_aware_utc

RATE_LIMIT_DAILY = "rate_limit_daily"
RATE_LIMIT_SPACING = "rate_limit_spacing"


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    reason: Optional[str] = None


def check_rate_limit(
    count_today: int,
    last_sent_at: Optional[datetime],
    now: datetime,
    max_per_day: int,
    min_spacing_seconds: float,
) -> RateDecision:
    """
    Decide whether one more notification may go out.
    
    The daily cap is checked first, then spacing against the latest send.
    Callers read the history and write the new row in separate steps, so two
    concurrent callers can both pass; the limit is approximate.
    """
    if count_today >= max_per_day:
        return RateDecision(False, RATE_LIMIT_DAILY)
    
    if last_sent_at is not None and min_spacing_seconds > 0:
        elapsed = (as_aware_utc(now) - as_aware_utc(last_sent_at)).total_seconds()
        if elapsed < min_spacing_seconds:
            return RateDecision(False, RATE_LIMIT_SPACING)
    
    return RateDecision(True)
