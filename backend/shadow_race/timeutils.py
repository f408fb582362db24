"""Timezone helpers. Database timestamps are naive UTC."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from shadow_race.config import get_settings

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999000)
END_OF_DAY_GAP = timedelta(milliseconds=1)


def utcnow() -> datetime:
    """Current time as naive UTC, the storage convention."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def as_aware_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=pytz.utc)
    return dt.astimezone(pytz.utc)


def as_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(pytz.utc).replace(tzinfo=None)


def resolve_timezone(name: Optional[str]):
    """Return a tzinfo for `name`, falling back to the configured default."""
    default_name = get_settings().default_timezone
    candidate = (name or "").strip() or default_name
    try:
        return pytz.timezone(candidate)
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, using %s", candidate, default_name)
        try:
            return pytz.timezone(default_name)
        except pytz.UnknownTimeZoneError:
            return pytz.utc


def _offset_at(tz, instant: datetime) -> timedelta:
    return instant.astimezone(tz).utcoffset()


def local_to_utc(wall: datetime, tz) -> datetime:
    """
    Convert a naive local wall time in `tz` to an aware UTC instant.
    
    The offset is read at the naive instant, applied, then re-read at the
    result. If a DST transition sits between the two, the second offset wins
    as long as it maps back to `wall`. A wall time inside a spring-forward
    gap does not exist; it is moved forward past the gap, so a day that
    begins in one starts at the first real instant.
    """
    as_utc = wall.replace(tzinfo=pytz.utc)
    offset = _offset_at(tz, as_utc)
    candidate = as_utc - offset
    corrected = _offset_at(tz, candidate)
    if corrected != offset:
        second = as_utc - corrected
        if second.astimezone(tz).replace(tzinfo=None) == wall:
            candidate = second
        elif candidate.astimezone(tz).replace(tzinfo=None) != wall:
            # in a gap
            candidate = max(candidate, second)
    return candidate


def local_day_bounds(day: date, tz) -> Tuple[datetime, datetime]:
    """
    Aware UTC instants for the first and last millisecond of local `day`.

    Normally local 00:00:00.000 and 23:59:59.999. The end is taken one
    millisecond before the next day starts, so a repeated evening hour is
    included and a midnight gap starts the day at the first real instant.
    """
    start = local_to_utc(datetime.combine(day, time.min), tz)
    end = local_to_utc(datetime.combine(day + timedelta(days=1), time.min), tz) - END_OF_DAY_GAP
    return start, end


def local_now(tz, now: Optional[datetime] = None) -> datetime:
    return as_aware_utc(now or utcnow()).astimezone(tz)


def local_today(tz, now: Optional[datetime] = None) -> date:
    return local_now(tz, now).date()
