"""How fast is the user moving today: daily count and recent rate."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shadow_race.models import User, Task, TaskCompletion, SpeedSample
from shadow_race.timeutils import (
    as_naive_utc,
    local_day_bounds,
    local_now,
    resolve_timezone,
    utcnow,
)

logger = logging.getLogger(__name__)

RECENT_SPEED_LOOKBACK_HOURS = 6
RECENT_SPEED_MAX_SAMPLES = 30


@dataclass
class CompletedToday:
    day: date
    tz_name: str
    count: int
    day_start: datetime  # naive UTC, first instant of the local day
    task_ids: List[int] = field(default_factory=list)
    completion_times: List[datetime] = field(default_factory=list)  # naive UTC


def speed_now(completion_times: List[datetime], now: datetime) -> int:
    """Completions in the last 60 minutes, i.e. tasks per hour right now."""
    cutoff = as_naive_utc(now) - timedelta(hours=1)
    return sum(1 for t in completion_times if t >= cutoff)


def average_speed_today(completed: int, day_start: datetime, now: datetime) -> float:
    """Tasks per hour since the local day began, with a one-minute floor."""
    elapsed = as_naive_utc(now) - as_naive_utc(day_start)
    elapsed_hours = max(1 / 60, elapsed.total_seconds() / 3600)
    return completed / elapsed_hours


class SpeedAggregator:
    """Reads completions and speed samples. Never writes."""
    
    def __init__(self, db: Session):
        self.db = db
    
    @staticmethod
    def user_timezone(user: User):
        return resolve_timezone(user.timezone)
    
    def completed_today(self, user: User, now: Optional[datetime] = None) -> CompletedToday:
        """
        Distinct user-owned tasks completed during the user's local today.
        
        Completions of shadow-owned (mirrored) tasks do not count toward the
        user's own pace.
        """
        now = now or utcnow()
        tz = self.user_timezone(user)
        today = local_now(tz, now).date()
        start, end = local_day_bounds(today, tz)
        
        rows = (
            self.db.query(TaskCompletion.task_id, TaskCompletion.completed_at)
            .join(Task, Task.id == TaskCompletion.task_id)
            .filter(
                TaskCompletion.user_id == user.id,
                TaskCompletion.completed_at >= as_naive_utc(start),
                TaskCompletion.completed_at <= as_naive_utc(end),
                or_(Task.owner_type.is_(None), Task.owner_type == "user"),
            )
            .order_by(TaskCompletion.completed_at)
            .all()
        )
        
        task_ids = sorted({r.task_id for r in rows})
        return CompletedToday(
            day=today,
            tz_name=tz.zone,
            count=len(task_ids),
            day_start=as_naive_utc(start),
            task_ids=task_ids,
            completion_times=[r.completed_at for r in rows],
        )
    
    def recent_speed(
        self,
        user_id: int,
        fallback: Optional[float],
        lookback_hours: float = RECENT_SPEED_LOOKBACK_HOURS,
        now: Optional[datetime] = None,
    ) -> float:
        """Mean of speed samples in the lookback window, else `fallback` (or 0)."""
        since = as_naive_utc(now or utcnow()) - timedelta(hours=lookback_hours)
        samples = (
            self.db.query(SpeedSample.user_speed_now)
            .filter(SpeedSample.user_id == user_id, SpeedSample.created_at >= since)
            .order_by(SpeedSample.created_at.desc())
            .limit(RECENT_SPEED_MAX_SAMPLES)
            .all()
        )
        speeds = [float(s[0]) for s in samples if s[0] is not None]
        if speeds:
            return sum(speeds) / len(speeds)
        return float(fallback or 0)
    
    def record_sample(self, user_id: int, user_speed_now: float, now: Optional[datetime] = None) -> SpeedSample:
        """Queue a speed sample on the session. The caller commits."""
        sample = SpeedSample(
            user_id=user_id,
            user_speed_now=user_speed_now,
            created_at=as_naive_utc(now or utcnow()),
        )
        self.db.add(sample)
        return sample
