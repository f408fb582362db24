"""Weekly rollup of daily race records into win/loss summaries."""

import logging
from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from shadow_race.models import DailyProgress, WeeklySummary

logger = logging.getLogger(__name__)


@dataclass
class WeekTotals:
    user_total: float = 0
    shadow_total: float = 0
    wins: int = 0
    losses: int = 0
    carryover: float = 0


def week_bounds(today: date) -> Tuple[date, date]:
    """Monday..Sunday (inclusive) of the week containing `today`."""
    sunday_based = today.isoweekday() % 7  # 0 = Sunday
    days_since_monday = (sunday_based + 6) % 7
    week_start = today - timedelta(days=days_since_monday)
    return week_start, week_start + timedelta(days=6)


def summarize_week(rows: Iterable[DailyProgress]) -> WeekTotals:
    """
    Totals over one week of daily rows.
    
    A day with negative lead is a user win, positive a shadow win, zero is
    neither. Carryover is the shadow's surplus, i.e. how far the user ended
    the week behind.
    """
    totals = WeekTotals()
    for row in rows:
        totals.user_total += float(row.user_distance or 0)
        totals.shadow_total += float(row.shadow_distance or 0)
        lead = float(row.lead or 0)
        if lead < 0:
            totals.wins += 1
        elif lead > 0:
            totals.losses += 1
    totals.carryover = max(0, totals.shadow_total - totals.user_total)
    return totals


class WeeklyRollupService:
    """Recompute and upsert WeeklySummary rows."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def rollup(self, user_id: int, today: date) -> dict:
        week_start, week_end = week_bounds(today)
        rows = (
            self.db.query(DailyProgress)
            .filter(
                DailyProgress.user_id == user_id,
                DailyProgress.date >= week_start,
                DailyProgress.date <= week_end,
            )
            .order_by(DailyProgress.date)
            .all()
        )
        totals = summarize_week(rows)
        
        summary = (
            self.db.query(WeeklySummary)
            .filter(WeeklySummary.user_id == user_id, WeeklySummary.week_start == week_start)
            .first()
        )
        if summary is None:
            summary = WeeklySummary(user_id=user_id, week_start=week_start)
            self.db.add(summary)
        
        summary.week_end = week_end
        summary.user_total = totals.user_total
        summary.shadow_total = totals.shadow_total
        summary.wins = totals.wins
        summary.losses = totals.losses
        summary.carryover = totals.carryover
        summary.meta = {"days": len(rows)}
        self.db.commit()
        logger.info("Weekly rollup user=%s week=%s wins=%s losses=%s", user_id, week_start, totals.wins, totals.losses)
        
        return {
            "week_start": week_start.isoformat(),
            "week_end": week_end.isoformat(),
            **asdict(totals),
        }
    
    def users_with_rows(self, week_start: date, week_end: date) -> list:
        rows = (
            self.db.query(DailyProgress.user_id)
            .filter(DailyProgress.date >= week_start, DailyProgress.date <= week_end)
            .distinct()
            .all()
        )
        return sorted(r[0] for r in rows)
