"""Opportunistic taunts: critical moments and fixed daily slots."""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from shadow_race.config import get_settings
from shadow_race.models import User, DailyProgress, TaskCompletion, Taunt
from shadow_race.services.config_service import resolve_config
from shadow_race.services.notification_service import NotificationService
from shadow_race.timeutils import (
    as_aware_utc,
    as_naive_utc,
    local_day_bounds,
    local_now,
    resolve_timezone,
    utcnow,
)

logger = logging.getLogger(__name__)

NEVER_IDLE_MINUTES = 10 ** 9
SLOT_MINUTES = (10 * 60, 15 * 60, 20 * 60)
SLOT_TOLERANCE_MINUTES = 10


@dataclass
class TauntMetrics:
    lead_now: float  # positive means the shadow leads
    idle_minutes: int  # since the user's last completion


def is_critical(m: TauntMetrics) -> bool:
    return m.lead_now > 3 or m.idle_minutes >= 120


def in_random_slot(now_local: datetime) -> bool:
    minutes_of_day = now_local.hour * 60 + now_local.minute
    return any(abs(minutes_of_day - slot) <= SLOT_TOLERANCE_MINUTES for slot in SLOT_MINUTES)


def pick_taunt_message(kind: str, m: TauntMetrics) -> Tuple[str, str]:
    """(intensity, message) for a critical or slot taunt."""
    if kind == "critical":
        if m.lead_now > 6:
            return "high", f"Shadow is flying: {m.lead_now:.0f} steps ahead now!"
        if m.idle_minutes >= 240:
            return "high", f"Shadow went on without you. Been {m.idle_minutes // 60}h idle."
        if m.lead_now > 3:
            return "medium", f"Shadow is pulling away ({m.lead_now:.0f} ahead)."
        return "medium", f"It's been {m.idle_minutes}m. Ready to move?"
    
    if m.lead_now <= -1 and m.idle_minutes < 45:
        return "low", "Neck and neck. One push tilts it."
    if m.lead_now > 1:
        return "medium", "Shadow's a step ahead already."
    if m.idle_minutes >= 45:
        return "medium", "Shadow went on without you."
    return "low", "Shadow watches. Keep rolling."


class TauntEngine:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)
    
    def metrics(self, user: User, now: datetime) -> TauntMetrics:
        tz = resolve_timezone(user.timezone)
        today = local_now(tz, now).date()
        daily = (
            self.db.query(DailyProgress)
            .filter(DailyProgress.user_id == user.id, DailyProgress.date == today)
            .first()
        )
        lead_now = float(daily.lead or 0) if daily else 0.0
        
        last = (
            self.db.query(func.max(TaskCompletion.completed_at))
            .filter(TaskCompletion.user_id == user.id)
            .scalar()
        )
        idle_minutes = NEVER_IDLE_MINUTES
        if last is not None:
            elapsed = as_aware_utc(now) - as_aware_utc(last)
            idle_minutes = max(0, int(elapsed.total_seconds() // 60))
        return TauntMetrics(lead_now=lead_now, idle_minutes=idle_minutes)
    
    def taunts_today(self, user: User, now: datetime) -> int:
        tz = resolve_timezone(user.timezone)
        start, end = local_day_bounds(local_now(tz, now).date(), tz)
        return (
            self.db.query(func.count(Taunt.id))
            .filter(
                Taunt.user_id == user.id,
                Taunt.created_at >= as_naive_utc(start),
                Taunt.created_at <= as_naive_utc(end),
            )
            .scalar()
        ) or 0
    
    def maybe_generate(self, user: User, force_critical: bool = False, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Create a taunt when one is due.
        
        Critical standing always qualifies. Otherwise a taunt fires only in a
        daily slot and only if the user is behind or idle.
        """
        now = now or utcnow()
        if self.taunts_today(user, now) >= get_settings().taunt_daily_cap:
            return {"created": False, "reason": "cap_reached"}
        
        m = self.metrics(user, now)
        tz = resolve_timezone(user.timezone)
        
        kind = None
        if force_critical or is_critical(m):
            kind = "critical"
        elif in_random_slot(local_now(tz, now)) and (m.lead_now > 1 or m.idle_minutes >= 45):
            kind = "random"
        if kind is None:
            return {"created": False, "reason": "no_trigger"}
        
        intensity, message = pick_taunt_message(kind, m)
        config = resolve_config(self.db, user.id)
        sent = self.notifications.send(
            user.id,
            "Shadow taunt",
            message,
            tz=tz,
            daily_cap=config.max_notifications_per_day,
            min_spacing_seconds=config.min_seconds_between_notifications,
            now=now,
        )
        if not sent.sent:
            return {"created": False, "reason": sent.reason}
        
        taunt = Taunt(
            user_id=user.id,
            kind=kind,
            intensity=intensity,
            message=message,
            meta={"metrics": asdict(m), "notification_id": sent.notification.id},
            created_at=as_naive_utc(now),
        )
        self.db.add(taunt)
        self.db.commit()
        
        return {
            "created": True,
            "payload": {"kind": kind, "intensity": intensity, "message": message, "metrics": asdict(m)},
        }
