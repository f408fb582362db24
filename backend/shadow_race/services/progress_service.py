"""Daily progress commits: completed vs target, decision, and nudges."""

import logging
import math
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shadow_race.errors import PersistenceError
from shadow_race.models import User, DailyProgress, ProgressCommit
from shadow_race.schemas import ShadowConfigSchema
from shadow_race.services.alignment import compute_lead
from shadow_race.services.config_service import resolve_config
from shadow_race.services.llm_service import LLMService
from shadow_race.services.message_composer import build_composer, nudge_context
from shadow_race.services.notification_service import NotificationService
from shadow_race.services.speed_service import (
    CompletedToday,
    SpeedAggregator,
    average_speed_today,
    speed_now,
)
from shadow_race.timeutils import utcnow

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def decision_kind(delta: int) -> str:
    if delta >= 2:
        return "boost"
    if delta <= -2:
        return "slowdown"
    if delta in (-1, 1):
        return "nudge"
    return "noop"


class ProgressService:
    """Measures today's race standing and persists it."""
    
    def __init__(self, db: Session, llm_service: Optional[LLMService] = None):
        self.db = db
        self.llm_service = llm_service
        self.speed = SpeedAggregator(db)
        self.notifications = NotificationService(db)
    
    def resolve_target(self, user_id: int, config: ShadowConfigSchema) -> float:
        """Latest smoothed target, else the configured target, else base speed."""
        latest = (
            self.db.query(DailyProgress)
            .filter(DailyProgress.user_id == user_id, DailyProgress.shadow_speed_target.isnot(None))
            .order_by(DailyProgress.date.desc())
            .first()
        )
        if latest is not None:
            return float(latest.shadow_speed_target)
        if config.shadow_speed_target is not None:
            return float(config.shadow_speed_target)
        return float(config.base_speed)
    
    def delta(self, user: User, now: Optional[datetime] = None, config: Optional[ShadowConfigSchema] = None) -> Dict[str, Any]:
        """Read-only standing for today."""
        completed, target_today = self._standing(user, now or utcnow(), config)
        return {
            "tz": completed.tz_name,
            "today": completed.day,
            "completed_today": completed.count,
            "target_today": target_today,
            "delta": completed.count - target_today,
            "completed_task_ids": completed.task_ids,
        }
    
    def _standing(self, user: User, now: datetime, config: Optional[ShadowConfigSchema]) -> Tuple[CompletedToday, int]:
        config = config or resolve_config(self.db, user.id)
        completed = self.speed.completed_today(user, now)
        target_today = max(0, round_half_up(self.resolve_target(user.id, config)))
        return completed, target_today
    
    def commit(
        self,
        user: User,
        extra_payload: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
        config: Optional[ShadowConfigSchema] = None,
    ) -> Dict[str, Any]:
        """Upsert today's commit and daily record, and record a speed sample."""
        now = now or utcnow()
        config = config or resolve_config(self.db, user.id)
        completed, target_today = self._standing(user, now, config)
        delta = completed.count - target_today
        
        kind = decision_kind(delta)
        payload = {"tz": completed.tz_name, "completedTaskIds": completed.task_ids, **(extra_payload or {})}
        
        commit = (
            self.db.query(ProgressCommit)
            .filter(ProgressCommit.user_id == user.id, ProgressCommit.day == completed.day)
            .first()
        )
        if commit is None:
            commit = ProgressCommit(user_id=user.id, day=completed.day)
            self.db.add(commit)
        commit.completed_today = completed.count
        commit.target_today = target_today
        commit.delta = delta
        commit.decision_kind = kind
        commit.payload = payload
        
        user_speed_avg = round(average_speed_today(completed.count, completed.day_start, now), 2)
        daily = self.get_or_create_daily(user.id, completed.day, tier=config.difficulty_tier)
        daily.user_distance = completed.count
        daily.shadow_distance = target_today
        daily.lead = compute_lead(daily.shadow_distance, daily.user_distance)
        daily.user_speed_avg = user_speed_avg
        if daily.shadow_speed_target is None:
            daily.shadow_speed_target = self.resolve_target(user.id, config)
        
        self.speed.record_sample(user.id, speed_now(completed.completion_times, now), now)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"could not commit progress for user {user.id}") from e
        
        logger.info(
            "Progress commit user=%s day=%s completed=%s target=%s decision=%s",
            user.id, completed.day, completed.count, target_today, kind,
        )
        return {
            "ok": True,
            "day": completed.day,
            "delta": delta,
            "target_today": target_today,
            "completed_today": completed.count,
            "decision_kind": kind,
            "user_speed_avg": user_speed_avg,
            "payload": payload,
        }
    
    def get_or_create_daily(self, user_id: int, day, tier: str = "normal") -> DailyProgress:
        daily = (
            self.db.query(DailyProgress)
            .filter(DailyProgress.user_id == user_id, DailyProgress.date == day)
            .first()
        )
        if daily is None:
            daily = DailyProgress(
                user_id=user_id, date=day, user_distance=0, shadow_distance=0, lead=0, difficulty_tier=tier,
            )
            self.db.add(daily)
        return daily
    
    async def run_today(self, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Commit today's standing and, unless it is a noop, send a nudge."""
        now = now or utcnow()
        config = resolve_config(self.db, user.id)
        if not config.enabled_race:
            return {"ok": False, "reason": "race_disabled", "nudged": False}
        
        commit = self.commit(user, now=now, config=config)
        result = {
            "ok": True,
            "decision_kind": commit["decision_kind"],
            "delta": commit["delta"],
            "target_today": commit["target_today"],
            "completed_today": commit["completed_today"],
            "nudged": False,
        }
        if commit["decision_kind"] == "noop":
            return result
        
        context = nudge_context(
            commit["decision_kind"], commit["delta"], commit["target_today"], commit["completed_today"]
        )
        message = await build_composer(config, self.llm_service).compose(context)
        sent = self.notifications.send(
            user.id,
            message.title,
            message.body,
            tz=self.speed.user_timezone(user),
            daily_cap=config.max_notifications_per_day,
            min_spacing_seconds=config.min_seconds_between_notifications,
            now=now,
        )
        if not sent.sent:
            result["reason"] = sent.reason
            return result
        
        result.update(
            nudged=True,
            message_id=sent.notification.id,
            title=message.title,
            body=message.body,
        )
        return result
