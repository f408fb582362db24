"""Nightly EMA smoothing and the intraday pace adapter."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shadow_race.config import get_settings
from shadow_race.models import User, DailyProgress
from shadow_race.schemas import ShadowConfigSchema
from shadow_race.services.config_service import resolve_config
from shadow_race.services.llm_service import LLMService
from shadow_race.services.message_composer import build_composer, pace_taunt_context
from shadow_race.services.notification_service import NotificationService
from shadow_race.services.pace_smoother import smooth_target
from shadow_race.services.speed_service import SpeedAggregator
from shadow_race.timeutils import utcnow

logger = logging.getLogger(__name__)

SMOOTHING_WINDOW_DAYS = 7
NO_DATA = "no_data"


class PaceService:
    """Writes the shadow's target pace onto daily records."""
    
    def __init__(self, db: Session, llm_service: Optional[LLMService] = None):
        self.db = db
        self.llm_service = llm_service
        self.speed = SpeedAggregator(db)
        self.notifications = NotificationService(db)
    
    def recent_records(self, user_id: int, limit: int = SMOOTHING_WINDOW_DAYS) -> List[DailyProgress]:
        """Last `limit` daily records, oldest first."""
        rows = (
            self.db.query(DailyProgress)
            .filter(DailyProgress.user_id == user_id)
            .order_by(DailyProgress.date.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))
    
    def smooth(self, user_id: int, config: ShadowConfigSchema) -> Dict[str, Any]:
        """EMA of the last week's user_speed_avg onto the newest record."""
        series = self.recent_records(user_id)
        if not series:
            return {"ok": False, "reason": NO_DATA}
        
        smoothed = smooth_target(
            [row.user_speed_avg for row in series],
            alpha=config.smoothing_alpha,
            min_speed=config.min_speed,
            max_speed=config.max_speed,
        )
        latest = series[-1]
        latest.shadow_speed_target = smoothed
        self.db.commit()
        
        return {
            "ok": True,
            "smoothed_target": smoothed,
            "latest_date": latest.date,
            "lead": float(latest.lead or 0),
        }
    
    async def nightly(
        self,
        user: User,
        now: Optional[datetime] = None,
        daily_cap: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Smooth, then taunt about the latest lead through the rate limiter."""
        now = now or utcnow()
        config = resolve_config(self.db, user.id)
        result = self.smooth(user.id, config)
        if not result["ok"]:
            return result
        
        context = pace_taunt_context(result["lead"], result["smoothed_target"])
        message = await build_composer(config, self.llm_service).compose(context)
        sent = self.notifications.send(
            user.id,
            message.title,
            message.body,
            tz=self.speed.user_timezone(user),
            daily_cap=daily_cap or get_settings().nightly_notification_cap,
            min_spacing_seconds=config.min_seconds_between_notifications,
            now=now,
        )
        result["notified"] = sent.sent
        result["blocked"] = sent.reason
        return result
    
    def adjust_intraday(self, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Blend the latest record's target toward the recent user speed."""
        config = resolve_config(self.db, user.id)
        today_row = (
            self.db.query(DailyProgress)
            .filter(DailyProgress.user_id == user.id)
            .order_by(DailyProgress.date.desc())
            .first()
        )
        if today_row is None:
            return {"ok": False, "reason": NO_DATA}
        
        recent = self.speed.recent_speed(user.id, fallback=today_row.user_speed_avg, now=now)
        current_target = today_row.shadow_speed_target
        if current_target is None:
            current_target = config.shadow_speed_target if config.shadow_speed_target is not None else config.base_speed
        
        new_target = smooth_target(
            [current_target, recent],
            alpha=config.intraday_alpha,
            min_speed=config.min_speed,
            max_speed=config.max_speed,
        )
        today_row.shadow_speed_target = new_target
        self.db.commit()
        
        logger.info("Intraday pace user=%s target %.2f -> %.2f (recent %.2f)", user.id, current_target, new_target, recent)
        return {
            "ok": True,
            "date": today_row.date,
            "shadow_speed_target": new_target,
            "recent_user_speed": round(recent, 2),
        }
