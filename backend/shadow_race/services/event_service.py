"""Completion of planned shadow work units."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from shadow_race.models import ShadowTaskInstance, AlignmentLog
from shadow_race.services.alignment import classify_alignment
from shadow_race.timeutils import as_naive_utc, utcnow

logger = logging.getLogger(__name__)


class EventNotFound(LookupError):
    pass


class EventForbidden(PermissionError):
    pass


class ShadowEventService:
    def __init__(self, db: Session):
        self.db = db
    
    def complete(self, user_id: int, instance_id: int, now: Optional[datetime] = None) -> dict:
        """Mark an instance completed and log the shadow's alignment."""
        instance = self.db.query(ShadowTaskInstance).filter(ShadowTaskInstance.id == instance_id).first()
        if instance is None:
            raise EventNotFound(instance_id)
        if instance.user_id != user_id:
            raise EventForbidden(instance_id)
        
        now = as_naive_utc(now or utcnow())
        instance.status = "completed"
        instance.progress = 100
        instance.completed_at = now
        
        alignment = classify_alignment(now, instance.planned_start_at, instance.planned_end_at)
        self.db.add(
            AlignmentLog(
                user_id=user_id,
                shadow_instance_id=instance.id,
                alignment_status=alignment,
                recorded_at=now,
            )
        )
        self.db.commit()
        logger.info("Shadow instance %s completed by user %s: %s", instance.id, user_id, alignment)
        
        return {"ok": True, "id": instance.id, "status": "completed", "alignment_status": alignment}
    
    def recent_alignment(self, user_id: int, limit: int = 200):
        return (
            self.db.query(AlignmentLog)
            .filter(AlignmentLog.user_id == user_id)
            .order_by(AlignmentLog.recorded_at.desc(), AlignmentLog.id.desc())
            .limit(limit)
            .all()
        )
