"""Rate-limited writes of notification records."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shadow_race.errors import PersistenceError
from shadow_race.models import Notification
from shadow_race.services.rate_limiter import check_rate_limit
from shadow_race.timeutils import as_naive_utc, local_day_bounds, local_today, utcnow

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    sent: bool
    reason: Optional[str] = None
    notification: Optional[Notification] = None


class NotificationService:
    """Persists notifications for delivery, subject to the rate limiter."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def history(self, user_id: int, tz, now: datetime) -> Tuple[int, Optional[datetime]]:
        """(count sent during the user's local today, latest send overall)."""
        start, end = local_day_bounds(local_today(tz, now), tz)
        count_today = (
            self.db.query(func.count(Notification.id))
            .filter(
                Notification.user_id == user_id,
                Notification.created_at >= as_naive_utc(start),
                Notification.created_at <= as_naive_utc(end),
            )
            .scalar()
        )
        last_sent_at = (
            self.db.query(func.max(Notification.created_at))
            .filter(Notification.user_id == user_id)
            .scalar()
        )
        return count_today or 0, last_sent_at
    
    def send(
        self,
        user_id: int,
        title: str,
        body: str,
        tz,
        daily_cap: int,
        min_spacing_seconds: float,
        url: str = "/shadow",
        now: Optional[datetime] = None,
    ) -> SendResult:
        """
        Write a notification if the limiter allows it.
        
        Check and write are separate statements; concurrent senders for one
        user can exceed the cap by the number of racing requests.
        """
        now = now or utcnow()
        count_today, last_sent_at = self.history(user_id, tz, now)
        decision = check_rate_limit(count_today, last_sent_at, now, daily_cap, min_spacing_seconds)
        if not decision.allowed:
            logger.info("Notification for user %s skipped: %s", user_id, decision.reason)
            return SendResult(sent=False, reason=decision.reason)
        
        notification = Notification(
            user_id=user_id,
            title=title,
            body=body,
            url=url,
            created_at=as_naive_utc(now),
        )
        self.db.add(notification)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"could not store notification for user {user_id}") from e
        self.db.refresh(notification)
        return SendResult(sent=True, notification=notification)
    
    def list_recent(self, user_id: int, limit: int = 50):
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )
    
    def mark_read(self, user_id: int, notification_id: int, now: Optional[datetime] = None) -> Optional[Notification]:
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if notification is None:
            return None
        if notification.read_at is None:
            notification.read_at = as_naive_utc(now or utcnow())
            self.db.commit()
            self.db.refresh(notification)
        return notification
