"""Per-day pace decision, rewritten on every commit of that day."""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, JSON, UniqueConstraint

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class ProgressCommit(Base):
    __tablename__ = "shadow_progress_commits"
    __table_args__ = (UniqueConstraint("user_id", "day", name="uq_commit_user_day"),)
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    day = Column(Date, nullable=False)
    
    completed_today = Column(Integer, default=0)
    target_today = Column(Integer, default=0)
    delta = Column(Integer, default=0)  # completed - target
    decision_kind = Column(String(20), default="noop")  # boost, slowdown, nudge, noop
    payload = Column(JSON, nullable=True)
    
    created_at = Column(DateTime, default=utcnow, onupdate=utcnow)
