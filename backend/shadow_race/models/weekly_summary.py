"""Weekly rollup of daily race records."""

from sqlalchemy import Column, Integer, Float, Date, DateTime, ForeignKey, JSON, UniqueConstraint

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class WeeklySummary(Base):
    """Recomputed from scratch on every run (upsert by user and week_start)."""
    
    __tablename__ = "weekly_summaries"
    __table_args__ = (UniqueConstraint("user_id", "week_start", name="uq_weekly_user_week"),)
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)  # Monday
    week_end = Column(Date, nullable=False)  # Sunday
    
    user_total = Column(Float, default=0)
    shadow_total = Column(Float, default=0)
    wins = Column(Integer, default=0)
    losses = Column(Integer, default=0)
    carryover = Column(Float, default=0)
    meta = Column(JSON, default=dict)
    
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
