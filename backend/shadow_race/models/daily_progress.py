"""Daily race record, one per user and local calendar day."""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class DailyProgress(Base):
    """User vs shadow standing for one day. Never deleted."""
    
    __tablename__ = "shadow_progress_daily"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_progress_user_date"),)
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # in the user's timezone
    
    # Speeds (tasks per hour)
    user_speed_avg = Column(Float, nullable=True)
    shadow_speed_target = Column(Float, nullable=True)
    
    # Cumulative counts for the day
    user_distance = Column(Float, default=0)
    shadow_distance = Column(Float, default=0)
    lead = Column(Float, default=0)  # shadow_distance - user_distance; positive = shadow leads
    
    difficulty_tier = Column(String(20), default="normal")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    
    user = relationship("User", back_populates="daily_progress")
    
    def __repr__(self):
        return f"<DailyProgress {self.user_id} {self.date} lead={self.lead}>"
