"""Short-interval speed observations feeding the intraday adapter."""

from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class SpeedSample(Base):
    """User speed (tasks/hour over the last hour) at commit time."""
    
    __tablename__ = "shadow_speed_samples"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_speed_now = Column(Float, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
