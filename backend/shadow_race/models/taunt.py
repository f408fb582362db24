"""Taunt engine history, used for its own daily cap."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class Taunt(Base):
    __tablename__ = "ai_taunts"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)  # random, critical
    intensity = Column(String(10), nullable=False)  # low, medium, high
    message = Column(Text, nullable=False)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
