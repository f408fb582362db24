"""Tunable race parameters, per user with a global fallback row."""

from sqlalchemy import Column, Integer, Float, Boolean, String, DateTime, ForeignKey

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class ShadowConfig(Base):
    """Race configuration. A row with user_id NULL is the global default."""
    
    __tablename__ = "shadow_config"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True, index=True)
    
    # Pace (tasks per hour)
    base_speed = Column(Float, default=3)
    min_speed = Column(Float, default=0.5)
    max_speed = Column(Float, default=5.0)
    shadow_speed_target = Column(Float, nullable=True)
    
    # Adaptation
    adapt_up_factor = Column(Float, default=1.2)
    adapt_down_factor = Column(Float, default=0.85)
    smoothing_alpha = Column(Float, default=0.25)
    intraday_alpha = Column(Float, default=0.5)
    recovery_grace_days = Column(Integer, default=1)
    carryover_cap = Column(Float, default=10)
    
    # Chosen at setup; copied onto new daily records
    difficulty_tier = Column(String(20), nullable=True)
    
    # Feature toggles
    enabled_race = Column(Boolean, default=True, index=True)
    ghost_mode_ai = Column(Boolean, default=False)
    
    # Notification limits
    max_notifications_per_day = Column(Integer, default=10)
    min_seconds_between_notifications = Column(Integer, default=900)
    
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
