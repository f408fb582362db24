"""User model for race participants."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class User(Base):
    """User account. Sessions are issued by the external auth provider."""
    
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    name = Column(String(255), nullable=True)
    
    # IANA zone name, e.g. "Europe/Paris"; null falls back to settings
    timezone = Column(String(64), nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    is_active = Column(Boolean, default=True)
    
    # Relationships
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
    daily_progress = relationship("DailyProgress", back_populates="user", cascade="all, delete-orphan")
    
    def __repr__(self):
        return f"<User {self.id} {self.email}>"
