"""Notification record written by the composer, delivered elsewhere."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class Notification(Base):
    """A message for the user's inbox / push queue."""
    
    __tablename__ = "user_messages"
    __table_args__ = (Index("ix_user_messages_user_created", "user_id", "created_at"),)
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    url = Column(String(255), default="/shadow")
    
    created_at = Column(DateTime, default=utcnow)
    read_at = Column(DateTime, nullable=True)
    
    @property
    def is_read(self):
        return self.read_at is not None
