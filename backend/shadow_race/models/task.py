"""Tasks and completions. Owned by the tracker; the engine only reads them."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Float
from sqlalchemy.orm import relationship

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class Task(Base):
    """A recurring work item on the user's routine."""
    
    __tablename__ = "tasks"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    
    # "user" for the user's own tasks, "shadow" for mirrored competitor copies.
    # Legacy rows have null, which counts as "user".
    owner_type = Column(String(20), nullable=True, default="user")
    active = Column(Boolean, default=True)
    ep_value = Column(Float, default=1)
    
    created_at = Column(DateTime, default=utcnow)
    
    user = relationship("User", back_populates="tasks")
    completions = relationship("TaskCompletion", back_populates="task", cascade="all, delete-orphan")


class TaskCompletion(Base):
    """One completion of a task."""
    
    __tablename__ = "task_completions"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    completed_at = Column(DateTime, nullable=False, index=True)  # UTC
    ep_awarded = Column(Float, nullable=True)
    
    task = relationship("Task", back_populates="completions")
