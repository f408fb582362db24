"""Planned shadow work units and the alignment log written on completion."""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey

from shadow_race.database import Base
from shadow_race.timeutils import utcnow


class ShadowTaskInstance(Base):
    """One scheduled slot of the shadow's routine for a local day."""
    
    __tablename__ = "shadow_task_instances"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True)
    
    planned_start_at = Column(DateTime, nullable=False)  # UTC
    planned_end_at = Column(DateTime, nullable=False)  # UTC
    planned_date_local = Column(Date, nullable=True)
    
    status = Column(String(20), default="pending")  # pending, completed
    progress = Column(Integer, default=0)  # 0-100
    completed_at = Column(DateTime, nullable=True)


class AlignmentLog(Base):
    __tablename__ = "alignment_log"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    shadow_instance_id = Column(Integer, ForeignKey("shadow_task_instances.id"), nullable=False)
    alignment_status = Column(String(10), nullable=False)  # ahead, behind, tied
    recorded_at = Column(DateTime, default=utcnow, index=True)
