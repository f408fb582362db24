"""Database models package."""

from shadow_race.models.user import User
from shadow_race.models.task import Task, TaskCompletion
from shadow_race.models.shadow_config import ShadowConfig
from shadow_race.models.daily_progress import DailyProgress
from shadow_race.models.speed_sample import SpeedSample
from shadow_race.models.progress_commit import ProgressCommit
from shadow_race.models.notification import Notification
from shadow_race.models.weekly_summary import WeeklySummary
from shadow_race.models.shadow_task import ShadowTaskInstance, AlignmentLog
from shadow_race.models.taunt import Taunt

__all__ = [
    "User",
    "Task",
    "TaskCompletion",
    "ShadowConfig",
    "DailyProgress",
    "SpeedSample",
    "ProgressCommit",
    "Notification",
    "WeeklySummary",
    "ShadowTaskInstance",
    "AlignmentLog",
    "Taunt",
]
