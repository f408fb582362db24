"""Services package."""

from shadow_race.services.llm_service import LLMService, GeminiProvider
from shadow_race.services.speed_service import SpeedAggregator
from shadow_race.services.progress_service import ProgressService
from shadow_race.services.pace_service import PaceService
from shadow_race.services.notification_service import NotificationService
from shadow_race.services.taunt_engine import TauntEngine
from shadow_race.services.weekly_rollup import WeeklyRollupService
from shadow_race.services.event_service import ShadowEventService
from shadow_race.services.auth_service import AuthService

__all__ = [
    "LLMService",
    "GeminiProvider",
    "SpeedAggregator",
    "ProgressService",
    "PaceService",
    "NotificationService",
    "TauntEngine",
    "WeeklyRollupService",
    "ShadowEventService",
    "AuthService",
]
