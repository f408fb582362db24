"""Routers package."""

from shadow_race.routers.auth import router as auth_router
from shadow_race.routers.progress import router as progress_router
from shadow_race.routers.pace import router as pace_router
from shadow_race.routers.events import router as events_router
from shadow_race.routers.taunts import router as taunts_router
from shadow_race.routers.weekly import router as weekly_router
from shadow_race.routers.history import router as history_router
from shadow_race.routers.notifications import router as notifications_router
from shadow_race.routers.cron import router as cron_router
from shadow_race.routers.setup import router as setup_router

__all__ = [
    "auth_router",
    "progress_router",
    "pace_router",
    "events_router",
    "taunts_router",
    "weekly_router",
    "history_router",
    "notifications_router",
    "cron_router",
    "setup_router",
]
