"""Read-only race state: today's record, speed series, history, config."""

from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import DailyProgress, User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import (
    DailyProgressResponse,
    HistoryResponse,
    ShadowConfigSchema,
    SpeedHistoryResponse,
)
from shadow_race.services.config_service import resolve_config
from shadow_race.services.event_service import ShadowEventService
from shadow_race.timeutils import local_today, resolve_timezone, utcnow

router = APIRouter(prefix="/shadow", tags=["shadow"])

ALIGNMENT_EVENTS_LIMIT = 200


def _daily_series(db: Session, user: User, days: int):
    today = local_today(resolve_timezone(user.timezone), utcnow())
    since = today - timedelta(days=days - 1)
    return (
        db.query(DailyProgress)
        .filter(DailyProgress.user_id == user.id, DailyProgress.date >= since)
        .order_by(DailyProgress.date)
        .all()
    )


@router.get("/state/today", response_model=DailyProgressResponse)
def get_state_today(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Latest daily record, or an empty record carrying the configured pace."""
    latest = (
        db.query(DailyProgress)
        .filter(DailyProgress.user_id == user.id)
        .order_by(DailyProgress.date.desc())
        .first()
    )
    if latest is not None:
        return latest

    config = resolve_config(db, user.id)
    target = config.shadow_speed_target if config.shadow_speed_target is not None else config.base_speed
    return DailyProgressResponse(
        date=local_today(resolve_timezone(user.timezone), utcnow()),
        shadow_speed_target=target,
        difficulty_tier=config.difficulty_tier,
    )


@router.get("/speed/history", response_model=SpeedHistoryResponse)
def get_speed_history(
    days: int = Query(14, ge=1, le=90),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Daily records for the last `days` local days, oldest first."""
    return {"days": days, "series": _daily_series(db, user, days)}


@router.get("/history", response_model=HistoryResponse)
def get_history(
    days: int = Query(30, ge=1, le=180),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Daily series plus the most recent alignment events."""
    return {
        "days": days,
        "daily": _daily_series(db, user, days),
        "events": ShadowEventService(db).recent_alignment(user.id, limit=ALIGNMENT_EVENTS_LIMIT),
    }


@router.get("/config", response_model=ShadowConfigSchema)
def get_config(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Resolved race configuration for the caller."""
    return resolve_config(db, user.id)
