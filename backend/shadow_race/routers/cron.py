"""Scheduler-facing batch endpoints, authenticated by the shared cron secret."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import require_cron_secret
from shadow_race.schemas import BatchResponse
from shadow_race.services.batch_service import run_for_users
from shadow_race.services.config_service import enabled_user_ids
from shadow_race.services.llm_service import LLMService
from shadow_race.services.pace_service import PaceService
from shadow_race.services.progress_service import ProgressService
from shadow_race.services.taunt_engine import TauntEngine
from shadow_race.services.weekly_rollup import WeeklyRollupService, week_bounds
from shadow_race.timeutils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron/shadow",
    tags=["cron"],
    dependencies=[Depends(require_cron_secret)],
)


def _load_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise LookupError(f"user {user_id} not found")
    return user


@router.post("/run-today-all", response_model=BatchResponse, response_model_exclude_none=True)
async def run_today_all(db: Session = Depends(get_db)):
    """Commit and nudge every race-enabled user."""
    service = ProgressService(db, llm_service=LLMService())
    now = utcnow()

    async def job(user_id: int):
        return await service.run_today(_load_user(db, user_id), now=now)

    results = await run_for_users(db, enabled_user_ids(db), job, "run-today-all")
    return {"ok": True, "total": len(results), "results": results}


@router.post("/nightly-smooth", response_model=BatchResponse, response_model_exclude_none=True)
async def nightly_smooth(db: Session = Depends(get_db)):
    """Smooth every race-enabled user's target and send the nightly taunt."""
    service = PaceService(db, llm_service=LLMService())
    now = utcnow()

    async def job(user_id: int):
        return await service.nightly(_load_user(db, user_id), now=now)

    results = await run_for_users(db, enabled_user_ids(db), job, "nightly-smooth")
    return {"ok": True, "total": len(results), "results": results}


@router.post("/taunt-maybe", response_model=BatchResponse, response_model_exclude_none=True)
async def taunt_maybe(db: Session = Depends(get_db)):
    """Give every race-enabled user a chance at a taunt."""
    engine = TauntEngine(db)
    now = utcnow()

    async def job(user_id: int):
        return engine.maybe_generate(_load_user(db, user_id), now=now)

    results = await run_for_users(db, enabled_user_ids(db), job, "taunt-maybe")
    return {"ok": True, "total": len(results), "results": results}


@router.post("/weekly-summarize", response_model=BatchResponse, response_model_exclude_none=True)
async def weekly_summarize(db: Session = Depends(get_db)):
    """Roll up the current UTC week for every user with daily records in it."""
    service = WeeklyRollupService(db)
    today = utcnow().date()
    week_start, week_end = week_bounds(today)

    async def job(user_id: int):
        return {"ok": True, **service.rollup(user_id, today)}

    results = await run_for_users(
        db, service.users_with_rows(week_start, week_end), job, "weekly-summarize"
    )
    return {
        "ok": True,
        "total": len(results),
        "results": results,
        "window": {"start": week_start.isoformat(), "end": week_end.isoformat()},
    }
