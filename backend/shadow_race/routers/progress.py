"""Daily progress API router: standing, commit, and the nudge run."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import (
    ProgressCommitRequest,
    ProgressCommitResponse,
    ProgressDeltaResponse,
    RunTodayResponse,
)
from shadow_race.services.llm_service import LLMService
from shadow_race.services.progress_service import ProgressService

router = APIRouter(prefix="/shadow/progress", tags=["progress"])


@router.get("/delta", response_model=ProgressDeltaResponse)
def get_delta(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Completed vs target for the user's local today. Writes nothing."""
    return ProgressService(db).delta(user)


@router.post("/commit", response_model=ProgressCommitResponse)
def commit_progress(
    body: Optional[ProgressCommitRequest] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Persist today's standing and decision."""
    extra = body.payload if body else None
    return ProgressService(db).commit(user, extra_payload=extra)


@router.post("/run-today", response_model=RunTodayResponse, response_model_exclude_none=True)
async def run_today(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Commit today's standing and nudge the user if the decision calls for it."""
    service = ProgressService(db, llm_service=LLMService())
    return await service.run_today(user)
