"""Race setup API router."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import ShadowSetupRequest, ShadowSetupResponse
from shadow_race.services.config_service import resolve_config, seed_user_config

router = APIRouter(prefix="/shadow", tags=["setup"])


@router.post("/setup", response_model=ShadowSetupResponse)
def setup_race(
    body: Optional[ShadowSetupRequest] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Seed the caller's race config from a difficulty preset (easy, medium, hard)."""
    difficulty = seed_user_config(db, user.id, body.difficulty if body else None)
    return {"ok": True, "difficulty": difficulty, "config": resolve_config(db, user.id)}
