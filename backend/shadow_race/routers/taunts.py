"""Taunt API router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import TauntResult
from shadow_race.services.taunt_engine import TauntEngine

router = APIRouter(prefix="/shadow/taunts", tags=["taunts"])


@router.post("/maybe", response_model=TauntResult, response_model_exclude_none=True)
def maybe_taunt(
    force: int = Query(0, ge=0, le=1),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a taunt if one is due. `force=1` treats the moment as critical."""
    return TauntEngine(db).maybe_generate(user, force_critical=bool(force))
