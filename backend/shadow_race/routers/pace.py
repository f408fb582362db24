"""Pace API router: intraday adjustment and on-demand nightly smoothing."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import NightlySmoothResponse, PaceAdjustResponse
from shadow_race.services.llm_service import LLMService
from shadow_race.services.pace_service import PaceService

router = APIRouter(prefix="/shadow/pace", tags=["pace"])


@router.post("/adjust", response_model=PaceAdjustResponse, response_model_exclude_none=True)
def adjust_pace(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Blend today's target toward the user's recent speed."""
    return PaceService(db).adjust_intraday(user)


@router.post("/smooth/nightly", response_model=NightlySmoothResponse, response_model_exclude_none=True)
async def smooth_nightly(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Run the nightly smoothing for the caller only."""
    service = PaceService(db, llm_service=LLMService())
    return await service.nightly(user)
