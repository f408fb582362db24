"""Weekly summary API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import WeeklyGenerateResponse
from shadow_race.services.weekly_rollup import WeeklyRollupService
from shadow_race.timeutils import local_today, resolve_timezone, utcnow

router = APIRouter(prefix="/shadow/weekly", tags=["weekly"])


@router.post("/summary/generate", response_model=WeeklyGenerateResponse)
def generate_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Roll up the current week, as seen in the user's timezone."""
    today = local_today(resolve_timezone(user.timezone), utcnow())
    summary = WeeklyRollupService(db).rollup(user.id, today)
    return {"ok": True, "summary": summary}
