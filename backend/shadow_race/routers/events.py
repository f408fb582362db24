"""Shadow event API router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.models import User
from shadow_race.routers.auth import get_current_user
from shadow_race.schemas import EventCompleteResponse
from shadow_race.services.event_service import EventForbidden, EventNotFound, ShadowEventService

router = APIRouter(prefix="/shadow/events", tags=["events"])


@router.post("/{instance_id}/complete", response_model=EventCompleteResponse)
def complete_event(
    instance_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Complete a planned shadow work unit and record the alignment."""
    service = ShadowEventService(db)
    try:
        return service.complete(user.id, instance_id)
    except EventNotFound:
        raise HTTPException(status_code=404, detail="Event not found")
    except EventForbidden:
        raise HTTPException(status_code=403, detail="Not your event")
