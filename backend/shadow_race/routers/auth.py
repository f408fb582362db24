"""Authentication dependencies and the current-user endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from shadow_race.database import get_db
from shadow_race.errors import AuthenticationError
from shadow_race.models import User
from shadow_race.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Tokens are issued by the external auth provider; tokenUrl only feeds the docs UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


class UserMeResponse(BaseModel):
    id: int
    email: str
    name: str
    timezone: Optional[str] = None


# ============== Dependencies ==============

def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user."""
    user = AuthService(db).user_from_token(token)
    if user is None:
        logger.warning("Rejected request with missing or invalid bearer token")
        raise AuthenticationError("invalid or missing bearer token")
    return user


def require_cron_secret(
    x_cron_secret: Optional[str] = Header(None),
    secret: Optional[str] = Query(None),
) -> None:
    """Shared-secret check for scheduler calls (header or ?secret=)."""
    if not AuthService.verify_cron_secret(x_cron_secret or secret):
        logger.warning("Rejected cron call with a wrong or missing secret")
        raise AuthenticationError("bad cron secret")


# ============== Endpoints ==============

@router.get("/me", response_model=UserMeResponse)
def get_me(
    current_user: User = Depends(get_current_user),
):
    """Get current authenticated user info."""
    return UserMeResponse(
        id=current_user.id,
        email=current_user.email or "",
        name=current_user.name or "",
        timezone=current_user.timezone,
    )
