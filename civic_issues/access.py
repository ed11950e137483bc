"""
Session lookup and authorization guards.

Every route that needs a caller depends on one of the guards below instead of
re-fetching the user and comparing roles itself. An absent or unusable
session is always reported as Unauthorized before any role or ownership
check runs.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .auth_utils import decode_access_token
from .database import get_db
from .errors import Forbidden, Unauthorized
from .models.models import Issue
from .models.user import Role, User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


class SessionInfo(BaseModel):
    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def get_current_session(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[SessionInfo]:
    """Resolve the bearer token to a session, or None for anonymous callers."""
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        logger.debug("Rejected invalid or expired token")
        return None

    user = db.query(User).filter(User.user_id == payload.get("user_id")).first()
    if not user:
        return None

    # The stored role wins over whatever the token claims
    return SessionInfo(user_id=user.user_id, role=user.role)


def require_session(
    session: Optional[SessionInfo] = Depends(get_current_session),
) -> SessionInfo:
    if session is None:
        raise Unauthorized()
    return session


def require_role(role: Role):
    """Build a dependency that admits only sessions holding ``role``."""

    def _guard(session: SessionInfo = Depends(require_session)) -> SessionInfo:
        if session.role != role:
            raise Forbidden(f"{role.value.capitalize()} access required")
        return session

    return _guard


require_admin = require_role(Role.ADMIN)


def require_owner_or_admin(session: SessionInfo, issue: Issue) -> None:
    if session.is_admin or issue.reporter_id == session.user_id:
        return
    raise Forbidden("You don't have permission to modify this issue")
