import hmac
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..access import SessionInfo, require_session
from ..auth_utils import hash_password, verify_password, create_access_token
from ..config import get_admin_registration_keys
from ..database import atomic, get_db
from ..errors import Conflict, Forbidden, InvalidInput, NotFound, Unauthorized
from ..models.user import (
    AdminRegisterRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    Role,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _issue_token(user: User) -> str:
    return create_access_token({
        "user_id": user.user_id,
        "email": user.email,
        "role": user.role,
    })


def _require_credentials(payload: RegisterRequest) -> None:
    if not payload.name.strip() or not payload.password.strip():
        raise InvalidInput("Missing required fields")


def _create_user(db: Session, payload: RegisterRequest, role: Role) -> User:
    existing_user = db.query(User).filter(User.email == payload.email).first()
    if existing_user:
        raise Conflict("User with this email already exists")

    new_user = User(
        name=payload.name.strip(),
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=role.value,
    )
    try:
        with atomic(db):
            db.add(new_user)
    except IntegrityError:
        raise Conflict("User with this email already exists")
    db.refresh(new_user)

    logger.info("Registered %s account %s", role.value, new_user.user_id)
    return new_user


def _registration_response(user: User) -> RegisterResponse:
    return RegisterResponse(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        role=user.role,
        token=_issue_token(user),
    )


# -------------------------------------------------------
# REGISTER
# -------------------------------------------------------
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new citizen account."""
    _require_credentials(payload)
    return _registration_response(_create_user(db, payload, Role.USER))


@router.post("/register-admin", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def register_admin(payload: AdminRegisterRequest, db: Session = Depends(get_db)):
    """Register an administrator; requires one of the configured admin keys."""
    _require_credentials(payload)
    accepted_keys = get_admin_registration_keys()
    if not accepted_keys:
        raise Forbidden("Admin registration is disabled")
    if not any(hmac.compare_digest(payload.admin_key.encode(), key.encode()) for key in accepted_keys):
        logger.warning("Admin registration attempted with an invalid key")
        raise Forbidden("Invalid admin key")

    return _registration_response(_create_user(db, payload, Role.ADMIN))


# -------------------------------------------------------
#  LOGIN
# -------------------------------------------------------
@router.post("/login", response_model=LoginResponse)
def login_user(payload: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate user and issue JWT token."""
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    return LoginResponse(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        role=user.role,
        token=_issue_token(user),
    )


# -------------------------------------------------------
# PROFILE
# -------------------------------------------------------
@router.get("/me", response_model=ProfileResponse)
def get_profile(
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Get the currently logged-in user's profile."""
    user = db.query(User).filter(User.user_id == session.user_id).first()
    if not user:
        raise NotFound("User not found")
    return user
