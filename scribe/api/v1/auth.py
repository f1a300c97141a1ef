"""Register/login routes and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from scribe.core.database import get_db
from scribe.core.errors import Forbidden, Unauthenticated, UnauthenticatedReason
from scribe.core.security import (
    ExpiredTokenError,
    MalformedTokenError,
    TokenService,
    get_token_service,
)
from scribe.models.user import User
from scribe.schemas.auth import (
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserOut,
)
from scribe.schemas.common import Envelope
from scribe.services.users import authenticate_user, create_user, get_user

router = APIRouter()
# auto_error=False: a missing or non-Bearer header yields None so we can answer with our own 401.
# HTTPBearer matches the scheme case-insensitively; get_current_user requires exactly "Bearer".
security = HTTPBearer(auto_error=False)
BEARER_SCHEME = "Bearer"


def _auth_payload(user: User, tokens: TokenService) -> AuthPayload:
    return AuthPayload(user=UserOut.model_validate(user), token=tokens.issue(user.id))


@router.post(
    "/register",
    response_model=Envelope[AuthPayload],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Envelope[AuthPayload]:
    """
    Create an account with role 'user' and return it with a bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = create_user(db, body.username, body.email, body.password)
    return Envelope[AuthPayload](
        success=True,
        message="Registration successful",
        data=_auth_payload(user, tokens),
    )


@router.post(
    "/login",
    response_model=Envelope[AuthPayload],
    response_model_exclude_unset=True,
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Envelope[AuthPayload]:
    """Authenticate with username (or email) and password; returns a bearer token."""
    user = authenticate_user(db, body.username, body.password)
    return Envelope[AuthPayload](
        success=True,
        message="Login successful",
        data=_auth_payload(user, tokens),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer token and return the current user.

    The user is re-read from the database on every request, so a deleted
    account is rejected even while its token is unexpired. Raises 401 with a
    reason-specific message.
    """
    if credentials is None or credentials.scheme != BEARER_SCHEME:
        raise Unauthenticated(
            UnauthenticatedReason.NO_CREDENTIAL,
            "No token provided, authorization denied",
        )
    try:
        user_id = tokens.verify(credentials.credentials)
    except ExpiredTokenError:
        raise Unauthenticated(UnauthenticatedReason.EXPIRED_TOKEN, "Token expired")
    except MalformedTokenError:
        raise Unauthenticated(UnauthenticatedReason.INVALID_TOKEN, "Invalid token")

    user = get_user(db, user_id)
    if user is None:
        raise Unauthenticated(UnauthenticatedReason.USER_GONE, "User not found")
    return CurrentUser.model_validate(user)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise Forbidden("Access denied. Admin role required.")
    return current_user


@router.get("/me", response_model=Envelope[UserOut], response_model_exclude_unset=True)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Envelope[UserOut]:
    """Return the authenticated user."""
    return Envelope[UserOut](success=True, data=UserOut.model_validate(current_user))


@router.get("/users", response_model=Envelope[list[UserOut]], response_model_exclude_unset=True)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[list[UserOut]]:
    """List all users (admin only)."""
    users = db.query(User).order_by(User.id).all()
    return Envelope[list[UserOut]](
        success=True,
        count=len(users),
        data=[UserOut.model_validate(u) for u in users],
    )
