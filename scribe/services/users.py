"""Credential store: create, authenticate and look up users."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from scribe.core.errors import (
    Conflict,
    StoreError,
    Unauthenticated,
    UnauthenticatedReason,
    ValidationFailed,
)
from scribe.core.security import (
    EMAIL_MAX_LEN,
    EMAIL_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    verify_password,
)
from scribe.models.base import MAX_ROW_ID
from scribe.models.user import ROLE_USER, ROLES, User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username/email or password"


def _validate_registration(username: str, email: str, password: str) -> None:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise ValidationFailed(
            f"Username must be {USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} characters."
        )
    if not (EMAIL_MIN_LEN <= len(email) <= EMAIL_MAX_LEN) or "@" not in email:
        raise ValidationFailed("Please provide a valid email address.")
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValidationFailed(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )


def create_user(
    db: Session,
    username: str | None,
    email: str | None,
    password: str | None,
    role: str = ROLE_USER,
) -> User:
    """
    Register a new user with a bcrypt-hashed password.

    Raises ValidationFailed for missing or malformed fields and Conflict when
    the email or username is already taken (email is reported first).
    """
    username = (username or "").strip()
    email = (email or "").strip().lower()
    if not username or not email or not password:
        raise ValidationFailed("Please provide username, email, and password")
    _validate_registration(username, email, password)
    if role not in ROLES:
        raise ValidationFailed(f"Role must be one of: {', '.join(ROLES)}.")

    existing = (
        db.query(User)
        .filter(or_(User.email == email, User.username == username))
        .first()
    )
    if existing is not None:
        if existing.email == email:
            raise Conflict("Email already exists")
        raise Conflict("Username already exists")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as e:
        # Concurrent registration won the unique index after our pre-check.
        db.rollback()
        raise Conflict("Username or email already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to create user %r", username)
        raise StoreError("Registration failed", cause=e) from e
    db.refresh(user)
    logger.info("Registered user id=%s username=%r role=%s", user.id, user.username, user.role)
    return user


def authenticate_user(db: Session, login: str | None, password: str | None) -> User:
    """
    Return the user whose username or email equals login and whose password matches.

    Unknown user and wrong password raise the same Unauthenticated error.
    """
    login = (login or "").strip()
    if not login or not password:
        raise ValidationFailed("Please provide username/email and password")

    user = (
        db.query(User)
        .filter(or_(User.username == login, User.email == login.lower()))
        .first()
    )
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %r", login)
        raise Unauthenticated(
            UnauthenticatedReason.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
        )
    return user


def get_user(db: Session, user_id: int) -> User | None:
    """Look up a user by id; None if it does not exist."""
    if not 1 <= user_id <= MAX_ROW_ID:
        return None
    return db.get(User, user_id)
