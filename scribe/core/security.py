"""Password hashing and JWT issuance/verification for authentication."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from scribe.core.config import get_settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for registration input validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 50
EMAIL_MIN_LEN = 3
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenError(Exception):
    """Base class for bearer token verification failures."""


class MalformedTokenError(TokenError):
    """Token is structurally invalid, has a bad signature, or lacks a usable subject."""


class ExpiredTokenError(TokenError):
    """Token signature is valid but its expiry has passed."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Issues and verifies signed, time-bounded bearer tokens.

    Tokens are stateless HS256 JWTs carrying sub (user id), iat and exp.
    Nothing is stored server-side, so a token stays valid until it expires
    or the signing secret changes.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        if lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, user_id: int) -> str:
        """Create a token for user_id that expires one lifetime from now."""
        now = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + int(self._lifetime.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """
        Return the user id embedded in token.

        Raises MalformedTokenError on any structural or signature problem and
        ExpiredTokenError once the current time is strictly past exp.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except jwt.PyJWTError as e:
            raise MalformedTokenError(str(e)) from e

        exp = payload["exp"]
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise MalformedTokenError("Expiration time must be an integer")
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise MalformedTokenError("Invalid token subject") from e

        if self._clock().timestamp() > exp:
            raise ExpiredTokenError("Token expired")
        return user_id


def build_token_service(settings=None) -> TokenService:
    """Create a TokenService from application settings."""
    settings = settings or get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        lifetime=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    )


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service (dependency); built once from settings."""
    return build_token_service()
