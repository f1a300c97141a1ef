"""
Application error taxonomy.

Every failure a request can end in is one ScribeError subclass. Each carries
a stable machine-readable code (rendered as the envelope's ``error`` field)
and a human message; handlers in scribe.main turn them into responses.
"""

from enum import Enum


class ScribeError(Exception):
    """Base class for errors rendered as an API envelope."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class ValidationFailed(ScribeError):
    """Client-supplied data violates the data model constraints."""

    status_code = 400
    code = "validation_error"


class ImageTooLarge(ValidationFailed):
    """Image payload exceeds POST_IMAGE_MAX_BYTES."""

    code = "image_too_large"


class Conflict(ScribeError):
    """Duplicate unique field at registration."""

    status_code = 400
    code = "conflict"


class UnauthenticatedReason(str, Enum):
    """Why a credential was rejected. Only used for messaging."""

    NO_CREDENTIAL = "no_credential"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    USER_GONE = "user_gone"
    INVALID_CREDENTIALS = "invalid_credentials"


class Unauthenticated(ScribeError):
    """Missing, invalid or expired credential, or unknown login."""

    status_code = 401

    def __init__(self, reason: UnauthenticatedReason, message: str) -> None:
        self.reason = reason
        super().__init__(message, code=reason.value)


class Forbidden(ScribeError):
    """Authenticated, but the policy denied the action."""

    status_code = 403
    code = "forbidden"


class NotFound(ScribeError):
    status_code = 404
    code = "not_found"


class StoreError(ScribeError):
    """Persistence failure. Never retried."""

    status_code = 500
    code = "store_error"

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
