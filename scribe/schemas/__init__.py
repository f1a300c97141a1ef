"""Pydantic request/response schemas."""

from scribe.schemas.auth import (
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserOut,
)
from scribe.schemas.common import Envelope
from scribe.schemas.health import HealthResponse
from scribe.schemas.post import PostCreate, PostOut, PostUpdate

__all__ = [
    "AuthPayload",
    "CurrentUser",
    "Envelope",
    "HealthResponse",
    "LoginRequest",
    "PostCreate",
    "PostOut",
    "PostUpdate",
    "RegisterRequest",
    "UserOut",
]
