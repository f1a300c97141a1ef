"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Registration form. Presence and lengths are checked by the user service."""

    username: str | None = Field(default=None, description="Unique username")
    email: str | None = Field(default=None, description="Unique email address")
    password: str | None = Field(default=None, description="Plain-text password")


class LoginRequest(BaseModel):
    """Credentials for login; username may also be the account email."""

    username: str | None = Field(default=None, description="Username or email")
    password: str | None = Field(default=None, description="Password")


class UserOut(BaseModel):
    """Public user fields (never the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str


class CurrentUser(UserOut):
    """Authenticated actor resolved from the bearer token."""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class AuthPayload(BaseModel):
    """data of a successful register/login."""

    user: UserOut
    token: str = Field(..., description="JWT access token; send as 'Authorization: Bearer <token>'")
