"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """
    {success, message?, data?, count?, error?}

    Routes serialize with response_model_exclude_unset so fields that were
    never set are left out of the body.
    """

    success: bool = Field(default=True, description="Whether the request succeeded")
    message: str | None = Field(default=None, description="Human-readable outcome")
    data: T | None = Field(default=None, description="Payload")
    count: int | None = Field(default=None, ge=0, description="Number of items in data")
    error: str | None = Field(default=None, description="Machine-readable error code")
