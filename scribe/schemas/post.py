"""Request/response schemas for blog post endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Body of POST /blogs. Constraints are enforced by PostStore."""

    title: str | None = Field(default=None, description="3-200 characters")
    description: str | None = Field(default=None, description="At least 10 characters")
    category: str | None = Field(default=None, description="One of the fixed categories; default General")
    image: str | None = Field(default=None, description="Optional base64 data URI or URL")


class PostUpdate(BaseModel):
    """Body of PUT /blogs/{id}. Only fields present in the body are changed; image=null removes the image."""

    title: str | None = None
    description: str | None = None
    category: str | None = None
    image: str | None = None


class PostOut(BaseModel):
    """Post as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    category: str
    author_id: int
    author_name: str
    image: str | None = None
    created_at: datetime
    updated_at: datetime
