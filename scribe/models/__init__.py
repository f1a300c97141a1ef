"""SQLAlchemy ORM models."""

from scribe.models.base import Base
from scribe.models.post import POST_CATEGORIES, Post
from scribe.models.user import User

__all__ = ["Base", "POST_CATEGORIES", "Post", "User"]
