"""Post persistence: validated create/update, lookup, delete and filtered listing."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scribe.core.errors import ImageTooLarge, NotFound, StoreError, ValidationFailed
from scribe.models.base import MAX_ROW_ID, utcnow
from scribe.models.post import (
    DEFAULT_CATEGORY,
    DESCRIPTION_MIN_LEN,
    POST_CATEGORIES,
    TITLE_MAX_LEN,
    TITLE_MIN_LEN,
    Post,
)
from scribe.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MAX_BYTES = 10 * 1024 * 1024
EDITABLE_FIELDS = ("title", "description", "category", "image")
# Category value the client sends to mean "no category filter".
ALL_CATEGORIES = "All"


def validate_post_fields(
    fields: Mapping[str, Any],
    *,
    partial: bool,
    max_image_bytes: int = DEFAULT_IMAGE_MAX_BYTES,
) -> dict[str, Any]:
    """
    Check post fields against the data model and return the cleaned values.

    With partial=False every required field must be present (category defaults
    to General). With partial=True only the keys present are checked and
    returned. Unknown keys are dropped. Raises ImageTooLarge for an oversized
    image, otherwise ValidationFailed listing every problem found.
    """
    cleaned: dict[str, Any] = {}
    errors: list[str] = []

    if "image" in fields:
        image = fields["image"]
        if image is not None and not isinstance(image, str):
            errors.append("Image must be a string")
        elif image and len(image) > max_image_bytes:
            raise ImageTooLarge(
                f"Image is too large. Please use an image smaller than "
                f"{max_image_bytes // (1024 * 1024) or 1}MB."
            )
        else:
            cleaned["image"] = image or None

    if "title" in fields or not partial:
        title = fields.get("title") or ""
        title = title.strip() if isinstance(title, str) else title
        if not isinstance(title, str):
            errors.append("Title must be a string")
        elif not title:
            errors.append("Blog title is required")
        elif len(title) < TITLE_MIN_LEN:
            errors.append(f"Title must be at least {TITLE_MIN_LEN} characters long")
        elif len(title) > TITLE_MAX_LEN:
            errors.append(f"Title cannot exceed {TITLE_MAX_LEN} characters")
        else:
            cleaned["title"] = title

    if "description" in fields or not partial:
        description = fields.get("description") or ""
        description = description.strip() if isinstance(description, str) else description
        if not isinstance(description, str):
            errors.append("Description must be a string")
        elif not description:
            errors.append("Blog description is required")
        elif len(description) < DESCRIPTION_MIN_LEN:
            errors.append(
                f"Description must be at least {DESCRIPTION_MIN_LEN} characters long"
            )
        else:
            cleaned["description"] = description

    if "category" in fields or not partial:
        category = fields.get("category")
        category = category.strip() if isinstance(category, str) else category
        if category is None or category == "":
            if partial:
                errors.append("Category is required")
            else:
                cleaned["category"] = DEFAULT_CATEGORY
        elif not isinstance(category, str) or category not in POST_CATEGORIES:
            errors.append(f"`{category}` is not a valid category")
        else:
            cleaned["category"] = category

    if errors:
        raise ValidationFailed("Validation error: " + ", ".join(errors))
    return cleaned


def _storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ROW_ID


class PostStore:
    """
    Persistence operations for posts over one SQLAlchemy session.

    Trusts its caller: authorization happens in the handlers before any of
    these methods run. Database failures roll back and surface as StoreError.
    """

    def __init__(
        self,
        db: Session,
        max_image_bytes: int = DEFAULT_IMAGE_MAX_BYTES,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.max_image_bytes = max_image_bytes
        self._clock = clock

    def _fail(self, message: str, error: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        logger.exception("Post store failure: %s", message)
        return StoreError(message, cause=error)

    def create(self, author_id: int, author_name: str, fields: Mapping[str, Any]) -> Post:
        """Validate fields, check the author exists, then insert the post."""
        values = validate_post_fields(
            fields, partial=False, max_image_bytes=self.max_image_bytes
        )
        try:
            if self.db.get(User, author_id) is None:
                raise ValidationFailed("Validation error: author does not exist")
            now = self._clock()
            post = Post(
                author_id=author_id,
                author_name=author_name,
                created_at=now,
                updated_at=now,
                **values,
            )
            self.db.add(post)
            self.db.commit()
            self.db.refresh(post)
        except SQLAlchemyError as e:
            raise self._fail("Failed to create blog", e) from e
        logger.info("Created post id=%s author_id=%s", post.id, author_id)
        return post

    def find_by_id(self, post_id: int) -> Post:
        """Return the post or raise NotFound."""
        if not _storable_id(post_id):
            raise NotFound("Blog not found")
        try:
            post = self.db.get(Post, post_id)
        except SQLAlchemyError as e:
            raise self._fail("Failed to fetch blog", e) from e
        if post is None:
            raise NotFound("Blog not found")
        return post

    def update(self, post_id: int, fields: Mapping[str, Any]) -> Post:
        """
        Apply the supplied editable fields and refresh updated_at.

        id, author_id, author_name and created_at are never changed, whatever
        the input contains.
        """
        values = validate_post_fields(
            {k: v for k, v in fields.items() if k in EDITABLE_FIELDS},
            partial=True,
            max_image_bytes=self.max_image_bytes,
        )
        post = self.find_by_id(post_id)
        try:
            for name, value in values.items():
                setattr(post, name, value)
            post.updated_at = self._clock()
            self.db.commit()
            self.db.refresh(post)
        except SQLAlchemyError as e:
            raise self._fail("Failed to update blog", e) from e
        logger.info("Updated post id=%s fields=%s", post_id, sorted(values))
        return post

    def delete(self, post_id: int) -> None:
        """Physically remove the post; a second call raises NotFound."""
        post = self.find_by_id(post_id)
        try:
            self.db.delete(post)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("Failed to delete blog", e) from e
        logger.info("Deleted post id=%s", post_id)

    def list_posts(self, search: str | None = None, category: str | None = None) -> list[Post]:
        """
        Posts newest first, optionally filtered.

        search: case-insensitive substring of title, description or category.
        category: exact match; empty or "All" means no filter.
        """
        query = self.db.query(Post)
        term = (search or "").strip()
        if term:
            needle = term.lower()
            query = query.filter(
                or_(
                    func.lower(Post.title).contains(needle, autoescape=True),
                    func.lower(Post.description).contains(needle, autoescape=True),
                    func.lower(Post.category).contains(needle, autoescape=True),
                )
            )
        category = (category or "").strip()
        if category and category != ALL_CATEGORIES:
            query = query.filter(Post.category == category)
        return self._newest_first(query)

    def list_by_author(self, author_id: int) -> list[Post]:
        """Posts owned by author_id, newest first."""
        if not _storable_id(author_id):
            return []
        query = self.db.query(Post).filter(Post.author_id == author_id)
        return self._newest_first(query)

    def distinct_categories(self) -> list[str]:
        """Every category used by at least one post, sorted ascending."""
        try:
            rows = self.db.query(Post.category).distinct().all()
        except SQLAlchemyError as e:
            raise self._fail("Failed to fetch categories", e) from e
        return sorted(row[0] for row in rows)

    def _newest_first(self, query) -> list[Post]:
        try:
            return query.order_by(Post.created_at.desc(), Post.id.desc()).all()
        except SQLAlchemyError as e:
            raise self._fail("Failed to fetch blogs", e) from e
