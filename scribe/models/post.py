"""ORM model for blog posts."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from scribe.models.base import Base, utcnow

POST_CATEGORIES = (
    "General",
    "Technology",
    "Lifestyle",
    "Travel",
    "Food",
    "Health",
    "Education",
    "Business",
    "Entertainment",
    "Tutorial",
    "Sports",
)
DEFAULT_CATEGORY = "General"

TITLE_MIN_LEN = 3
TITLE_MAX_LEN = 200
DESCRIPTION_MIN_LEN = 10


class Post(Base):
    """
    A blog post owned by one user.

    author_id is not a cascading foreign key: posts whose author was removed
    out of band stay readable. author_name is the author's username captured
    at creation and is never refreshed.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX_LEN), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, default=DEFAULT_CATEGORY, index=True)
    author_id = Column(Integer, nullable=False, index=True)
    author_name = Column(String(50), nullable=False)
    # base64 data URI or URL, stored as sent
    image = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
