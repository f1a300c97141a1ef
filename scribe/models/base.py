"""SQLAlchemy declarative Base and shared model configuration."""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase

# Largest value an INTEGER primary key column can hold.
MAX_ROW_ID = 2**31 - 1


def utcnow() -> datetime:
    """Timezone-aware current time used for created_at/updated_at."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass
