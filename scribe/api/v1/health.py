"""GET /health: process liveness plus a database round-trip."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from scribe.core.config import settings
from scribe.core.database import check_db_connected, get_db
from scribe.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """
    Report that Scribe is up and whether posts and accounts can be read.
    Answers 200 even when the database is down; check `database`.
    """
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
