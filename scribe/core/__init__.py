"""Core app configuration, database, errors and security."""

from scribe.core.config import get_settings, settings
from scribe.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
