"""Core app configuration, database and security."""

from tekyoflow.core.config import get_settings, settings
from tekyoflow.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
