"""Core app configuration, security helpers and error taxonomy."""

from app.core.config import get_settings, settings
from app.core.errors import AppError

__all__ = ["AppError", "get_settings", "settings"]
