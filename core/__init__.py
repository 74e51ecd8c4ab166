"""Core modules for the application."""

from core.config import settings
from core.db import Base, engine, get_db, unit_of_work

__all__ = ["settings", "Base", "get_db", "engine", "unit_of_work"]
