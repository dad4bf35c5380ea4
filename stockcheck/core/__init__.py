"""Core application modules."""
from stockcheck.core.config import settings, get_settings, Settings
from stockcheck.core.database import Base, get_db, init_db, close_db

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "Base",
    "get_db",
    "init_db",
    "close_db",
]
