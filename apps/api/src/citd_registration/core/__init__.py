"""
Core module - Configuration, database, scheduling and external service clients.
"""

from citd_registration.core.config import get_settings, settings
from citd_registration.core.database import Base, close_db, get_db, init_db

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
]
