"""
Configuration Module

Application configuration loaded from environment variables.

Usage:
======
    from pgblog.config import get_settings

    settings = get_settings()
    db_url = settings.DATABASE_URL
"""

from pgblog.config.settings import async_database_url, get_settings, Settings

__all__ = [
    "async_database_url",
    "get_settings",
    "Settings",
]
