"""
Core Module

Provides core functionality shared across the package:
- Structured logging
- Custom exceptions

Usage:
======
    from pgblog.core.logging import logger, get_logger
    from pgblog.core.exceptions import ConfigurationError

    logger.info("Starting operation", user_id=user_id)
"""

from pgblog.core.logging import (
    logger,
    get_logger,
    setup_logging,
    log_context,
    clear_log_context,
)
from pgblog.core.exceptions import (
    PgblogError,
    ConfigurationError,
    DatabaseNotInitializedError,
)

__all__ = [
    # Logging
    "logger",
    "get_logger",
    "setup_logging",
    "log_context",
    "clear_log_context",
    # Exceptions
    "PgblogError",
    "ConfigurationError",
    "DatabaseNotInitializedError",
]
