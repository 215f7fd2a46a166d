"""
Custom Exceptions

Application-specific exceptions.

Exception Hierarchy:
====================
    PgblogError (base)
       │
       ├── ConfigurationError           ← Missing DATABASE_URL, invalid setting
       └── DatabaseNotInitializedError  ← Engine used before init_db()

What is NOT wrapped:
====================
Errors raised by PostgreSQL (unique, foreign-key, not-null and check
violations) surface as ``sqlalchemy.exc.IntegrityError`` and are propagated
to the caller unchanged. Single-row lookups return ``None`` instead of
raising when nothing matches.

Usage:
======
    from pgblog.core.exceptions import ConfigurationError

    raise ConfigurationError("DATABASE_URL is required", details={"fields": ["DATABASE_URL"]})
"""

from typing import Any, Optional


class PgblogError(Exception):
    """
    Base exception for all pgblog errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for structured logging.

        Returns:
            Dictionary with error details
        """
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(PgblogError):
    """
    Configuration error.

    Raised when required configuration is absent or invalid. Fatal at
    startup: entry points log it and exit with status 1.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )


class DatabaseNotInitializedError(PgblogError):
    """Raised when the engine or session factory is used before init_db()."""

    def __init__(self) -> None:
        super().__init__(
            message="Database is not initialized; call init_db() first",
            error_code="DATABASE_NOT_INITIALIZED",
        )
