"""
Enums used across the application.

Stored as native PostgreSQL enum types. The database type names (``status``
and ``user_role``) and the lowercase literals are part of the schema.
"""

from enum import Enum


class UserStatus(str, Enum):
    """Account lifecycle state."""

    PENDING = "pending"
    ACTIVE = "active"
    ARCHIVED = "archived"


class UserRole(str, Enum):
    """Access level of a user."""

    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
