"""
Base Model Classes

This module provides the foundational classes for all SQLAlchemy models.
It includes the declarative base and common mixins for identifiers,
timestamps and soft deletion.

Model Hierarchy:
================
    Base                    ← SQLAlchemy declarative base
       │
       ├── CreatedAtMixin   ← created_at only (profiles, comments, groups, events)
       ├── TimestampMixin   ← created_at + updated_at (users, posts)
       └── SoftDeleteMixin  ← Soft delete with deleted_at (users)

Identifiers:
============
Primary keys are UUIDv7: the leading 48 bits are a millisecond timestamp, so
ids sort in creation order. That is what makes ``ORDER BY id DESC`` usable as
a cursor for pagination. Ids are generated client-side by new_id() so the
schema does not depend on PostgreSQL 18's uuidv7().

Usage:
======
    from pgblog.models.base import Base, TimestampMixin, SoftDeleteMixin, new_id

    class User(Base, TimestampMixin, SoftDeleteMixin):
        __tablename__ = "users"
        id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=new_id)
"""

from datetime import datetime, timezone
import os
import threading
import time
from typing import Any, Optional
import uuid

from sqlalchemy import DateTime, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# 74 random bits per id (rand_a + rand_b in RFC 9562)
_RAND_BITS = 74
_RAND_B_MASK = (1 << 62) - 1

_id_lock = threading.Lock()
_last_ms = 0
_last_rand = 0


def new_id() -> uuid.UUID:
    """
    Generate a time-ordered UUIDv7 primary key.

    Layout (RFC 9562):
        48 bits  unix time in milliseconds
         4 bits  version (7)
        12 bits  random / counter
         2 bits  variant (0b10)
        62 bits  random / counter

    Ids from one process are strictly increasing: within the same
    millisecond (or if the clock steps back) the random part is
    incremented instead of redrawn.
    """
    global _last_ms, _last_rand

    with _id_lock:
        now_ms = time.time_ns() // 1_000_000
        if now_ms > _last_ms:
            _last_ms = now_ms
            _last_rand = int.from_bytes(os.urandom(10), "big") >> (80 - _RAND_BITS)
        else:
            _last_rand += 1
            if _last_rand >> _RAND_BITS:
                _last_ms += 1
                _last_rand = 0
        ms, rand = _last_ms, _last_rand

    value = (
        (ms << 80)
        | (0x7 << 76)
        | ((rand >> 62) << 64)
        | (0b10 << 62)
        | (rand & _RAND_B_MASK)
    )
    return uuid.UUID(int=value)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Provides type annotation support for columns and maps Python dicts to
    PostgreSQL JSONB.
    """

    # Map Python dict type to PostgreSQL JSONB for flexible JSON storage
    type_annotation_map = {
        dict[str, Any]: JSONB,
    }


class CreatedAtMixin:
    """
    Mixin that adds a creation timestamp.

    created_at is set by PostgreSQL on INSERT via server_default.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin that adds automatic timestamp tracking to models.

    Provides two timestamp columns that are automatically managed:
    - created_at: Set when the record is first inserted
    - updated_at: Updated whenever the record is modified

    Database Behavior:
    ==================
    - created_at: Set by PostgreSQL on INSERT via server_default
    - updated_at: Set on INSERT, updated by SQLAlchemy on UPDATE via onupdate.
      onupdate also fires for Core ``update()`` statements, so bulk updates
      issued by the repositories bump it as well.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class SoftDeleteMixin:
    """
    Mixin that adds soft delete capability to models.

    Instead of permanently deleting records, soft delete marks them
    as deleted by setting a timestamp. The row stays retrievable by id and
    can be restored by clearing the timestamp.

    Example values:
        deleted_at: None              (record is active)
        deleted_at: 2024-01-20T09:00:00Z  (record was soft-deleted)

    Querying:
    =========
    Queries for active rows filter with:
        query.where(MyModel.deleted_at.is_(None))
    """

    # NULL means the record is active; a timestamp means it's deleted
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    @property
    def is_deleted(self) -> bool:
        """True if deleted_at is set."""
        return self.deleted_at is not None
