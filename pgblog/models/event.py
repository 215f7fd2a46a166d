"""
Event Entity Model

Append-only event log with a free-form JSONB payload.

The GIN index on ``data`` serves containment queries::

    SELECT * FROM events WHERE data @> '{"type": "purchase"}'

Expected payload shape (not enforced by the database):

    {
        "type": "purchase",
        "payload": {...},
        "metadata": {"source": "web", "version": 1}   # optional
    }
"""

from typing import Any
import uuid

from sqlalchemy import Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from pgblog.models.base import Base, CreatedAtMixin, new_id


class Event(Base, CreatedAtMixin):
    """
    Event model.

    Attributes:
        id: Unique identifier (UUIDv7)
        data: Event document (JSONB, GIN-indexed)
    """

    __tablename__ = "events"
    __table_args__ = (
        Index("events_data_gin_idx", "data", postgresql_using="gin"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=new_id,
    )

    data: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)

    @property
    def event_type(self) -> Any:
        """The ``type`` key of the payload, if present."""
        return self.data.get("type")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Event(id={self.id}, type={self.event_type})>"
