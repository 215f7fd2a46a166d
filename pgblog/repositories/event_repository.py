"""
Event Repository

Queries over the JSONB ``events.data`` column.

    find_containing({"type": "purchase"})
        WHERE data @> '{"type": "purchase"}'      (served by the GIN index)

    find_by_type("purchase")
        WHERE data ->> 'type' = 'purchase'
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pgblog.models.event import Event
from pgblog.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Repository for Event database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Event, session)

    async def find_containing(self, fragment: dict[str, Any]) -> list[Event]:
        """Events whose data structurally contains fragment, newest first."""
        result = await self.session.execute(
            select(Event).where(Event.data.contains(fragment)).order_by(Event.id.desc())
        )
        return list(result.scalars().all())

    async def find_by_type(self, event_type: str) -> list[Event]:
        """Events whose top-level ``type`` key equals event_type, newest first."""
        result = await self.session.execute(
            select(Event).where(Event.data["type"].astext == event_type).order_by(Event.id.desc())
        )
        return list(result.scalars().all())
