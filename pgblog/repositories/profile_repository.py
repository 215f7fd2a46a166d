"""
Profile Repository

Database operations specific to the Profile model.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pgblog.models.profile import Profile
from pgblog.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Profile, session)

    async def get_by_user(self, user_id: UUID) -> Optional[Profile]:
        """The profile owned by a user, or None."""
        result = await self.session.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalar_one_or_none()
