"""
Group Repository

Database operations for groups and their memberships.

The junction table has a composite primary key (user_id, group_id), so
memberships are addressed by the pair rather than by an id.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pgblog.models.group import DEFAULT_MEMBER_ROLE, Group, UserToGroup
from pgblog.repositories.base import BaseRepository


class GroupRepository(BaseRepository[Group]):
    """Repository for Group and UserToGroup database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Group, session)

    async def add_member(
        self,
        user_id: UUID,
        group_id: UUID,
        role: str = DEFAULT_MEMBER_ROLE,
    ) -> UserToGroup:
        """
        Add a user to a group.

        Raises:
            IntegrityError: If the membership already exists or either id is unknown
        """
        membership = UserToGroup(user_id=user_id, group_id=group_id, role=role)
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def remove_member(self, user_id: UUID, group_id: UUID) -> Optional[UserToGroup]:
        """
        Remove a user from a group.

        Returns:
            The deleted membership, or None if there was none
        """
        stmt = (
            delete(UserToGroup)
            .where(UserToGroup.user_id == user_id, UserToGroup.group_id == group_id)
            .returning(UserToGroup)
        )
        result = await self.session.scalars(stmt)
        return result.one_or_none()

    async def get_members(self, group_id: UUID) -> list[UserToGroup]:
        """Memberships of a group with each member loaded, earliest joiner first."""
        result = await self.session.execute(
            select(UserToGroup)
            .where(UserToGroup.group_id == group_id)
            .options(selectinload(UserToGroup.user))
            .order_by(UserToGroup.joined_at)
        )
        return list(result.scalars().all())
