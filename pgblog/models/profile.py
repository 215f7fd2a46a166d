"""
Profile Entity Model

Optional public profile of a user. Strict one-to-one: ``user_id`` is UNIQUE,
and the row is removed by PostgreSQL when its user is deleted.
"""

from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pgblog.models.base import Base, CreatedAtMixin, new_id


if TYPE_CHECKING:
    from pgblog.models.user import User


class Profile(Base, CreatedAtMixin):
    """
    Profile model.

    Attributes:
        id: Unique identifier (UUIDv7)
        user_id: Owning user (unique, ON DELETE CASCADE)
        bio: Free-form biography
        avatar_url: Avatar image URL
        website: Personal website URL
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=new_id,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user: Mapped["User"] = relationship(
        "User",
        back_populates="profile",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Profile(id={self.id}, user_id={self.user_id})>"
