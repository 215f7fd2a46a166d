"""
Group and UserToGroup Entity Models

Many-to-many between users and groups through a junction table that carries
attributes of the relationship itself (the member's role and join time).

SAMPLE USERS_TO_GROUPS RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ user_id          │ 01890a5d-ac96-774b-bcce-b302099a8057                      │
│ group_id         │ 01890a5e-0f1c-7d2a-8a11-5c3b7e0f2a10                      │
│ role             │ "member"                                                  │
│ joined_at        │ 2024-02-01T12:00:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from datetime import datetime
from typing import TYPE_CHECKING
import uuid

from sqlalchemy import DateTime, ForeignKey, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pgblog.models.base import Base, CreatedAtMixin, new_id


if TYPE_CHECKING:
    from pgblog.models.user import User


DEFAULT_MEMBER_ROLE = "member"


class Group(Base, CreatedAtMixin):
    """
    Group model.

    Attributes:
        id: Unique identifier (UUIDv7)
        name: Group name

    Relationships:
        memberships: Junction rows linking users to this group
    """

    __tablename__ = "groups"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=new_id,
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    memberships: Mapped[list["UserToGroup"]] = relationship(
        "UserToGroup",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Group(id={self.id}, name={self.name})>"


class UserToGroup(Base):
    """
    UserToGroup model - junction table between User and Group.

    Attributes:
        user_id: Member (part of composite PK, ON DELETE CASCADE)
        group_id: Group (part of composite PK, ON DELETE CASCADE)
        role: Member's role within the group
        joined_at: When the user joined
    """

    __tablename__ = "users_to_groups"

    # ═══════════════════════════════════════════════════════════════════════════
    # COMPOSITE PRIMARY KEY
    # ═══════════════════════════════════════════════════════════════════════════

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    group_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIP ATTRIBUTES
    # ═══════════════════════════════════════════════════════════════════════════

    role: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_MEMBER_ROLE,
        server_default=DEFAULT_MEMBER_ROLE,
    )

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    user: Mapped["User"] = relationship(
        "User",
        back_populates="group_memberships",
    )

    group: Mapped["Group"] = relationship(
        "Group",
        back_populates="memberships",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<UserToGroup(user_id={self.user_id}, group_id={self.group_id}, role={self.role})>"
