"""
User Entity Model

Represents a registered author/reader.

Model Hierarchy:
================
    User
       ├── profile (Profile | None)             - One-to-one
       ├── posts (Post[])                       - Authored posts
       ├── comments (Comment[])                 - Authored comments
       └── group_memberships (UserToGroup[])    - Many-to-many with Group

SAMPLE USER RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 01890a5d-ac96-774b-bcce-b302099a8057                      │
│ email            │ "alice@example.com"                                       │
│ name             │ "Alice"                                                   │
│ status           │ active                                                    │
│ role             │ user                                                      │
│ settings         │ {"theme": "light", "language": "en", ...}                 │
│ deleted_at       │ NULL                                                      │
│ created_at       │ 2024-01-01T00:00:00Z                                      │
│ updated_at       │ 2024-01-15T10:30:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘

Indexes:
========
- users_email_key         UNIQUE (email)
- users_email_idx         (email)
- active_users_email_idx  (email) WHERE deleted_at IS NULL
"""

from typing import TYPE_CHECKING, Any, Optional
import copy
import uuid

from sqlalchemy import Index, Text, text, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pgblog.models.base import Base, TimestampMixin, SoftDeleteMixin, new_id
from pgblog.models.enums import UserStatus, UserRole, enum_values


if TYPE_CHECKING:
    from pgblog.models.profile import Profile
    from pgblog.models.post import Post
    from pgblog.models.comment import Comment
    from pgblog.models.group import UserToGroup


DEFAULT_USER_SETTINGS: dict[str, Any] = {
    "theme": "light",
    "notifications": {"email": True, "push": False},
    "language": "en",
}


def default_settings() -> dict[str, Any]:
    """Fresh copy of the default settings document."""
    return copy.deepcopy(DEFAULT_USER_SETTINGS)


class User(Base, TimestampMixin, SoftDeleteMixin):
    """
    User model.

    Attributes:
        id: Unique identifier (UUIDv7)
        email: Email address (unique)
        name: Display name
        status: Account lifecycle state (``status`` enum)
        role: Access level (``user_role`` enum)
        settings: Preferences document (JSONB)
        deleted_at: Soft delete marker (NULL = active)

    Relationships:
        profile: Optional one-to-one profile
        posts: Posts authored by this user
        comments: Comments authored by this user
        group_memberships: Junction rows linking the user to groups

    All child foreign keys use ON DELETE CASCADE; relationships are
    passive_deletes so a hard delete is left to PostgreSQL.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("users_email_idx", "email"),
        Index(
            "active_users_email_idx",
            "email",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # PRIMARY KEY
    # ═══════════════════════════════════════════════════════════════════════════

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=new_id,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # IDENTITY
    # ═══════════════════════════════════════════════════════════════════════════

    email: Mapped[str] = mapped_column(
        Text,
        unique=True,
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # STATUS & PREFERENCES
    # ═══════════════════════════════════════════════════════════════════════════

    status: Mapped[UserStatus] = mapped_column(
        SQLEnum(UserStatus, name="status", values_callable=enum_values),
        nullable=False,
        default=UserStatus.PENDING,
        server_default=UserStatus.PENDING.value,
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.USER,
        server_default=UserRole.USER.value,
    )

    settings: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=True,
        default=default_settings,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    # One-to-One: profiles.user_id is UNIQUE
    profile: Mapped[Optional["Profile"]] = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    posts: Mapped[list["Post"]] = relationship(
        "Post",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    group_memberships: Mapped[list["UserToGroup"]] = relationship(
        "UserToGroup",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<User(id={self.id}, email={self.email})>"
