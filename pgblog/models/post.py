"""
Post Entity Model

A blog post written by one user.

Model Hierarchy:
================
    Post
       ├── author (User)
       └── comments (Comment[])

SAMPLE POST RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 01890a5d-b2c1-7a4b-9cce-b302099a8057                      │
│ title            │ "Getting Started with SQLAlchemy"                         │
│ slug             │ "getting-started-sqlalchemy"                              │
│ published        │ true                                                      │
│ views            │ 42                                                        │
│ author_id        │ 01890a5d-ac96-774b-bcce-b302099a8057                      │
└──────────────────────────────────────────────────────────────────────────────┘

Indexes:
========
- posts_slug_key               UNIQUE (slug)
- posts_author_idx             (author_id)
- published_posts_idx          (created_at) WHERE published = true
- posts_author_published_idx   (author_id, published)
"""

from typing import TYPE_CHECKING
import uuid

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pgblog.models.base import Base, TimestampMixin, new_id


if TYPE_CHECKING:
    from pgblog.models.user import User
    from pgblog.models.comment import Comment


class Post(Base, TimestampMixin):
    """
    Post model.

    Attributes:
        id: Unique identifier (UUIDv7, doubles as pagination cursor)
        title: Post title
        content: Post body
        slug: URL slug (unique)
        published: Visibility flag
        views: View counter, never negative
        author_id: Author (ON DELETE CASCADE)
    """

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("views >= 0", name="posts_views_non_negative"),
        Index("posts_author_idx", "author_id"),
        Index(
            "published_posts_idx",
            "created_at",
            postgresql_where=text("published = true"),
        ),
        Index("posts_author_published_idx", "author_id", "published"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=new_id,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    views: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    author: Mapped["User"] = relationship(
        "User",
        back_populates="posts",
    )

    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Post(id={self.id}, slug={self.slug})>"
