"""
Comment Entity Model

A comment left by a user on a post. Removed by PostgreSQL when either the
post or the author is deleted.
"""

from typing import TYPE_CHECKING
import uuid

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pgblog.models.base import Base, CreatedAtMixin, new_id


if TYPE_CHECKING:
    from pgblog.models.post import Post
    from pgblog.models.user import User


class Comment(Base, CreatedAtMixin):
    """
    Comment model.

    Attributes:
        id: Unique identifier (UUIDv7)
        content: Comment text
        post_id: Parent post (ON DELETE CASCADE)
        author_id: Author (ON DELETE CASCADE)
    """

    __tablename__ = "comments"
    __table_args__ = (
        Index("comments_post_idx", "post_id"),
        Index("comments_author_idx", "author_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=new_id,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    post: Mapped["Post"] = relationship(
        "Post",
        back_populates="comments",
    )

    author: Mapped["User"] = relationship(
        "User",
        back_populates="comments",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Comment(id={self.id}, post_id={self.post_id})>"
