"""
Comment Repository

Database operations specific to the Comment model.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pgblog.models.comment import Comment
from pgblog.models.post import Post
from pgblog.models.user import User
from pgblog.repositories.base import BaseRepository
from pgblog.schemas.post import AuthorRef, CommentResponse, CommentWithContext, PostRef


class CommentRepository(BaseRepository[Comment]):
    """Repository for Comment database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Comment, session)

    async def get_for_post(self, post_id: UUID) -> list[Comment]:
        """Comments on a post, oldest first."""
        result = await self.session.execute(
            select(Comment).where(Comment.post_id == post_id).order_by(Comment.created_at)
        )
        return list(result.scalars().all())

    async def get_with_context(self) -> list[CommentWithContext]:
        """
        Every comment with the post it belongs to and its author, newest first.

        SQL Generated:
            SELECT comments.*, posts.id, posts.title, users.id, users.name
            FROM comments
            JOIN posts ON comments.post_id = posts.id
            JOIN users ON comments.author_id = users.id
            ORDER BY comments.created_at DESC
        """
        result = await self.session.execute(
            select(
                Comment,
                Post.id.label("post_id"),
                Post.title.label("post_title"),
                User.id.label("author_id"),
                User.name.label("author_name"),
            )
            .join(Post, Comment.post_id == Post.id)
            .join(User, Comment.author_id == User.id)
            .order_by(Comment.created_at.desc())
        )
        return [
            CommentWithContext(
                comment=CommentResponse.model_validate(comment),
                post=PostRef(id=post_id, title=post_title),
                author=AuthorRef(id=author_id, name=author_name),
            )
            for comment, post_id, post_title, author_id, author_name in result.all()
        ]
