"""
Post Repository

Database operations specific to the Post model.

Common Operations:
==================
Listing:
- filter()                → optional published / author / title search
- get_recent()            → published, newest first, offset pagination
- get_after_cursor()      → published, keyset pagination on the UUIDv7 id
- get_in_date_range()     → created_at BETWEEN start AND end
- get_by_slug()

Relational fetches & joins:
- get_with_comments()     → post + author + comments (each with author)
- get_with_author_name()  → INNER JOIN users, projected columns

Aggregates:
- count_published(), count_by_author(), count_unique_authors()
- total_views(), average_views(), views_range()
- get_count_by_author()   → GROUP BY author_id
- get_prolific_authors()  → GROUP BY author_id HAVING count(*) > N

Mutations:
- increment_views()       → views = views + n, atomically in the database
- publish_many()          → one UPDATE for a set of ids

Cursor Pagination:
==================
    page_1 = await repo.get_after_cursor(limit=20)
    page_2 = await repo.get_after_cursor(cursor=page_1[-1].id, limit=20)

Ids are UUIDv7, so ``id < cursor`` ordered by ``id DESC`` walks from newest
to oldest and pages never overlap, even while rows are being inserted.
"""

from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pgblog.models.comment import Comment
from pgblog.models.post import Post
from pgblog.models.user import User
from pgblog.repositories.base import BaseRepository
from pgblog.schemas.post import (
    PostCountByAuthor,
    PostFilters,
    PostWithAuthorName,
    ViewsRange,
)


class PostRepository(BaseRepository[Post]):
    """Repository for Post database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize PostRepository.

        Args:
            session: Async database session
        """
        super().__init__(Post, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # LISTING
    # ═══════════════════════════════════════════════════════════════════════════

    async def filter(self, filters: PostFilters) -> list[Post]:
        """
        Posts matching every filter that was provided.

        A filter left as None contributes no condition at all, so an empty
        PostFilters returns every post.

        SQL Generated (published=True, search="sql"):
            SELECT * FROM posts WHERE published = true AND title ILIKE '%sql%'
        """
        conditions = []
        if filters.published is not None:
            conditions.append(Post.published == filters.published)
        if filters.author_id:
            conditions.append(Post.author_id == filters.author_id)
        if filters.search:
            conditions.append(Post.title.ilike(f"%{filters.search}%"))

        query = select(Post)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_recent(self, limit: int = 20, offset: int = 0) -> list[Post]:
        """Published posts, newest first."""
        result = await self.session.execute(
            select(Post)
            .where(Post.published.is_(True))
            .order_by(Post.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def get_after_cursor(self, cursor: Optional[UUID] = None, limit: int = 20) -> list[Post]:
        """
        Published posts strictly older than the cursor, newest first.

        Args:
            cursor: Id of the last post of the previous page (None for page 1)
            limit: Page size

        SQL Generated:
            SELECT * FROM posts
            WHERE published = true AND id < :cursor
            ORDER BY id DESC LIMIT 20
        """
        query = select(Post).where(Post.published.is_(True))
        if cursor is not None:
            query = query.where(Post.id < cursor)

        result = await self.session.execute(query.order_by(Post.id.desc()).limit(limit))
        return list(result.scalars().all())

    async def get_in_date_range(self, start: datetime, end: datetime) -> list[Post]:
        """Posts created between start and end, inclusive."""
        result = await self.session.execute(
            select(Post).where(Post.created_at.between(start, end)).order_by(Post.created_at)
        )
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Optional[Post]:
        """Post with the given slug, or None."""
        result = await self.session.execute(select(Post).where(Post.slug == slug))
        return result.scalar_one_or_none()

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONAL FETCHES & JOINS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_with_comments(self, post_id: UUID) -> Optional[Post]:
        """Post with its author and its comments, each comment with its author."""
        result = await self.session.execute(
            select(Post)
            .where(Post.id == post_id)
            .options(
                selectinload(Post.author),
                selectinload(Post.comments).selectinload(Comment.author),
            )
        )
        return result.scalar_one_or_none()

    async def get_with_author_name(self) -> list[PostWithAuthorName]:
        """
        Every post joined with its author.

        SQL Generated:
            SELECT posts.id, posts.title, users.name, users.email
            FROM posts JOIN users ON posts.author_id = users.id
        """
        result = await self.session.execute(
            select(
                Post.id.label("post_id"),
                Post.title.label("post_title"),
                User.name.label("author_name"),
                User.email.label("author_email"),
            ).join(User, Post.author_id == User.id)
        )
        return [PostWithAuthorName.model_validate(row) for row in result.mappings()]

    # ═══════════════════════════════════════════════════════════════════════════
    # AGGREGATES
    # ═══════════════════════════════════════════════════════════════════════════

    async def count_published(self) -> int:
        """Number of published posts."""
        return await self.count({"published": True})

    async def count_by_author(self, author_id: UUID) -> int:
        """Number of posts written by one author."""
        return await self.count({"author_id": author_id})

    async def count_unique_authors(self) -> int:
        """
        Number of distinct users that wrote at least one post.

        SQL Generated:
            SELECT count(DISTINCT author_id) FROM posts
        """
        result = await self.session.execute(select(func.count(Post.author_id.distinct())))
        return result.scalar() or 0

    async def total_views(self) -> int:
        """Sum of views over all posts (0 when there are no posts)."""
        result = await self.session.execute(select(func.coalesce(func.sum(Post.views), 0)))
        return int(result.scalar() or 0)

    async def average_views(self) -> Optional[float]:
        """Average views per post, or None when there are no posts."""
        result = await self.session.execute(select(func.avg(Post.views)))
        average = result.scalar()
        return float(average) if average is not None else None

    async def views_range(self) -> ViewsRange:
        """Minimum and maximum views."""
        result = await self.session.execute(
            select(
                func.min(Post.views).label("min_views"),
                func.max(Post.views).label("max_views"),
            )
        )
        return ViewsRange.model_validate(result.mappings().one())

    async def get_count_by_author(self) -> list[PostCountByAuthor]:
        """
        Post count and total views per author (authors with posts only).

        SQL Generated:
            SELECT author_id, count(*), sum(views) FROM posts GROUP BY author_id
        """
        result = await self.session.execute(
            select(
                Post.author_id.label("author_id"),
                func.count().label("post_count"),
                func.sum(Post.views).label("total_views"),
            ).group_by(Post.author_id)
        )
        return [PostCountByAuthor.model_validate(row) for row in result.mappings()]

    async def get_prolific_authors(self, min_posts: int = 10) -> list[PostCountByAuthor]:
        """
        Authors with strictly more than min_posts posts.

        An author with exactly min_posts posts is excluded.

        SQL Generated:
            SELECT author_id, count(*) FROM posts
            GROUP BY author_id HAVING count(*) > :min_posts
        """
        post_count = func.count()
        result = await self.session.execute(
            select(
                Post.author_id.label("author_id"),
                post_count.label("post_count"),
            )
            .group_by(Post.author_id)
            .having(post_count > min_posts)
        )
        return [PostCountByAuthor.model_validate(row) for row in result.mappings()]

    # ═══════════════════════════════════════════════════════════════════════════
    # MUTATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def increment_views(self, post_id: UUID, by: int = 1) -> Optional[Post]:
        """
        Add to the view counter without reading it first.

        SQL Generated:
            UPDATE posts SET views = posts.views + 1 WHERE id = '...' RETURNING *
        """
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(views=Post.views + by)
            .returning(Post)
        )
        return await self._returning_one(stmt)

    async def publish_many(self, post_ids: Sequence[UUID]) -> list[Post]:
        """
        Publish several posts with one UPDATE.

        Returns:
            The posts that were updated (unknown ids are ignored)

        SQL Generated:
            UPDATE posts SET published = true, updated_at = now()
            WHERE id IN (...) RETURNING *
        """
        if not post_ids:
            return []

        stmt = (
            update(Post)
            .where(Post.id.in_(post_ids))
            .values(published=True, updated_at=func.now())
            .returning(Post)
        )
        return await self._returning_all(stmt)
