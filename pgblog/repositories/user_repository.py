"""
User Repository

Database operations specific to the User model.
Extends BaseRepository with user-specific query and mutation methods.

Common Operations:
==================
Lookups & filters:
- get_by_email()            → Find user by email address
- get_active_admins()       → role = admin AND not soft-deleted
- get_flagged()             → soft-deleted OR email looks like spam
- search()                  → case-insensitive match on name or email
- get_active()              → newest non-deleted users

Relational fetches:
- get_with_profile()        → user + profile
- get_with_all_relations()  → user + profile + posts
- get_with_recent_posts()   → user + posts filtered/sorted/limited separately (projection)
- get_basic_info()          → id, email, name only
- get_with_post_titles()    → id, name + post titles
- get_public_profile()      → no email / deleted_at, profile without user_id
- get_with_groups()         → user + memberships + groups
- get_groups()              → flattened group list with membership role

Joins & aggregates:
- get_with_posts()          → LEFT JOIN users/posts
- count_total(), count_active()
- get_author_stats()        → LEFT JOIN + GROUP BY, busiest authors first
- get_with_post_stats()     → users LEFT JOIN per-author stats subquery

Mutations:
- upsert()                  → INSERT ... ON CONFLICT (email) DO UPDATE
- create_if_not_exists()    → INSERT ... ON CONFLICT (email) DO NOTHING
- soft_delete(), restore()  → inherited from BaseRepository
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload

from pgblog.models.enums import UserRole
from pgblog.models.group import UserToGroup
from pgblog.models.post import Post
from pgblog.models.user import User
from pgblog.repositories.base import BaseRepository, RETURNING_OPTIONS
from pgblog.schemas.post import PostResponse
from pgblog.schemas.user import (
    AuthorStats,
    GroupMembershipView,
    NewUser,
    PostTitle,
    UserBasicInfo,
    UserEmail,
    UserGroups,
    UserPostStats,
    UserPublicProfile,
    UserResponse,
    UserWithPostTitles,
    UserWithRecentPosts,
)


RECENT_POSTS_WINDOW = timedelta(days=7)

# Columns exposed by get_public_profile(); email and deleted_at stay unloaded
PUBLIC_USER_COLUMNS = (
    User.id,
    User.name,
    User.status,
    User.role,
    User.created_at,
    User.updated_at,
)


class UserRepository(BaseRepository[User]):
    """
    Repository for User database operations.

    Single-row lookups return None when nothing matches.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize UserRepository.

        Args:
            session: Async database session
        """
        super().__init__(User, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # LOOKUP METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_all(self) -> list[User]:
        """Every user, including soft-deleted ones."""
        result = await self.session.execute(select(User))
        return list(result.scalars().all())

    async def get_emails(self) -> list[UserEmail]:
        """
        Id and email of every user.

        SQL Generated:
            SELECT id, email FROM users
        """
        result = await self.session.execute(select(User.id, User.email))
        return [UserEmail.model_validate(row) for row in result.mappings()]

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User if found, None otherwise

        SQL Generated:
            SELECT * FROM users WHERE email = 'alice@example.com'
        """
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already taken."""
        user = await self.get_by_email(email)
        return user is not None

    async def get_active_admins(self) -> list[User]:
        """
        Admins that have not been soft-deleted.

        SQL Generated:
            SELECT * FROM users WHERE deleted_at IS NULL AND role = 'admin'
        """
        result = await self.session.execute(
            select(User).where(User.deleted_at.is_(None), User.role == UserRole.ADMIN)
        )
        return list(result.scalars().all())

    async def get_flagged(self) -> list[User]:
        """
        Users that are soft-deleted or whose email contains "spam".

        SQL Generated:
            SELECT * FROM users WHERE deleted_at IS NOT NULL OR email LIKE '%spam%'
        """
        result = await self.session.execute(
            select(User).where(or_(User.deleted_at.isnot(None), User.email.like("%spam%")))
        )
        return list(result.scalars().all())

    async def search(self, term: str) -> list[User]:
        """
        Case-insensitive substring search on name or email.

        SQL Generated:
            SELECT * FROM users WHERE name ILIKE '%term%' OR email ILIKE '%term%'
        """
        pattern = f"%{term}%"
        result = await self.session.execute(
            select(User).where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        )
        return list(result.scalars().all())

    async def get_active(self, limit: int = 20) -> list[User]:
        """Newest users that have not been soft-deleted."""
        result = await self.session.execute(
            select(User)
            .where(User.deleted_at.is_(None))
            .order_by(User.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONAL FETCHES
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_with_profile(self, user_id: UUID) -> Optional[User]:
        """User with the profile relationship loaded."""
        result = await self.session.execute(
            select(User).where(User.id == user_id).options(selectinload(User.profile))
        )
        return result.scalar_one_or_none()

    async def get_with_all_relations(self, user_id: UUID) -> Optional[User]:
        """User with profile and posts loaded."""
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.profile), selectinload(User.posts))
        )
        return result.scalar_one_or_none()

    async def get_with_recent_posts(
        self,
        user_id: UUID,
        since: Optional[datetime] = None,
        limit: int = 10,
    ) -> Optional[UserWithRecentPosts]:
        """
        User together with only their recent posts.

        The posts come from a second query with its own filter, ordering and
        limit. They are returned next to the user rather than assigned to
        ``user.posts``, so the mapped collection in the session stays complete.

        Args:
            user_id: User to load
            since: Lower bound on post creation time (default: one week ago)
            limit: Maximum number of posts to return

        Returns:
            User and posts (newest first), or None if the user is not found
        """
        user = await self.get(user_id)
        if user is None:
            return None

        if since is None:
            since = datetime.now(timezone.utc) - RECENT_POSTS_WINDOW

        result = await self.session.execute(
            select(Post)
            .where(Post.author_id == user_id, Post.created_at > since)
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        return UserWithRecentPosts(
            user=UserResponse.model_validate(user),
            posts=[PostResponse.model_validate(post) for post in result.scalars().all()],
        )

    async def get_basic_info(self, user_id: UUID) -> Optional[UserBasicInfo]:
        """
        Identity columns only.

        SQL Generated:
            SELECT id, email, name FROM users WHERE id = '...'
        """
        result = await self.session.execute(
            select(User.id, User.email, User.name).where(User.id == user_id)
        )
        row = result.mappings().one_or_none()
        return UserBasicInfo.model_validate(row) if row else None

    async def get_with_post_titles(self, user_id: UUID) -> Optional[UserWithPostTitles]:
        """User id and name with id, title and published flag of each post."""
        result = await self.session.execute(select(User.id, User.name).where(User.id == user_id))
        user_row = result.mappings().one_or_none()
        if user_row is None:
            return None

        posts = await self.session.execute(
            select(Post.id, Post.title, Post.published)
            .where(Post.author_id == user_id)
            .order_by(Post.id)
        )
        return UserWithPostTitles(
            id=user_row["id"],
            name=user_row["name"],
            posts=[PostTitle.model_validate(row) for row in posts.mappings()],
        )

    async def get_public_profile(self, user_id: UUID) -> Optional[UserPublicProfile]:
        """
        Public view of a user: email and deleted_at are never loaded, and the
        nested profile omits its user_id.
        """
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .options(load_only(*PUBLIC_USER_COLUMNS), selectinload(User.profile))
        )
        user = result.scalar_one_or_none()
        return UserPublicProfile.model_validate(user) if user else None

    async def get_with_groups(self, user_id: UUID) -> Optional[User]:
        """User with memberships and each membership's group loaded."""
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.group_memberships).selectinload(UserToGroup.group))
        )
        return result.scalar_one_or_none()

    async def get_groups(self, user_id: UUID) -> Optional[UserGroups]:
        """
        User with the junction table flattened away.

        Each group carries the role and join time from its membership row.
        """
        user = await self.get_with_groups(user_id)
        if user is None:
            return None

        return UserGroups(
            id=user.id,
            email=user.email,
            name=user.name,
            groups=[
                GroupMembershipView(
                    id=membership.group.id,
                    name=membership.group.name,
                    role=membership.role,
                    joined_at=membership.joined_at,
                )
                for membership in user.group_memberships
            ],
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # JOINS & AGGREGATES
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_with_posts(self) -> list[tuple[User, Optional[Post]]]:
        """
        Every user paired with each of their posts (None for users without posts).

        SQL Generated:
            SELECT users.*, posts.* FROM users
            LEFT OUTER JOIN posts ON posts.author_id = users.id
        """
        result = await self.session.execute(
            select(User, Post).outerjoin(Post, Post.author_id == User.id)
        )
        return [(user, post) for user, post in result.all()]

    async def count_total(self) -> int:
        """Count of all users, soft-deleted included."""
        return await self.count()

    async def count_active(self) -> int:
        """
        Count of users that are not soft-deleted.

        SQL Generated:
            SELECT count(*) FROM users WHERE deleted_at IS NULL
        """
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.deleted_at.is_(None))
        )
        return result.scalar() or 0

    async def get_author_stats(self) -> list[AuthorStats]:
        """
        Post count and total views per user, busiest authors first.

        SQL Generated:
            SELECT users.id, users.name, count(posts.id), sum(posts.views)
            FROM users LEFT OUTER JOIN posts ON posts.author_id = users.id
            GROUP BY users.id, users.name
            ORDER BY count(posts.id) DESC
        """
        post_count = func.count(Post.id)
        result = await self.session.execute(
            select(
                User.id.label("author_id"),
                User.name.label("author_name"),
                post_count.label("post_count"),
                func.sum(Post.views).label("total_views"),
            )
            .outerjoin(Post, Post.author_id == User.id)
            .group_by(User.id, User.name)
            .order_by(post_count.desc())
        )
        return [AuthorStats.model_validate(row) for row in result.mappings()]

    async def get_with_post_stats(self) -> list[UserPostStats]:
        """
        Every user with post statistics computed in a subquery.

        SQL Generated:
            SELECT users.*, post_stats.post_count, post_stats.total_views
            FROM users LEFT OUTER JOIN (
                SELECT author_id, count(*) AS post_count, sum(views) AS total_views
                FROM posts GROUP BY author_id
            ) AS post_stats ON users.id = post_stats.author_id
        """
        post_stats = (
            select(
                Post.author_id.label("author_id"),
                func.count().label("post_count"),
                func.sum(Post.views).label("total_views"),
            )
            .group_by(Post.author_id)
            .subquery("post_stats")
        )
        result = await self.session.execute(
            select(User, post_stats.c.post_count, post_stats.c.total_views).outerjoin(
                post_stats, User.id == post_stats.c.author_id
            )
        )
        return [
            UserPostStats(
                user=UserResponse.model_validate(user),
                post_count=post_count,
                total_views=total_views,
            )
            for user, post_count, total_views in result.all()
        ]

    # ═══════════════════════════════════════════════════════════════════════════
    # MUTATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def upsert(self, data: NewUser) -> User:
        """
        Insert a user, or update the existing row with the same email.

        Every provided field except email is overwritten and updated_at is
        bumped; the row keeps its id and created_at.

        SQL Generated:
            INSERT INTO users (id, email, name, ...) VALUES (...)
            ON CONFLICT (email) DO UPDATE
            SET name = excluded.name, updated_at = now()
            RETURNING *
        """
        values = data.to_values()
        stmt = pg_insert(User).values(**values)
        changes = {key: stmt.excluded[key] for key in values if key != "email"}
        changes["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.email],
            set_=changes,
        ).returning(User)

        result = await self.session.scalars(stmt, execution_options=RETURNING_OPTIONS)
        return result.one()

    async def create_if_not_exists(self, data: NewUser) -> Optional[User]:
        """
        Insert a user unless the email is already taken.

        Returns:
            The new user, or None if the insert was skipped

        SQL Generated:
            INSERT INTO users (...) VALUES (...)
            ON CONFLICT (email) DO NOTHING
            RETURNING *
        """
        stmt = (
            pg_insert(User)
            .values(**data.to_values())
            .on_conflict_do_nothing(index_elements=[User.email])
            .returning(User)
        )
        return await self._returning_one(stmt)
