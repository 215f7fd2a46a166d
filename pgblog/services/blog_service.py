"""
Blog Service

Multi-step writes that must commit or roll back together.

Service Pattern:
================
Services coordinate several repositories inside one transaction. They
receive a session, open an atomic scope on it, and leave the final commit
to whoever owns the session (session_scope(), transaction(), a test).

Atomic Scopes:
==============
┌─────────────────────────────────────────────────────────────────────────────┐
│                                                                             │
│   session with no transaction yet  → session.begin()         (BEGIN)        │
│   session already in a transaction → session.begin_nested() (SAVEPOINT)    │
│                                                                             │
│   create_post_with_comments():                                              │
│   ┌──────────────────────────────────────────────────────────┐              │
│   │ BEGIN / SAVEPOINT outer                                  │              │
│   │   INSERT post                                            │              │
│   │   SAVEPOINT inner                                        │              │
│   │     INSERT comments        ← fails?                      │              │
│   │   ROLLBACK TO inner        ← only the comments are lost  │              │
│   │ COMMIT / RELEASE outer     ← post is kept                │              │
│   └──────────────────────────────────────────────────────────┘              │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Serializable Work:
==================
merge_users() needs SERIALIZABLE isolation, which must be chosen before the
transaction's first statement, so it opens its own transaction() instead of
taking a session.

Usage:
======
    from pgblog.db import session_scope
    from pgblog.services import BlogService

    async with session_scope() as session:
        user, profile = await BlogService(session).create_user_with_profile(
            NewUser(email="alice@example.com", name="Alice"),
            bio="Software engineer",
        )
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pgblog.core.logging import get_logger
from pgblog.db.session import transaction
from pgblog.models.comment import Comment
from pgblog.models.group import DEFAULT_MEMBER_ROLE, UserToGroup
from pgblog.models.post import Post
from pgblog.models.profile import Profile
from pgblog.models.user import User
from pgblog.repositories.comment_repository import CommentRepository
from pgblog.repositories.group_repository import GroupRepository
from pgblog.repositories.post_repository import PostRepository
from pgblog.repositories.profile_repository import ProfileRepository
from pgblog.repositories.user_repository import UserRepository
from pgblog.schemas.post import NewPost
from pgblog.schemas.user import NewUser


logger = get_logger("pgblog.services")


class BlogService:
    """
    Service for writes spanning several tables.

    Attributes:
        session: Database session
        users, profiles, posts, comments, groups: Repositories on that session
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize BlogService.

        Args:
            session: Async database session
        """
        self.session = session
        self.users = UserRepository(session)
        self.profiles = ProfileRepository(session)
        self.posts = PostRepository(session)
        self.comments = CommentRepository(session)
        self.groups = GroupRepository(session)

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """
        Run a block atomically.

        Opens a transaction, or a savepoint when one is already open, and
        rolls it back if the block raises.
        """
        if self.session.in_transaction():
            async with self.session.begin_nested():
                yield
        else:
            async with self.session.begin():
                yield

    # ═══════════════════════════════════════════════════════════════════════════
    # COMPOSED WRITES
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_user_with_profile(self, user_data: NewUser, bio: str) -> tuple[User, Profile]:
        """
        Create a user and their profile; both rows or neither.

        Raises:
            IntegrityError: If the email is taken (nothing is written)
        """
        async with self.atomic():
            user = await self.users.create(**user_data.to_values())
            profile = await self.profiles.create(user_id=user.id, bio=bio)

        logger.info("User created with profile", user_id=str(user.id))
        return user, profile

    async def create_post_with_comments(
        self,
        post_data: NewPost,
        comments: Sequence[str] = (),
        commenter_id: Optional[UUID] = None,
    ) -> tuple[Post, list[Comment]]:
        """
        Create a post and, optionally, its first comments.

        The comments are inserted in a nested scope. If that fails (for
        example an unknown commenter), only the comments are rolled back and
        the post is still created.

        Args:
            post_data: The post to create
            comments: Comment bodies to attach
            commenter_id: Author of the comments (defaults to the post author)

        Returns:
            The post and the comments that were stored (empty on failure)
        """
        async with self.atomic():
            post = await self.posts.create(**post_data.to_values())

            created: list[Comment] = []
            if comments:
                author_id = commenter_id or post.author_id
                try:
                    async with self.session.begin_nested():
                        created = await self.comments.create_many(
                            {"content": body, "post_id": post.id, "author_id": author_id}
                            for body in comments
                        )
                except IntegrityError as e:
                    logger.warning(
                        "Adding comments failed, keeping post without them",
                        post_id=str(post.id),
                        error=str(e.orig),
                    )
                    created = []

        return post, created

    async def add_user_to_groups(
        self,
        user_id: UUID,
        group_ids: Sequence[UUID],
        role: str = DEFAULT_MEMBER_ROLE,
    ) -> list[UserToGroup]:
        """
        Join a user to several groups, each in its own savepoint.

        A membership that fails (unknown group, already a member) is skipped
        without undoing the others.

        Returns:
            The memberships that were created
        """
        joined: list[UserToGroup] = []
        async with self.atomic():
            for group_id in group_ids:
                try:
                    async with self.session.begin_nested():
                        joined.append(await self.groups.add_member(user_id, group_id, role))
                except IntegrityError as e:
                    logger.warning(
                        "Skipping group membership",
                        user_id=str(user_id),
                        group_id=str(group_id),
                        error=str(e.orig),
                    )
        return joined


# ═══════════════════════════════════════════════════════════════════════════════
# SERIALIZABLE OPERATIONS
# ═══════════════════════════════════════════════════════════════════════════════


async def merge_users(source_id: UUID, target_id: UUID) -> Optional[User]:
    """
    Move all content of one user to another and soft-delete the source.

    Runs under SERIALIZABLE isolation so concurrent writes to either user's
    posts or comments make one of the transactions fail instead of
    interleaving. Serialization failures are raised to the caller.

    Args:
        source_id: User whose posts and comments are moved
        target_id: User receiving them

    Returns:
        The target user, or None if either user does not exist
    """
    if source_id == target_id:
        raise ValueError("source_id and target_id must differ")

    async with transaction(isolation_level="SERIALIZABLE") as session:
        users = UserRepository(session)
        source = await users.get(source_id)
        target = await users.get(target_id)
        if source is None or target is None:
            return None

        await session.execute(
            update(Post).where(Post.author_id == source_id).values(author_id=target_id)
        )
        await session.execute(
            update(Comment).where(Comment.author_id == source_id).values(author_id=target_id)
        )
        await users.soft_delete(source_id)

    logger.info("Users merged", source_id=str(source_id), target_id=str(target_id))
    return target
