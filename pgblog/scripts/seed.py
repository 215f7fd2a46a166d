"""
Demo Data Seeder

Inserts a small, fixed data set into an already migrated database:

    alice@example.com  → profile, 2 published posts
    bob@example.com    → profile, 1 draft post
    3 comments across alice's posts

Running it twice fails on the unique email constraint and writes nothing,
since the whole seed is one transaction.

Usage:
======
    pgblog-migrate && pgblog-seed
"""

import asyncio
import sys
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pgblog.config.settings import get_settings
from pgblog.core.exceptions import ConfigurationError
from pgblog.core.logging import get_logger, setup_logging
from pgblog.db.session import close_db, init_db, session_scope
from pgblog.repositories.comment_repository import CommentRepository
from pgblog.repositories.post_repository import PostRepository
from pgblog.repositories.profile_repository import ProfileRepository
from pgblog.repositories.user_repository import UserRepository


logger = get_logger("pgblog.seed")


@dataclass
class SeedResult:
    """Ids of the seeded rows."""

    alice_id: UUID
    bob_id: UUID
    post_ids: list[UUID]
    comment_ids: list[UUID]


async def seed(session: AsyncSession) -> SeedResult:
    """
    Insert the demo rows on the given session.

    The caller owns the transaction; nothing is committed here.
    """
    users = UserRepository(session)
    profiles = ProfileRepository(session)
    posts = PostRepository(session)
    comments = CommentRepository(session)

    alice, bob = await users.create_many(
        [
            {"email": "alice@example.com", "name": "Alice"},
            {"email": "bob@example.com", "name": "Bob"},
        ]
    )
    await profiles.create_many(
        [
            {"user_id": alice.id, "bio": "Software engineer"},
            {"user_id": bob.id, "bio": "Product designer"},
        ]
    )

    created_posts = await posts.create_many(
        [
            {
                "title": "Getting started with PostgreSQL",
                "content": "Tables, indexes and constraints.",
                "slug": "getting-started-with-postgresql",
                "published": True,
                "author_id": alice.id,
            },
            {
                "title": "Partial indexes in practice",
                "content": "Index only the rows you query.",
                "slug": "partial-indexes-in-practice",
                "published": True,
                "author_id": alice.id,
            },
            {
                "title": "Designing with constraints",
                "content": "Work in progress.",
                "slug": "designing-with-constraints",
                "published": False,
                "author_id": bob.id,
            },
        ]
    )
    first, second, _draft = created_posts

    created_comments = await comments.create_many(
        [
            {"content": "Great introduction!", "post_id": first.id, "author_id": bob.id},
            {"content": "Thanks, Bob.", "post_id": first.id, "author_id": alice.id},
            {"content": "Very useful.", "post_id": second.id, "author_id": bob.id},
        ]
    )

    return SeedResult(
        alice_id=alice.id,
        bob_id=bob.id,
        post_ids=[post.id for post in created_posts],
        comment_ids=[comment.id for comment in created_comments],
    )


async def run_seed() -> SeedResult:
    """Connect, seed in one transaction, disconnect."""
    await init_db()
    try:
        async with session_scope() as session:
            result = await seed(session)
    finally:
        await close_db()

    logger.info(
        "Database seeded",
        users=2,
        posts=len(result.post_ids),
        comments=len(result.comment_ids),
    )
    return result


def main() -> int:
    """Load settings, configure logging and seed the database."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error("Configuration error", **e.to_dict()["error"])
        return 1

    setup_logging(settings.LOG_LEVEL, development=settings.is_development)
    asyncio.run(run_seed())
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
