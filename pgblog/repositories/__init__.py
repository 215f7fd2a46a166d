"""
Repository Pattern Implementations

Repositories encapsulate database queries and provide a clean API for data
access. They flush but never commit.

Repository Hierarchy:
=====================
    BaseRepository[ModelType]       ← Generic CRUD, soft delete, RETURNING helpers
         │
         ├── UserRepository         ← Lookups, relational fetches, upsert
         ├── ProfileRepository      ← One-to-one lookup
         ├── PostRepository         ← Filters, pagination, aggregates, counters
         ├── CommentRepository      ← Multi-join listing
         ├── GroupRepository        ← Memberships (composite key)
         └── EventRepository        ← JSONB containment

Usage Example:
==============
    from pgblog.db import session_scope
    from pgblog.repositories import UserRepository, PostRepository

    async with session_scope() as session:
        alice = await UserRepository(session).get_by_email("alice@example.com")
        posts = await PostRepository(session).get_after_cursor(limit=20)
"""

from pgblog.repositories.base import BaseRepository
from pgblog.repositories.user_repository import UserRepository
from pgblog.repositories.profile_repository import ProfileRepository
from pgblog.repositories.post_repository import PostRepository
from pgblog.repositories.comment_repository import CommentRepository
from pgblog.repositories.group_repository import GroupRepository
from pgblog.repositories.event_repository import EventRepository

__all__ = [
    # Base class
    "BaseRepository",
    # Entity-specific repositories
    "UserRepository",
    "ProfileRepository",
    "PostRepository",
    "CommentRepository",
    "GroupRepository",
    "EventRepository",
]
