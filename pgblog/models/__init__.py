"""
pgblog SQLAlchemy Models

This package contains all database models.

Model Hierarchy:
================
    User
       ├── profile (Profile)                   1 : 0..1
       ├── posts (Post[])                      1 : N
       │      └── comments (Comment[])         1 : N
       ├── comments (Comment[])                1 : N (as author)
       └── group_memberships (UserToGroup[])   N : M with Group

    Event                                      standalone, JSONB payload

Cascades:
=========
    DELETE users  → profiles, posts, comments (as author), users_to_groups
    DELETE posts  → comments
    DELETE groups → users_to_groups

Usage:
======
    from pgblog.models import User, Post, Comment

    user = await UserRepository(session).get_with_profile(user_id)
    user.profile
"""

from pgblog.models.base import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
    SoftDeleteMixin,
    new_id,
)
from pgblog.models.enums import UserStatus, UserRole
from pgblog.models.user import User
from pgblog.models.profile import Profile
from pgblog.models.post import Post
from pgblog.models.comment import Comment
from pgblog.models.group import Group, UserToGroup
from pgblog.models.event import Event

__all__ = [
    # Base classes and mixins
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "new_id",
    # Enums
    "UserStatus",
    "UserRole",
    # Models
    "User",
    "Profile",
    "Post",
    "Comment",
    "Group",
    "UserToGroup",
    "Event",
]
