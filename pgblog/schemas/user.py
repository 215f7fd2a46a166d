"""
User Schemas

Insert payloads and read projections for users, profiles and groups.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from pgblog.models.enums import UserRole, UserStatus
from pgblog.schemas.common import BaseSchema, InputSchema
from pgblog.schemas.post import PostResponse


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT
# ═══════════════════════════════════════════════════════════════════════════════


class NewUser(InputSchema):
    """Schema for inserting a user."""

    email: EmailStr
    name: str = Field(min_length=1)
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None
    settings: Optional[dict[str, Any]] = None


class UserUpdate(InputSchema):
    """Partial update; unset fields are left unchanged."""

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=1)
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None
    settings: Optional[dict[str, Any]] = None


class NewProfile(InputSchema):
    """Schema for inserting a profile."""

    user_id: UUID
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    website: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# PROJECTIONS
# ═══════════════════════════════════════════════════════════════════════════════


class UserResponse(BaseSchema):
    """Full user row."""

    id: UUID
    email: str
    name: str
    status: UserStatus
    role: UserRole
    settings: Optional[dict[str, Any]] = None
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserBasicInfo(BaseSchema):
    """Identity columns only."""

    id: UUID
    email: str
    name: str


class UserEmail(BaseSchema):
    """Id and email only."""

    id: UUID
    email: str


class PostTitle(BaseSchema):
    """Post columns needed for a listing."""

    id: UUID
    title: str
    published: bool


class UserWithPostTitles(BaseSchema):
    """User id and name with the titles of their posts."""

    id: UUID
    name: str
    posts: list[PostTitle] = []


class ProfilePublic(BaseSchema):
    """Profile without its internal user reference."""

    id: UUID
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime


class UserPublicProfile(BaseSchema):
    """User without email and soft-delete marker."""

    id: UUID
    name: str
    status: UserStatus
    role: UserRole
    created_at: datetime
    updated_at: datetime
    profile: Optional[ProfilePublic] = None


class GroupMembershipView(BaseSchema):
    """A group flattened together with the membership attributes."""

    id: UUID
    name: str
    role: str
    joined_at: datetime


class UserGroups(BaseSchema):
    """A user and the groups they belong to."""

    id: UUID
    email: str
    name: str
    groups: list[GroupMembershipView] = []


class AuthorStats(BaseSchema):
    """Per-user post statistics (users without posts included)."""

    author_id: UUID
    author_name: str
    post_count: int
    total_views: Optional[int] = None


class UserPostStats(BaseSchema):
    """A user with optional statistics from a post subquery."""

    user: UserResponse
    post_count: Optional[int] = None
    total_views: Optional[int] = None


class UserWithRecentPosts(BaseSchema):
    """A user with a filtered, limited slice of their posts."""

    user: UserResponse
    posts: list[PostResponse] = []
