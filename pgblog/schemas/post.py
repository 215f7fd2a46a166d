"""
Post and Comment Schemas

Insert payloads, filter objects and read projections for posts and comments.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from pgblog.schemas.common import BaseSchema, InputSchema


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT
# ═══════════════════════════════════════════════════════════════════════════════


class NewPost(InputSchema):
    """Schema for inserting a post."""

    title: str = Field(min_length=1)
    content: str
    slug: str = Field(min_length=1)
    author_id: UUID
    published: Optional[bool] = None


class NewComment(InputSchema):
    """Schema for inserting a comment."""

    content: str = Field(min_length=1)
    post_id: UUID
    author_id: UUID


class PostFilters(BaseSchema):
    """
    Optional post filters.

    A filter left as None is omitted from the WHERE clause entirely.
    """

    search: Optional[str] = None
    author_id: Optional[UUID] = None
    published: Optional[bool] = None


# ═══════════════════════════════════════════════════════════════════════════════
# PROJECTIONS
# ═══════════════════════════════════════════════════════════════════════════════


class PostResponse(BaseSchema):
    """Full post row."""

    id: UUID
    title: str
    content: str
    slug: str
    published: bool
    views: int
    author_id: UUID
    created_at: datetime
    updated_at: datetime


class PostWithAuthorName(BaseSchema):
    """Post id/title joined with its author's name and email."""

    post_id: UUID
    post_title: str
    author_name: str
    author_email: str


class PostRef(BaseSchema):
    id: UUID
    title: str


class AuthorRef(BaseSchema):
    id: UUID
    name: str


class CommentResponse(BaseSchema):
    """Full comment row."""

    id: UUID
    content: str
    post_id: UUID
    author_id: UUID
    created_at: datetime


class CommentWithContext(BaseSchema):
    """A comment with the post it belongs to and its author."""

    comment: CommentResponse
    post: PostRef
    author: AuthorRef


class PostCountByAuthor(BaseSchema):
    """GROUP BY author_id result."""

    author_id: UUID
    post_count: int
    total_views: Optional[int] = None


class ViewsRange(BaseSchema):
    """Minimum and maximum view counts (None on an empty table)."""

    min_views: Optional[int] = None
    max_views: Optional[int] = None
