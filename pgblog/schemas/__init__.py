"""
Schemas

Pydantic models describing what goes into and comes out of the repositories.

- Input schemas (NewUser, NewPost, ...) validate insert payloads.
- Projection schemas (UserBasicInfo, CommentWithContext, ...) describe
  column subsets, joined rows and aggregates.
"""

from pgblog.schemas.common import BaseSchema, InputSchema
from pgblog.schemas.user import (
    NewUser,
    UserUpdate,
    NewProfile,
    UserResponse,
    UserBasicInfo,
    UserEmail,
    PostTitle,
    UserWithPostTitles,
    ProfilePublic,
    UserPublicProfile,
    GroupMembershipView,
    UserGroups,
    AuthorStats,
    UserPostStats,
    UserWithRecentPosts,
)
from pgblog.schemas.post import (
    NewPost,
    NewComment,
    PostFilters,
    PostResponse,
    PostWithAuthorName,
    PostRef,
    AuthorRef,
    CommentResponse,
    CommentWithContext,
    PostCountByAuthor,
    ViewsRange,
)

__all__ = [
    "BaseSchema",
    "InputSchema",
    # Users
    "NewUser",
    "UserUpdate",
    "NewProfile",
    "UserResponse",
    "UserBasicInfo",
    "UserEmail",
    "PostTitle",
    "UserWithPostTitles",
    "ProfilePublic",
    "UserPublicProfile",
    "GroupMembershipView",
    "UserGroups",
    "AuthorStats",
    "UserPostStats",
    "UserWithRecentPosts",
    # Posts & comments
    "NewPost",
    "NewComment",
    "PostFilters",
    "PostResponse",
    "PostWithAuthorName",
    "PostRef",
    "AuthorRef",
    "CommentResponse",
    "CommentWithContext",
    "PostCountByAuthor",
    "ViewsRange",
]
