# pylint: skip-file
# ruff: noqa
"""Initial schema - create all tables

Revision ID: 001
Revises:
Create Date: 2024-12-11 00:00:00

Tables created:
- users: Accounts with soft delete, status/role enums and JSONB settings
- profiles: One-to-one user profile
- posts: Blog posts
- comments: Comments on posts
- groups, users_to_groups: Many-to-many with membership attributes
- events: JSONB event log with GIN index

Enums created:
- status: pending, active, archived
- user_role: admin, user, guest
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


status_enum = postgresql.ENUM(
    "pending",
    "active",
    "archived",
    name="status",
    create_type=False,
)

user_role_enum = postgresql.ENUM(
    "admin",
    "user",
    "guest",
    name="user_role",
    create_type=False,
)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade database schema."""
    op.execute("CREATE TYPE status AS ENUM ('pending', 'active', 'archived')")
    op.execute("CREATE TYPE user_role AS ENUM ('admin', 'user', 'guest')")

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("status", status_enum, nullable=False, server_default="pending"),
        sa.Column("role", user_role_enum, nullable=False, server_default="user"),
        sa.Column("settings", postgresql.JSONB(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _created_at("updated_at"),
    )
    op.create_index("users_email_idx", "users", ["email"])
    op.create_index(
        "active_users_email_idx",
        "users",
        ["email"],
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    # Create profiles table
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        _created_at(),
    )

    # Create posts table
    op.create_table(
        "posts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False, unique=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "author_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
        _created_at("updated_at"),
        sa.CheckConstraint("views >= 0", name="posts_views_non_negative"),
    )
    op.create_index("posts_author_idx", "posts", ["author_id"])
    op.create_index(
        "published_posts_idx",
        "posts",
        ["created_at"],
        postgresql_where=sa.text("published = true"),
    )
    op.create_index("posts_author_published_idx", "posts", ["author_id", "published"])

    # Create comments table
    op.create_table(
        "comments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "post_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "author_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
    )
    op.create_index("comments_post_idx", "comments", ["post_id"])
    op.create_index("comments_author_idx", "comments", ["author_id"])

    # Create groups and junction table
    op.create_table(
        "groups",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_table(
        "users_to_groups",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "group_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("role", sa.Text(), nullable=False, server_default="member"),
        _created_at("joined_at"),
    )

    # Create events table
    op.create_table(
        "events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("data", postgresql.JSONB(), nullable=False),
        _created_at(),
    )
    op.create_index("events_data_gin_idx", "events", ["data"], postgresql_using="gin")


def downgrade() -> None:
    """Downgrade database schema."""
    # Drop tables in reverse order (respect foreign keys)
    op.drop_table("events")
    op.drop_table("users_to_groups")
    op.drop_table("groups")
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_table("profiles")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS user_role")
    op.execute("DROP TYPE IF EXISTS status")
