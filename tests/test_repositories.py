"""
Repository query construction.

The session is mocked; each test captures the statement a repository method
sends and checks the PostgreSQL SQL it compiles to.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from pgblog.models.base import new_id
from pgblog.repositories import (
    EventRepository,
    PostRepository,
    UserRepository,
)
from pgblog.schemas import NewUser, PostFilters


def _compile(stmt):
    return stmt.compile(dialect=postgresql.dialect())


@pytest.fixture
def session():
    """AsyncSession stand-in whose queries all return empty results."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    result.scalar.return_value = 0
    result.scalar_one_or_none.return_value = None
    result.mappings.return_value = []
    result.all.return_value = []

    scalar_result = MagicMock()
    scalar_result.all.return_value = []
    scalar_result.one_or_none.return_value = None

    mock = AsyncMock()
    mock.execute.return_value = result
    mock.scalars.return_value = scalar_result
    return mock


def executed(session):
    """SQL text and bound parameters of the last execute() call."""
    compiled = _compile(session.execute.await_args.args[0])
    return str(compiled), compiled.params


def returned(session):
    """SQL text and bound parameters of the last scalars() call."""
    compiled = _compile(session.scalars.await_args.args[0])
    return str(compiled), compiled.params


# ═══════════════════════════════════════════════════════════════════════════════
# POSTS
# ═══════════════════════════════════════════════════════════════════════════════


async def test_filter_without_values_has_no_where(session):
    await PostRepository(session).filter(PostFilters())

    sql, _ = executed(session)
    assert "WHERE" not in sql


async def test_filter_only_adds_provided_conditions(session):
    await PostRepository(session).filter(PostFilters(published=True, search="sql"))

    sql, params = executed(session)
    assert "posts.published = true" in sql
    assert "posts.title ILIKE " in sql
    assert "posts.author_id" not in sql.split("WHERE", 1)[1]
    assert "%sql%" in params.values()


async def test_filter_keeps_published_false(session):
    await PostRepository(session).filter(PostFilters(published=False))

    sql, _ = executed(session)
    assert "posts.published = false" in sql


async def test_first_cursor_page(session):
    await PostRepository(session).get_after_cursor(limit=5)

    sql, params = executed(session)
    assert "posts.published IS true" in sql
    assert "posts.id <" not in sql
    assert "ORDER BY posts.id DESC" in sql
    assert 5 in params.values()


async def test_next_cursor_page(session):
    cursor = new_id()

    await PostRepository(session).get_after_cursor(cursor=cursor, limit=5)

    sql, params = executed(session)
    assert "posts.id < " in sql
    assert "ORDER BY posts.id DESC" in sql
    assert cursor in params.values()


async def test_recent_posts_use_offset_pagination(session):
    await PostRepository(session).get_recent(limit=10, offset=20)

    sql, params = executed(session)
    assert "ORDER BY posts.created_at DESC" in sql
    assert "LIMIT" in sql and "OFFSET" in sql
    assert {10, 20} <= set(params.values())


async def test_prolific_authors_use_having(session):
    await PostRepository(session).get_prolific_authors(min_posts=3)

    sql, params = executed(session)
    assert "GROUP BY posts.author_id" in sql
    assert "HAVING count(*) > " in sql
    assert 3 in params.values()


async def test_unique_authors_count_distinct(session):
    count = await PostRepository(session).count_unique_authors()

    sql, _ = executed(session)
    assert "count(DISTINCT posts.author_id)" in sql
    assert count == 0


async def test_total_views_defaults_to_zero(session):
    await PostRepository(session).total_views()

    sql, _ = executed(session)
    assert "coalesce(sum(posts.views)" in sql


async def test_author_name_uses_inner_join(session):
    await PostRepository(session).get_with_author_name()

    sql, _ = executed(session)
    assert "JOIN users ON posts.author_id = users.id" in sql
    assert "OUTER" not in sql


async def test_increment_views_is_computed_in_database(session):
    post_id = new_id()

    await PostRepository(session).increment_views(post_id, by=3)

    sql, params = returned(session)
    assert sql.startswith("UPDATE posts SET")
    assert "posts.views + " in sql
    assert "RETURNING" in sql
    assert 3 in params.values()


async def test_publish_many_is_one_update(session):
    ids = [new_id(), new_id()]

    await PostRepository(session).publish_many(ids)

    sql, _ = returned(session)
    assert "posts.id IN (" in sql
    assert "updated_at=now()" in sql
    assert "RETURNING" in sql


async def test_publish_many_with_no_ids_skips_query(session):
    assert await PostRepository(session).publish_many([]) == []

    session.scalars.assert_not_awaited()


async def test_soft_delete_is_ignored_for_models_without_deleted_at(session):
    assert await PostRepository(session).soft_delete(new_id()) is None

    session.scalars.assert_not_awaited()


# ═══════════════════════════════════════════════════════════════════════════════
# USERS
# ═══════════════════════════════════════════════════════════════════════════════


async def test_active_admins(session):
    await UserRepository(session).get_active_admins()

    sql, params = executed(session)
    assert "users.deleted_at IS NULL AND users.role = " in sql
    assert "admin" in [getattr(value, "value", value) for value in params.values()]


async def test_flagged_users(session):
    await UserRepository(session).get_flagged()

    sql, params = executed(session)
    assert "users.deleted_at IS NOT NULL OR users.email LIKE " in sql
    assert "%spam%" in params.values()


async def test_search_is_case_insensitive_on_name_or_email(session):
    await UserRepository(session).search("ali")

    sql, params = executed(session)
    assert "users.name ILIKE " in sql
    assert " OR users.email ILIKE " in sql
    assert "%ali%" in params.values()


async def test_count_active_excludes_soft_deleted(session):
    assert await UserRepository(session).count_active() == 0

    sql, _ = executed(session)
    assert "count(*)" in sql
    assert "users.deleted_at IS NULL" in sql


async def test_author_stats_left_join_group_by(session):
    assert await UserRepository(session).get_author_stats() == []

    sql, _ = executed(session)
    assert "LEFT OUTER JOIN posts ON posts.author_id = users.id" in sql
    assert "GROUP BY users.id, users.name" in sql
    assert "ORDER BY count(posts.id) DESC" in sql


async def test_post_stats_subquery(session):
    await UserRepository(session).get_with_post_stats()

    sql, _ = executed(session)
    assert "AS post_stats ON users.id = post_stats.author_id" in sql


async def test_missing_user_lookups_return_none(session):
    repo = UserRepository(session)

    assert await repo.get(new_id()) is None
    assert await repo.get_by_email("nobody@example.com") is None
    assert await repo.get_with_recent_posts(new_id()) is None


async def test_upsert_updates_everything_but_email(session):
    await UserRepository(session).upsert(NewUser(email="alice@example.com", name="Alicia"))

    sql, _ = returned(session)
    assert "ON CONFLICT (email) DO UPDATE SET" in sql
    assert "name = excluded.name" in sql
    assert "updated_at = now()" in sql
    assert "email = excluded.email" not in sql
    assert "RETURNING" in sql


async def test_create_if_not_exists_does_nothing_on_conflict(session):
    assert await UserRepository(session).create_if_not_exists(
        NewUser(email="alice@example.com", name="Alice")
    ) is None

    sql, _ = returned(session)
    assert "ON CONFLICT (email) DO NOTHING" in sql


async def test_soft_delete_sets_timestamp_in_database(session):
    await UserRepository(session).soft_delete(new_id())

    sql, _ = returned(session)
    assert "deleted_at=now()" in sql


async def test_restore_clears_deleted_at(session):
    await UserRepository(session).restore(new_id())

    sql, params = returned(session)
    assert "deleted_at=" in sql
    assert params["deleted_at"] is None


async def test_update_without_values_reads_row(session):
    await UserRepository(session).update(new_id(), name=None)

    session.scalars.assert_not_awaited()
    sql, _ = executed(session)
    assert sql.startswith("SELECT")


# ═══════════════════════════════════════════════════════════════════════════════
# EVENTS
# ═══════════════════════════════════════════════════════════════════════════════


async def test_event_containment(session):
    await EventRepository(session).find_containing({"type": "purchase"})

    sql, params = executed(session)
    assert "events.data @> " in sql
    assert {"type": "purchase"} in params.values()


async def test_event_type_lookup(session):
    await EventRepository(session).find_by_type("signup")

    sql, params = executed(session)
    assert "events.data ->> " in sql
    assert "signup" in params.values()
