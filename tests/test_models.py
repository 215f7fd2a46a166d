"""Schema metadata: constraints, indexes, enums and keys."""

from pathlib import Path

from sqlalchemy import CheckConstraint
from sqlalchemy.schema import CreateIndex, CreateTable
from sqlalchemy.dialects import postgresql

from pgblog.models import Base, Comment, Event, Post, Profile, User, UserToGroup
from pgblog.models.base import new_id
from pgblog.models.user import DEFAULT_USER_SETTINGS, default_settings


MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "pgblog" / "migrations" / "versions"


def _index(table, name):
    return next(index for index in table.indexes if index.name == name)


def test_all_tables_registered():
    assert set(Base.metadata.tables) == {
        "users",
        "profiles",
        "posts",
        "comments",
        "groups",
        "users_to_groups",
        "events",
    }


def test_unique_columns():
    assert User.__table__.c.email.unique
    assert Post.__table__.c.slug.unique
    assert Profile.__table__.c.user_id.unique


def test_active_users_index_is_partial():
    index = _index(User.__table__, "active_users_email_idx")

    assert [c.name for c in index.columns] == ["email"]
    assert str(index.dialect_options["postgresql"]["where"]) == "deleted_at IS NULL"


def test_published_posts_index_is_partial():
    index = _index(Post.__table__, "published_posts_idx")

    assert [c.name for c in index.columns] == ["created_at"]
    assert str(index.dialect_options["postgresql"]["where"]) == "published = true"


def test_composite_author_published_index():
    index = _index(Post.__table__, "posts_author_published_idx")

    assert [c.name for c in index.columns] == ["author_id", "published"]


def test_events_data_has_gin_index():
    index = _index(Event.__table__, "events_data_gin_idx")
    ddl = str(CreateIndex(index).compile(dialect=postgresql.dialect()))

    assert "USING gin" in ddl


def test_every_foreign_key_cascades():
    foreign_keys = [fk for table in Base.metadata.tables.values() for fk in table.foreign_keys]

    assert foreign_keys
    assert all(fk.ondelete == "CASCADE" for fk in foreign_keys)


def test_membership_has_composite_primary_key():
    assert {c.name for c in UserToGroup.__table__.primary_key.columns} == {"user_id", "group_id"}


def test_native_enum_types():
    status = User.__table__.c.status.type
    role = User.__table__.c.role.type

    assert status.name == "status"
    assert list(status.enums) == ["pending", "active", "archived"]
    assert role.name == "user_role"
    assert list(role.enums) == ["admin", "user", "guest"]


def test_views_check_constraint():
    checks = [c for c in Post.__table__.constraints if isinstance(c, CheckConstraint)]

    assert [c.name for c in checks] == ["posts_views_non_negative"]
    assert "views >= 0" in str(checks[0].sqltext)


def test_users_ddl_has_jsonb_settings():
    ddl = str(CreateTable(User.__table__).compile(dialect=postgresql.dialect()))

    assert "settings JSONB" in ddl
    assert "deleted_at TIMESTAMP WITH TIME ZONE" in ddl


def test_comment_foreign_keys():
    targets = {fk.target_fullname for fk in Comment.__table__.foreign_keys}

    assert targets == {"posts.id", "users.id"}


def test_new_ids_are_time_ordered_uuid7():
    ids = [new_id() for _ in range(50)]

    assert all(value.version == 7 for value in ids)
    assert ids == sorted(ids)


def test_default_settings_are_independent_copies():
    first = default_settings()
    first["notifications"]["push"] = True

    assert DEFAULT_USER_SETTINGS["notifications"]["push"] is False
    assert default_settings() == DEFAULT_USER_SETTINGS


def test_initial_migration_creates_every_index():
    migration = next(MIGRATIONS_DIR.glob("*_001_initial_schema.py")).read_text()

    for table in Base.metadata.tables.values():
        assert f'"{table.name}"' in migration
        for index in table.indexes:
            assert f'"{index.name}"' in migration
