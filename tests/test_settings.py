"""Configuration loading and validation."""

import pytest

from pgblog.config.settings import Settings, async_database_url, get_settings
from pgblog.core.exceptions import ConfigurationError


def test_plain_postgresql_url_uses_asyncpg(monkeypatch):
    """postgresql:// URLs are rewritten to the asyncpg driver."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://app:secret@db:5432/blog")

    settings = get_settings()

    assert settings.DATABASE_URL == "postgresql+asyncpg://app:secret@db:5432/blog"


def test_postgres_scheme_is_rewritten_too(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://app@db/blog")

    assert get_settings().DATABASE_URL == "postgresql+asyncpg://app@db/blog"


def test_explicit_driver_is_kept(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://app@db/blog")

    assert get_settings().DATABASE_URL == "postgresql+asyncpg://app@db/blog"


def test_missing_database_url_is_a_configuration_error(monkeypatch, tmp_path):
    """Without DATABASE_URL (and no .env), loading settings fails loudly."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    assert exc_info.value.error_code == "CONFIGURATION_ERROR"
    assert "DATABASE_URL" in exc_info.value.details["fields"]


def test_blank_database_url_is_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "   ")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigurationError):
        get_settings()


def test_pool_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_POOL_SIZE", raising=False)
    monkeypatch.delenv("DATABASE_MAX_OVERFLOW", raising=False)
    monkeypatch.delenv("DATABASE_CONNECT_TIMEOUT", raising=False)
    monkeypatch.delenv("DATABASE_IDLE_TIMEOUT", raising=False)

    settings = Settings(DATABASE_URL="postgresql://localhost/blog")

    assert settings.DATABASE_POOL_SIZE == 10
    assert settings.DATABASE_MAX_OVERFLOW == 10
    assert settings.DATABASE_CONNECT_TIMEOUT == 10
    assert settings.DATABASE_IDLE_TIMEOUT == 30


def test_invalid_pool_size_is_a_configuration_error(monkeypatch):
    monkeypatch.setenv("DATABASE_POOL_SIZE", "0")

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    assert "DATABASE_POOL_SIZE" in exc_info.value.details["fields"]


def test_settings_are_cached(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/blog")

    assert get_settings() is get_settings()


def test_environment_properties():
    settings = Settings(DATABASE_URL="postgresql://localhost/blog", APP_ENV="production")

    assert settings.is_production
    assert not settings.is_development


def test_async_database_url_rewrites_plain_schemes():
    assert async_database_url("postgresql://app@db/blog") == "postgresql+asyncpg://app@db/blog"
    assert async_database_url("postgres://app@db/blog") == "postgresql+asyncpg://app@db/blog"
    assert async_database_url("postgresql+asyncpg://app@db/blog") == "postgresql+asyncpg://app@db/blog"
