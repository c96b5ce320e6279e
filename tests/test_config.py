"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from src.config import Settings


def test_production_requires_changed_secret():
    with pytest.raises(ValidationError, match="JWT_SECRET"):
        Settings(environment="production", database_url="postgresql://db.internal/links")


def test_production_rejects_localhost_database():
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        Settings(
            environment="production",
            jwt_secret="a-real-secret",
            database_url="postgresql://user:pw@localhost:5432/links",
        )


def test_production_settings_accepted():
    settings = Settings(
        environment="production",
        jwt_secret="a-real-secret",
        database_url="postgresql://user:pw@db.internal:5432/links",
    )
    assert settings.is_production
    assert not settings.is_development


def test_unknown_revocation_backend():
    with pytest.raises(ValidationError, match="REVOCATION_BACKEND"):
        Settings(revocation_backend="memcached")
