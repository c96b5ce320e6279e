"""Tests for the authentication service."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.config import get_settings
from src.errors import Conflict, NotFound, Unauthenticated
from src.services.auth import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    create_user,
    get_password_hash,
    issue_token_pair,
    refresh_access_token,
    revoke_tokens,
    verify_access_token,
    verify_password,
)

settings = get_settings()


@pytest.fixture
def user(db):
    return create_user(db, "Service User", "service@example.com", "password123")


def test_password_hashing():
    hashed = get_password_hash("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_access_token_round_trip(user):
    token = create_access_token(user.id)
    assert verify_access_token(token) == user.id


def test_tokens_are_unique():
    """Two tokens issued in the same instant are still different strings."""
    assert create_access_token("same") != create_access_token("same")
    assert create_refresh_token("same", 0) != create_refresh_token("same", 0)


def test_expired_access_token():
    expired = jwt.encode(
        {"sub": "someone", "type": "access", "exp": datetime.now(UTC) - timedelta(minutes=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(Unauthenticated, match="expired"):
        verify_access_token(expired)


def test_forged_access_token():
    forged = jwt.encode(
        {"sub": "someone", "type": "access", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        "not-the-secret",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(Unauthenticated):
        verify_access_token(forged)


def test_refresh_token_embeds_version(user):
    token = create_refresh_token(user.id, 3)
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["ver"] == 3
    assert claims["type"] == "refresh"


def test_issue_token_pair_stores_refresh_token(db, user):
    pair = issue_token_pair(db, user)
    assert user.refresh_token == pair.refresh_token
    assert refresh_access_token(db, pair.refresh_token)


def test_revoke_tokens(db, user, revocation_store):
    pair = issue_token_pair(db, user)

    assert revoke_tokens(db, pair.access_token) is True
    assert revocation_store.contains(pair.access_token)
    assert user.token_version == 1
    assert user.refresh_token is None

    with pytest.raises(Unauthenticated, match="invalidated"):
        verify_access_token(pair.access_token)
    with pytest.raises(Unauthenticated):
        refresh_access_token(db, pair.refresh_token)


def test_revoke_invalid_token_is_noop(db, user):
    assert revoke_tokens(db, "garbage") is False
    assert user.token_version == 0


def test_create_user_duplicate(db, user):
    with pytest.raises(Conflict):
        create_user(db, "Someone Else", "service@example.com", "password123")


def test_authenticate_unknown_user(db):
    with pytest.raises(NotFound):
        authenticate_user(db, "ghost@example.com", "password123")
