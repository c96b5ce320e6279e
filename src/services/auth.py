"""Authentication service for password hashing and the JWT token lifecycle.

Access tokens carry ``{sub, type="access"}`` and are short lived. Refresh tokens
carry ``{sub, type="refresh", ver}`` where ``ver`` is the user's token_version at
issue time. The most recently issued refresh token is stored on the user row,
so issuing a new pair invalidates the previous one, and bumping token_version
invalidates every refresh token issued before it.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import Conflict, NotFound, Unauthenticated
from src.models.user import User
from src.services.token_blacklist import get_revocation_store

logger = logging.getLogger(__name__)
settings = get_settings()

ACCESS_TOKEN_TYPE = "access"  # noqa: S105
REFRESH_TOKEN_TYPE = "refresh"  # noqa: S105

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class TokenPair:
    """Access and refresh token issued together at sign-in."""

    access_token: str
    refresh_token: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _encode_token(claims: dict, expires_delta: timedelta) -> str:
    now = datetime.now(UTC)
    to_encode = {
        **claims,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode_token(token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def create_access_token(user_id: str) -> str:
    """Create a JWT access token."""
    return _encode_token(
        {"sub": str(user_id), "type": ACCESS_TOKEN_TYPE},
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: str, version: int) -> str:
    """Create a JWT refresh token bound to the user's current token version."""
    return _encode_token(
        {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE, "ver": version},
        timedelta(days=settings.refresh_token_expire_days),
    )


def verify_access_token(token: str) -> str:
    """Validate an access token and return the user id it was issued for."""
    if get_revocation_store().contains(token):
        raise Unauthenticated("Session has been invalidated. Please log in again.")

    try:
        payload = _decode_token(token)
    except ExpiredSignatureError:
        raise Unauthenticated("Your session has expired. Please log in again.") from None
    except JWTError:
        raise Unauthenticated("Invalid authentication token. Please log in again.") from None

    user_id = payload.get("sub")
    if payload.get("type") != ACCESS_TOKEN_TYPE or not user_id:
        raise Unauthenticated("Invalid authentication token. Please log in again.")
    return user_id


def issue_token_pair(db: Session, user: User) -> TokenPair:
    """Create an access/refresh pair and store the refresh token on the user."""
    pair = TokenPair(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id, user.token_version or 0),
    )
    user.refresh_token = pair.refresh_token
    db.commit()
    db.refresh(user)
    return pair


def refresh_access_token(db: Session, refresh_token: str) -> str:
    """Exchange a live refresh token for a new access token."""
    try:
        payload = _decode_token(refresh_token)
    except JWTError:
        raise Unauthenticated("Invalid or expired refresh token") from None

    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise Unauthenticated("Invalid refresh token")

    user = get_user_by_id(db, payload.get("sub"))
    if user is None or user.refresh_token != refresh_token:
        raise Unauthenticated("Invalid refresh token")

    # Refresh tokens issued before a sign-out or password change
    if payload.get("ver") != user.token_version:
        raise Unauthenticated("Token version mismatch. Please login again.")

    return create_access_token(user.id)


def _revoke_access_token(token: str) -> dict | None:
    """Add a valid access token to the revocation set until it expires."""
    try:
        payload = _decode_token(token)
    except JWTError:
        return None
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    get_revocation_store().add(token, datetime.fromtimestamp(payload["exp"], UTC))
    return payload


def _invalidate_refresh_tokens(user: User) -> None:
    user.token_version = (user.token_version or 0) + 1
    user.refresh_token = None


def revoke_tokens(db: Session, access_token: str) -> bool:
    """Sign out: revoke the access token and every refresh token of its user.

    Returns False, without raising, when the token was already invalid.
    """
    if get_revocation_store().contains(access_token):
        logger.info("Sign-out with an already revoked token")
        return False

    payload = _revoke_access_token(access_token)
    if payload is None:
        logger.info("Invalid token provided for sign-out")
        return False

    user = get_user_by_id(db, payload.get("sub"))
    if user is None:
        return False

    _invalidate_refresh_tokens(user)
    db.commit()
    logger.info(f"User {user.id} signed out, token version now {user.token_version}")
    return True


def change_password(
    db: Session,
    user: User,
    current_password: str,
    new_password: str,
    access_token: str,
) -> None:
    """Replace the user's password and revoke all of their tokens."""
    if not verify_password(current_password, user.password_hash):
        raise Unauthenticated("Invalid password")

    user.password_hash = get_password_hash(new_password)
    _invalidate_refresh_tokens(user)
    db.commit()
    _revoke_access_token(access_token)
    logger.info(f"Password changed for user {user.id}")


def get_user_by_id(db: Session, user_id: str | None) -> User | None:
    """Get a user by id."""
    if not user_id:
        return None
    return db.query(User).filter(User.id == str(user_id)).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        raise NotFound("User not found")
    if not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid password")
    return user


def create_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a new user."""
    if get_user_by_email(db, email):
        raise Conflict("User already exists")

    user = User(name=name, email=email, password_hash=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists") from None
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user
