"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import Unauthenticated
from src.models.user import User
from src.services.auth import get_user_by_id, verify_access_token
from src.services.content_service import ContentService
from src.services.profile_service import ProfileService
from src.services.storage import ProfilePictureStorage, get_storage

# auto_error=False so a missing header is reported in the standard error envelope
security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Extract the raw bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials.strip():
        raise Unauthenticated("Authentication required. Please log in.")
    return credentials.credentials.strip()


def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the access token."""
    user_id = verify_access_token(token)

    user = get_user_by_id(db, user_id)
    if user is None:
        raise Unauthenticated("User no longer exists. Please register again.")

    return user


def get_profile_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ProfilePictureStorage, Depends(get_storage)],
) -> ProfileService:
    """Get profile service with dependencies."""
    return ProfileService(db, storage)


def get_content_service(
    db: Annotated[Session, Depends(get_db)],
) -> ContentService:
    """Get content service with dependencies."""
    return ContentService(db)
