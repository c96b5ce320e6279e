"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_bearer_token, get_current_user
from src.database import get_db
from src.models.user import User
from src.schemas.auth import (
    AccessTokenData,
    AuthData,
    PasswordChange,
    RefreshTokenRequest,
    UserLogin,
    UserRegister,
)
from src.schemas.common import ApiResponse, MessageResponse
from src.schemas.user import UserResponse
from src.services.auth import (
    authenticate_user,
    change_password,
    create_user,
    issue_token_pair,
    refresh_access_token,
    revoke_tokens,
)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _auth_response(db: Session, user: User, message: str) -> ApiResponse[AuthData]:
    tokens = issue_token_pair(db, user)
    return ApiResponse[AuthData](
        message=message,
        data=AuthData(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=UserResponse.model_validate(user),
        ),
    )


@router.post(
    "/signup",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def signup(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user and sign them in."""
    user = create_user(db, user_data.name, user_data.email, user_data.password)
    return _auth_response(db, user, "User created successfully")


@router.post("/signin", response_model=ApiResponse[AuthData])
def signin(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Sign in with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    return _auth_response(db, user, "User signed in successfully")


@router.post("/refresh-token", response_model=ApiResponse[AccessTokenData])
def refresh_token(
    body: RefreshTokenRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Exchange a refresh token for a new access token."""
    access_token = refresh_access_token(db, body.refresh_token)
    return ApiResponse[AccessTokenData](
        message="Token refreshed successfully",
        data=AccessTokenData(access_token=access_token),
    )


@router.post("/signout", response_model=MessageResponse)
def signout(
    token: Annotated[str, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
):
    """Sign out. Succeeds even when the token is already invalid."""
    revoke_tokens(db, token)
    return MessageResponse(message="User signed out successfully")


@router.post("/change-password", response_model=MessageResponse)
def update_password(
    body: PasswordChange,
    token: Annotated[str, Depends(get_bearer_token)],
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change password. All existing sessions are revoked; sign in again afterwards."""
    change_password(db, current_user, body.current_password, body.new_password, token)
    return MessageResponse(message="Password changed successfully. Please sign in again.")
