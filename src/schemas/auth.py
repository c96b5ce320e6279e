"""Authentication schemas."""

from pydantic import EmailStr, Field

from src.schemas.common import CamelModel
from src.schemas.user import UserResponse


class UserRegister(CamelModel):
    """User registration request."""

    name: str = Field(..., min_length=3, max_length=50)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=72)


class UserLogin(CamelModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class RefreshTokenRequest(CamelModel):
    """Exchange a refresh token for a new access token."""

    refresh_token: str = Field(..., min_length=1)


class PasswordChange(CamelModel):
    """Change the current user's password."""

    current_password: str = Field(..., min_length=1, max_length=72)
    new_password: str = Field(..., min_length=8, max_length=72)


class AuthData(CamelModel):
    """Token pair and user info returned by signup and signin."""

    access_token: str
    refresh_token: str
    user: UserResponse


class AccessTokenData(CamelModel):
    """New access token returned by refresh."""

    access_token: str
