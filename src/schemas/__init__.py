"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    AccessTokenData,
    AuthData,
    PasswordChange,
    RefreshTokenRequest,
    UserLogin,
    UserRegister,
)
from src.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from src.schemas.user import (
    ContentItem,
    ContentOwner,
    LinkEntry,
    ProfileUpdate,
    UserResponse,
    YoutubeLinkAdded,
    YoutubeLinkCreate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "RefreshTokenRequest",
    "PasswordChange",
    "AuthData",
    "AccessTokenData",
    "ApiResponse",
    "MessageResponse",
    "PaginatedResponse",
    "Pagination",
    "UserResponse",
    "ProfileUpdate",
    "LinkEntry",
    "YoutubeLinkCreate",
    "YoutubeLinkAdded",
    "ContentItem",
    "ContentOwner",
]
