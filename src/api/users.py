"""User, profile and content API endpoints.

Static paths (``/content``, ``/profile/...``) are registered before ``/{user_id}``
so they are not captured as user ids.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import ValidationError as PydanticValidationError

from src.api.dependencies import get_content_service, get_current_user, get_profile_service
from src.errors import NotFound, ValidationError, describe_validation_errors
from src.models.user import User
from src.schemas.common import ApiResponse, PaginatedResponse
from src.schemas.user import (
    ContentItem,
    LinkEntry,
    ProfileUpdate,
    UserResponse,
    YoutubeLinkAdded,
    YoutubeLinkCreate,
)
from src.services.content_service import ContentService, ContentSort
from src.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE
from src.services.profile_service import PictureUpload, ProfileService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=PaginatedResponse[UserResponse])
def list_users(
    service: Annotated[ProfileService, Depends(get_profile_service)],
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
):
    """List users, newest first."""
    users, pagination = service.list_users(page, limit)
    return PaginatedResponse[UserResponse](
        message="Users fetched successfully",
        data=[UserResponse.model_validate(user) for user in users],
        pagination=pagination,
    )


@router.get("/content", response_model=PaginatedResponse[ContentItem])
def list_content(
    service: Annotated[ContentService, Depends(get_content_service)],
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    sort_by: Annotated[ContentSort, Query(alias="sortBy")] = ContentSort.NEWEST,
):
    """Get every user's YouTube links as one feed."""
    items, pagination = service.list_content(page, limit, sort_by)
    return PaginatedResponse[ContentItem](
        message="Content fetched successfully",
        data=items,
        pagination=pagination,
    )


@router.get("/profile/me", response_model=ApiResponse[UserResponse])
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get the current user's profile."""
    return ApiResponse[UserResponse](
        message="Profile fetched successfully",
        data=UserResponse.model_validate(current_user),
    )


@router.put("/profile/me", response_model=ApiResponse[UserResponse])
async def update_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProfileService, Depends(get_profile_service)],
    name: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    bio: Annotated[str | None, Form()] = None,
    location: Annotated[str | None, Form()] = None,
    profile_picture: Annotated[UploadFile | None, File(alias="profilePicture")] = None,
):
    """Update the current user's profile.

    Accepts multipart form data; ``profilePicture`` is an optional image file.
    Empty name or email values leave the field unchanged.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    fields = {"name": name or None, "email": email or None, "bio": bio, "location": location}
    try:
        update = ProfileUpdate(**{key: value for key, value in fields.items() if value is not None})
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_errors(e.errors())) from None

    picture = None
    if profile_picture is not None and profile_picture.filename:
        picture = PictureUpload(
            filename=profile_picture.filename,
            content_type=profile_picture.content_type,
            data=await profile_picture.read(),
        )

    user = service.update_profile(current_user, update, picture)
    return ApiResponse[UserResponse](
        message="Profile updated successfully",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/profile/youtube",
    response_model=ApiResponse[YoutubeLinkAdded],
    status_code=status.HTTP_201_CREATED,
)
def add_youtube_link(
    link_data: YoutubeLinkCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Add a YouTube link to the current user's profile."""
    new_link = service.add_link(current_user, link_data.youtube_url, link_data.title)
    return ApiResponse[YoutubeLinkAdded](
        message="YouTube link added successfully",
        data=YoutubeLinkAdded(
            new_link=LinkEntry.model_validate(new_link),
            user=UserResponse.model_validate(current_user),
        ),
    )


@router.delete("/profile/youtube/{link_id}", response_model=ApiResponse[UserResponse])
def remove_youtube_link(
    link_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Remove a YouTube link from the current user's profile."""
    user = service.remove_link(current_user, link_id)
    return ApiResponse[UserResponse](
        message="YouTube link removed successfully",
        data=UserResponse.model_validate(user),
    )


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(
    user_id: str,
    service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Get a user's public profile."""
    user = service.get_user(user_id)
    return ApiResponse[UserResponse](
        message="User fetched successfully",
        data=UserResponse.model_validate(user),
    )


@router.get("/{user_id}/profile-picture", response_class=FileResponse)
def get_profile_picture(
    user_id: str,
    service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Stream a user's profile picture, or the default picture if none was uploaded."""
    user = service.get_user(user_id)
    path = service.storage.resolve(user.profile_picture)
    if not path.is_file():
        raise NotFound("Profile picture not found")

    return FileResponse(
        path,
        media_type=service.storage.media_type(path),
        headers={
            "Cache-Control": "public, max-age=86400",
            "Cross-Origin-Resource-Policy": "cross-origin",
        },
    )
