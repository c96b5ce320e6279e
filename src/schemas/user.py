"""User, profile and content schemas."""

import re
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from src.schemas.common import CamelModel

YOUTUBE_URL_PATTERN = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.*$")


class LinkEntry(CamelModel):
    """A YouTube link stored on a user's profile."""

    id: str
    url: str
    title: str | None = None
    added_at: str | None = None


class UserResponse(CamelModel):
    """Public user information. Never includes credentials or token state."""

    id: str
    name: str
    email: str
    bio: str | None = None
    location: str | None = None
    profile_picture: str | None = None
    youtube_links: list[LinkEntry] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    profile_picture_url: str

    @field_validator("youtube_links", mode="before")
    @classmethod
    def default_links(cls, value):
        return value or []


class ProfileUpdate(CamelModel):
    """Partial profile update. Fields left as None are not changed."""

    name: str | None = Field(None, min_length=3, max_length=50)
    email: EmailStr | None = None
    bio: str | None = None
    location: str | None = Field(None, max_length=100)


class YoutubeLinkCreate(CamelModel):
    """Add a YouTube link to the current user's profile."""

    youtube_url: str = Field(..., max_length=2048)
    title: str = Field(..., min_length=1, max_length=100)

    @field_validator("youtube_url")
    @classmethod
    def validate_youtube_url(cls, value: str) -> str:
        if not YOUTUBE_URL_PATTERN.match(value):
            raise ValueError("Invalid YouTube URL format")
        return value


class YoutubeLinkAdded(CamelModel):
    """Response payload after adding a link."""

    new_link: LinkEntry
    user: UserResponse


class ContentOwner(CamelModel):
    """Public identity of the user who shared a content item."""

    id: str
    name: str
    profile_picture_url: str


class ContentItem(CamelModel):
    """A link in the aggregated content feed."""

    id: str
    title: str
    url: str
    added_at: str
    user: ContentOwner
