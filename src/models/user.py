"""User model."""

import uuid

from sqlalchemy import JSON, Column, Integer, String, Text

from src.database import Base
from src.models.mixins import TimestampMixin


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base, TimestampMixin):
    """User account with profile fields and an embedded list of YouTube links."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Token lifecycle
    refresh_token = Column(Text, nullable=True)
    token_version = Column(Integer, nullable=False, default=0)

    # Profile
    bio = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    profile_picture = Column(String(255), nullable=True)  # relative to settings.upload_dir

    # [{"id", "url", "title", "addedAt"}, ...] in insertion order.
    # Always reassign a new list; in-place mutation is not tracked.
    youtube_links = Column(JSON(none_as_null=True), nullable=True, default=list)

    @property
    def profile_picture_url(self) -> str:
        return f"/api/v1/users/{self.id}/profile-picture"
