"""Profile service: user reads, profile updates and YouTube link management."""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from src.errors import Conflict, NotFound, ValidationError
from src.models.user import User
from src.schemas.common import Pagination
from src.schemas.user import YOUTUBE_URL_PATTERN, ProfileUpdate
from src.services.pagination import build_pagination, clamp_limit, clamp_page
from src.services.storage import ProfilePictureStorage, get_storage

logger = logging.getLogger(__name__)


@dataclass
class PictureUpload:
    """An uploaded profile picture, already read into memory."""

    filename: str | None
    content_type: str | None
    data: bytes


class ProfileService:
    """Service for profile-related operations."""

    def __init__(self, db: Session, storage: ProfilePictureStorage | None = None):
        self.db = db
        self.storage = storage or get_storage()

    def get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    def list_users(self, page: int | None, limit: int | None) -> tuple[list[User], Pagination]:
        """Newest users first, one page at a time."""
        page = clamp_page(page)
        limit = clamp_limit(limit)

        total = self.db.query(User).count()
        users = (
            self.db.query(User)
            .order_by(User.created_at.desc(), User.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return users, build_pagination(total, page, limit)

    def update_profile(
        self,
        user: User,
        update: ProfileUpdate,
        picture: PictureUpload | None = None,
    ) -> User:
        """Apply a partial profile update.

        Everything is validated before the user is touched. A replaced picture
        is deleted only after the new one has been committed.
        """
        changes = {
            field: value
            for field, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if picture is not None:
            self.storage.validate(picture.content_type, picture.data)

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            taken = (
                self.db.query(User.id)
                .filter(User.email == new_email, User.id != user.id)
                .first()
            )
            if taken:
                raise Conflict("Email already in use")

        for field in ("name", "email", "bio", "location"):
            if field in changes:
                setattr(user, field, changes[field])

        old_picture = user.profile_picture
        new_picture = None
        if picture is not None:
            new_picture = self.storage.save(picture.filename, picture.content_type, picture.data)
            user.profile_picture = new_picture

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            if new_picture:
                self.storage.delete(new_picture)
            raise

        if new_picture and old_picture and old_picture != new_picture:
            self.storage.delete(old_picture)

        self.db.refresh(user)
        return user

    def add_link(self, user: User, url: str, title: str) -> dict:
        """Append a YouTube link to the user's collection and return it."""
        if not YOUTUBE_URL_PATTERN.match(url):
            raise ValidationError("Invalid YouTube URL format")

        new_link = {
            "id": uuid.uuid4().hex,
            "url": url,
            "title": title,
            "addedAt": datetime.now(UTC).isoformat(),
        }
        user.youtube_links = [*(user.youtube_links or []), new_link]
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.id} added link {new_link['id']}")
        return new_link

    def remove_link(self, user: User, link_id: str) -> User:
        """Remove a link by id. Nothing is written when the id is unknown."""
        current_links = list(user.youtube_links or [])
        updated_links = [
            link
            for link in current_links
            if not (isinstance(link, dict) and link.get("id") == link_id)
        ]

        if len(updated_links) == len(current_links):
            raise NotFound("YouTube link not found")

        user.youtube_links = updated_links
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.id} removed link {link_id}")
        return user
