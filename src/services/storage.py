"""Local file storage for profile pictures."""

import logging
import mimetypes
import secrets
import time
from pathlib import Path, PurePosixPath

from src.config import get_settings
from src.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
PROFILE_PICTURES_DIR = "profile-pictures"
DEFAULT_PICTURE = "default.png"

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class ProfilePictureStorage:
    """Stores profile pictures under ``<upload_dir>/profile-pictures``.

    Paths persisted on the user are relative to the upload root and always use
    forward slashes.
    """

    def __init__(self, upload_dir: str | Path, max_bytes: int):
        self.root = Path(upload_dir).resolve()
        self.max_bytes = max_bytes
        self.pictures_dir = self.root / PROFILE_PICTURES_DIR

    def validate(self, content_type: str | None, data: bytes) -> None:
        """Reject uploads that are not images or are too large."""
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(
                f"Only {', '.join(sorted(ALLOWED_IMAGE_TYPES))} files are allowed"
            )
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"File size too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB."
            )

    def save(self, filename: str | None, content_type: str, data: bytes) -> str:
        """Write an image under a random name and return its relative path."""
        self.validate(content_type, data)

        extension = Path(filename or "").suffix.lower() or _EXTENSIONS[content_type]
        if mimetypes.types_map.get(extension) not in ALLOWED_IMAGE_TYPES:
            extension = _EXTENSIONS[content_type]

        name = f"profile-{int(time.time() * 1000)}-{secrets.token_hex(16)}{extension}"
        self.pictures_dir.mkdir(parents=True, exist_ok=True)
        (self.pictures_dir / name).write_bytes(data)
        logger.info(f"Stored profile picture {name} ({len(data)} bytes)")
        return str(PurePosixPath(PROFILE_PICTURES_DIR, name))

    def delete(self, relative_path: str | None) -> None:
        """Remove a stored picture. Failures are logged, never raised."""
        if not relative_path:
            return
        try:
            path = self.resolve(relative_path)
            if path.exists():
                path.unlink()
                logger.info(f"Deleted profile picture {relative_path}")
        except (OSError, NotFound) as e:
            logger.error(f"Error deleting old profile picture {relative_path}: {e}")

    def resolve(self, relative_path: str | None) -> Path:
        """Absolute path for a stored picture, or the default picture if unset."""
        if not relative_path:
            return self.pictures_dir / DEFAULT_PICTURE

        path = (self.root / relative_path).resolve()
        if not path.is_relative_to(self.root):
            raise NotFound("Profile picture not found")
        return path

    @staticmethod
    def media_type(path: Path) -> str:
        """Content type from the file extension."""
        media_type, _ = mimetypes.guess_type(path.name)
        return media_type or "application/octet-stream"


def get_storage() -> ProfilePictureStorage:
    """Storage rooted at the configured upload directory."""
    settings = get_settings()
    return ProfilePictureStorage(settings.upload_dir, settings.max_upload_bytes)
