"""Content feed: every user's YouTube links, flattened, sorted and paginated."""

import logging
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy.orm import Session

from src.models.user import User
from src.schemas.common import Pagination
from src.schemas.user import ContentItem, ContentOwner
from src.services.pagination import build_pagination, clamp_limit, clamp_page, page_bounds

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Video"


class ContentSort(StrEnum):
    """Sort orders for the content feed."""

    NEWEST = "newest"
    OLDEST = "oldest"
    # No popularity metric exists yet; sorts like NEWEST
    POPULAR = "popular"


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class ContentService:
    """Builds the public content feed.

    This scans every user with links on each call (O(users x links)). Fine for
    small deployments; a dedicated links table with database-side ordering
    would be needed at scale.
    """

    def __init__(self, db: Session):
        self.db = db

    def collect_items(self) -> list[tuple[datetime, ContentItem]]:
        """Flatten all users' links into (sort key, item) pairs."""
        now = datetime.now(UTC)
        rows = (
            self.db.query(User.id, User.name, User.youtube_links)
            .filter(User.youtube_links.isnot(None))
            .order_by(User.created_at.desc())
            .all()
        )

        items = []
        skipped = 0
        for user_id, user_name, links in rows:
            if not links:
                continue
            owner = ContentOwner(
                id=user_id,
                name=user_name,
                profile_picture_url=f"/api/v1/users/{user_id}/profile-picture",
            )
            for link in links:
                if not isinstance(link, dict) or not link.get("id") or not link.get("url"):
                    skipped += 1
                    continue
                added_at = _parse_timestamp(link.get("addedAt"))
                item = ContentItem(
                    id=str(link["id"]),
                    title=link.get("title") or UNTITLED,
                    url=link["url"],
                    added_at=link.get("addedAt") or now.isoformat(),
                    user=owner,
                )
                items.append((added_at or now, item))

        if skipped:
            logger.warning(f"Skipped {skipped} malformed content entries")
        return items

    def list_content(
        self,
        page: int | None = 1,
        limit: int | None = 10,
        sort_by: ContentSort = ContentSort.NEWEST,
    ) -> tuple[list[ContentItem], Pagination]:
        """Return one page of the content feed and its pagination metadata."""
        page = clamp_page(page)
        limit = clamp_limit(limit)

        items = self.collect_items()
        items.sort(key=lambda pair: pair[0], reverse=sort_by != ContentSort.OLDEST)

        total = len(items)
        start, end = page_bounds(total, page, limit)
        page_items = [item for _, item in items[start:end]]
        return page_items, build_pagination(total, page, limit)
