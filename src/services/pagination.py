"""Page/limit normalisation and pagination metadata."""

import math

from src.schemas.common import Pagination

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def clamp_page(page: int | None) -> int:
    """Pages start at 1; anything lower (or missing) is treated as 1."""
    if not page or page < 1:
        return DEFAULT_PAGE
    return page


def clamp_limit(limit: int | None) -> int:
    """Clamp limit into [1, MAX_LIMIT], defaulting to DEFAULT_LIMIT when missing."""
    if limit is None:
        return DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, limit))


def page_bounds(total: int, page: int, limit: int) -> tuple[int, int]:
    """Return the [start, end) slice for a page."""
    start = (page - 1) * limit
    return start, min(start + limit, total)


def build_pagination(total: int, page: int, limit: int) -> Pagination:
    """Build pagination metadata for a page of a collection of `total` items."""
    _, end = page_bounds(total, page, limit)
    has_next = end < total
    has_previous = page > 1
    return Pagination(
        total=total,
        limit=limit,
        total_pages=math.ceil(total / limit),
        current_page=page,
        has_next_page=has_next,
        has_previous_page=has_previous,
        next_page=page + 1 if has_next else None,
        previous_page=page - 1 if has_previous else None,
    )
