"""Shared schema base classes and response envelopes."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Pagination(CamelModel):
    """Pagination metadata for list responses."""

    total: int
    limit: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int | None
    previous_page: int | None


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: {success, message, data}."""

    success: bool = True
    message: str
    data: T


class PaginatedResponse(CamelModel, Generic[T]):
    """Success envelope for paginated collections."""

    success: bool = True
    message: str
    data: list[T]
    pagination: Pagination


class MessageResponse(CamelModel):
    """Envelope without a payload."""

    success: bool = True
    message: str
