"""Pagination utilities."""

from collections.abc import Sequence
from typing import Any, Dict, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Pagination parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    size: int = Field(default=20, ge=1, le=100, description="Page size")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response."""

    items: list[T]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool
    total_pages: int


def paginate(items: Sequence[T], pagination: PaginationParams) -> Dict[str, Any]:
    """
    Paginate an already filtered and ordered sequence.

    Args:
        items: Ordered items to page through
        pagination: Pagination parameters

    Returns:
        Dictionary with pagination info and items
    """

    total = len(items)

    # Calculate pagination info
    total_pages = (total + pagination.size - 1) // pagination.size  # Ceiling division
    has_next = pagination.page < total_pages
    has_prev = pagination.page > 1

    offset = (pagination.page - 1) * pagination.size
    page_items = list(items[offset : offset + pagination.size])

    return {
        "items": page_items,
        "total": total,
        "page": pagination.page,
        "size": pagination.size,
        "has_next": has_next,
        "has_prev": has_prev,
        "total_pages": total_pages,
    }
