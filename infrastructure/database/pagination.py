"""
Pagination Utilities
====================
Page-number pagination for reading tables.

- Page size default: 15 rows (the data table)
- Maximum page size: 500
- Pages are 1-indexed; requests past the last page are clamped to it
"""

from dataclasses import dataclass
from typing import Any, Sequence

from app.constants import Pagination

DEFAULT_PAGE_SIZE = Pagination.TABLE_PAGE_SIZE
MAX_PAGE_SIZE = 500
MIN_PAGE = 1


@dataclass
class PaginationParams:
    """Validated pagination parameters."""

    page: int
    page_size: int

    @classmethod
    def from_request(
        cls,
        page: int | None = None,
        page_size: int | None = None,
    ) -> "PaginationParams":
        """
        Create validated pagination parameters from request inputs.

        Raises:
            ValueError: If page or page_size are out of valid ranges
        """
        if page_size is None:
            page_size = DEFAULT_PAGE_SIZE
        elif page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

        if page is None:
            page = MIN_PAGE
        elif page < MIN_PAGE:
            raise ValueError(f"page must be at least {MIN_PAGE}")

        return cls(page=page, page_size=page_size)


@dataclass
class PaginatedResponse:
    """Standard paginated response structure."""

    items: list[Any]
    total: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        """Calculate total number of pages (at least one)."""
        return max(1, (self.total + self.page_size - 1) // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def has_prev(self) -> bool:
        return self.page > MIN_PAGE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "items": self.items,
            "pagination": {
                "total": self.total,
                "page": self.page,
                "page_size": self.page_size,
                "page_count": self.page_count,
                "has_next": self.has_next,
                "has_prev": self.has_prev,
            },
        }


def paginate(items: Sequence[Any], params: PaginationParams) -> PaginatedResponse:
    """Slice an in-memory sequence, clamping the page to the last available one."""
    total = len(items)
    page_count = max(1, (total + params.page_size - 1) // params.page_size)
    page = min(params.page, page_count)
    start = (page - 1) * params.page_size
    return PaginatedResponse(
        items=list(items[start : start + params.page_size]),
        total=total,
        page=page,
        page_size=params.page_size,
    )
