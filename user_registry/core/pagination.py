"""Pagination: page/limit clamping and page metadata for the paged user listing.

Invariants:
    - 1 <= page <= MAX_PAGE, 1 <= limit <= MAX_LIMIT after clamping
    - total_pages >= 1 even when there are no records
    - has_next iff page < total_pages; has_prev iff page > 1
"""

import math
from dataclasses import dataclass

from user_registry.core.domain_types import SortField, SortOrder

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 5
MAX_LIMIT = 100
# keeps skip inside a signed 64-bit OFFSET
MAX_PAGE = (2**63 - 1) // MAX_LIMIT


@dataclass(frozen=True)
class PageRequest:
    """A clamped page window plus ordering."""
    page: int
    limit: int
    sort_by: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC

    @classmethod
    def clamped(
        cls,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        sort_by: SortField = SortField.CREATED_AT,
        order: SortOrder = SortOrder.DESC,
    ) -> "PageRequest":
        return cls(
            page=min(max(1, page), MAX_PAGE),
            limit=min(max(1, limit), MAX_LIMIT),
            sort_by=sort_by,
            order=order,
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageMeta:
    """Pagination metadata returned alongside a page of records."""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
    sort_by: SortField
    order: SortOrder


def total_pages(total: int, limit: int) -> int:
    return max(1, math.ceil(total / limit))


def build_page_meta(request: PageRequest, total: int) -> PageMeta:
    pages = total_pages(total, request.limit)
    return PageMeta(
        page=request.page,
        limit=request.limit,
        total=total,
        total_pages=pages,
        has_next=request.page < pages,
        has_prev=request.page > 1,
        sort_by=request.sort_by,
        order=request.order,
    )
