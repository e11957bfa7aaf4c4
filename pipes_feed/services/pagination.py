"""
Paginator

Slices an ordered result set into pages. Caller input (strings or numbers)
is coerced here; anything non-numeric or below 1 falls back to the default.
"""
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pipes_feed.utils.coercion import coerce_positive_int

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
DEFAULT_MAX_PAGE = 100


@dataclass(frozen=True, slots=True)
class Page:
    items: list = field(default_factory=list)
    next_page: int | None = None

    @property
    def has_next(self) -> bool:
        return self.next_page is not None


def paginate(
    ordered: Sequence,
    page: Any = None,
    per_page: Any = None,
    max_page: Any = None,
    *,
    default_per_page: int = DEFAULT_PER_PAGE,
    max_per_page: int = MAX_PER_PAGE,
    default_max_page: int = DEFAULT_MAX_PAGE,
) -> Page:
    """
    Return one page of an ordered sequence

    A page beyond max_page is empty with no next page. A next page exists
    only if more records follow and it would not exceed max_page.
    """
    current_page = coerce_positive_int(page) or 1
    current_per_page = min(coerce_positive_int(per_page) or default_per_page, max_per_page)
    current_max_page = coerce_positive_int(max_page) or default_max_page

    if current_page > current_max_page:
        return Page()

    start = (current_page - 1) * current_per_page
    end = current_page * current_per_page
    items = list(ordered[start:end])

    next_page = None
    if current_page < current_max_page and len(ordered) > end:
        next_page = current_page + 1

    return Page(items=items, next_page=next_page)
