"""Paging — normalizes page/pageSize query values and computes offsets.

Invariants:
    - page <= 0 becomes 1; page_size <= 0 becomes the default; page_size never exceeds the cap
    - offset = (page - 1) * page_size, always >= 0
    - A page past the end is valid: it simply yields no rows
"""

from dataclasses import dataclass

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def normalize_page(
    page: int | None,
    page_size: int | None,
    default_size: int = DEFAULT_PAGE_SIZE,
    max_size: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """Clamp raw query values into a usable PageRequest."""
    page = page if page and page > 0 else DEFAULT_PAGE
    size = page_size if page_size and page_size > 0 else default_size
    return PageRequest(page=page, page_size=min(size, max_size))
