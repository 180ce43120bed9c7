"""Search Service — one paged result list across books, members and librarians.

Invariants:
    - Sources are concatenated in a fixed order (books, members, librarians); a page is
      a window over that concatenation, so total_count is the sum of per-source matches
    - Each source is read only for the part of the window it covers
    - Suggestions rank titles (100) above authors (90) above categories (80), each source
      contributing at most a third of the requested count
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.paging import PageRequest
from backoffice.models import Book, Librarian, Member
from backoffice.repositories.insights import SEARCH_SOURCES, SearchRepository

logger = logging.getLogger(__name__)

TITLE_RELEVANCE = 100
AUTHOR_RELEVANCE = 90
CATEGORY_RELEVANCE = 80


def _book_hit(book: Book) -> dict[str, Any]:
    return {
        "id": book.id,
        "type": "Book",
        "title": book.title,
        "description": f"by {book.author}",
        "metadata": {
            "isbn": book.isbn,
            "author": book.author,
            "category": book.category.name if book.category else None,
            "availableCopies": book.available_copies,
            "status": book.status,
        },
    }


def _member_hit(member: Member) -> dict[str, Any]:
    return {
        "id": member.id,
        "type": "Member",
        "title": member.full_name,
        "description": member.membership_number,
        "metadata": {
            "email": member.email,
            "membershipType": member.membership_type,
            "status": member.status,
        },
    }


def _librarian_hit(librarian: Librarian) -> dict[str, Any]:
    return {
        "id": librarian.id,
        "type": "Librarian",
        "title": librarian.full_name,
        "description": librarian.role,
        "metadata": {
            "employeeNumber": librarian.employee_number,
            "email": librarian.email,
            "status": librarian.status,
        },
    }


_HIT_BUILDERS = {
    "books": _book_hit,
    "members": _member_hit,
    "librarians": _librarian_hit,
}


class SearchService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.search = SearchRepository(db)

    async def global_search(
        self, term: str, request: PageRequest, source: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        term = term.strip()
        sources = [source.lower()] if source else list(SEARCH_SOURCES)
        counts = [(name, await self.search.count(name, term)) for name in sources]

        hits: list[dict[str, Any]] = []
        offset, remaining = request.offset, request.limit
        for name, matched in counts:
            if remaining <= 0:
                break
            if offset >= matched:
                offset -= matched
                continue
            rows = await self.search.window(name, term, offset, remaining)
            hits.extend(_HIT_BUILDERS[name](row) for row in rows)
            remaining -= len(rows)
            offset = 0

        total = sum(matched for _, matched in counts)
        logger.info(
            "Global search %r: %d matches", term, total,
            extra={"entity": "Search"},
        )
        return hits, total

    async def suggestions(self, term: str, max_results: int) -> list[dict[str, Any]]:
        term = term.strip()
        share = max(max_results // 3, 1)
        titles = await self.search.title_suggestions(term, share)
        authors = await self.search.author_suggestions(term, share)
        categories = await self.search.category_suggestions(term, share)
        found = (
            [{"text": t, "type": "Title", "relevance": TITLE_RELEVANCE} for t in titles]
            + [{"text": a, "type": "Author", "relevance": AUTHOR_RELEVANCE} for a in authors]
            + [
                {"text": c, "type": "Category", "relevance": CATEGORY_RELEVANCE}
                for c in categories
            ]
        )
        found.sort(key=lambda s: -s["relevance"])
        return found[:max_results]
