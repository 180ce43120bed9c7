"""Catalog Handlers — books, categories and reviews.

Invariants:
    - Create/update payloads are validated before the service sees them
    - Updates map the payload onto the tracked entity and hand the pre-change
      snapshot to the service for the audit trail
"""

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.paging import PageRequest
from backoffice.core.validate_catalog import (
    BOOK_VALIDATOR, CATEGORY_VALIDATOR, REVIEW_CREATE_VALIDATOR,
    REVIEW_REJECT_VALIDATOR, REVIEW_UPDATE_VALIDATOR,
)
from backoffice.handlers.common import ensure_valid, to_page
from backoffice.mapping.profiles import mapper
from backoffice.models import Book, Category, Review
from backoffice.schemas.book import BookCreate, BookResponse, BookUpdate
from backoffice.schemas.category import (
    CategoryCreate, CategoryResponse, CategoryUpdate,
)
from backoffice.schemas.common import PagedResult
from backoffice.schemas.review import (
    BookReviewStats, RejectReviewRequest, ReviewCreate, ReviewResponse, ReviewUpdate,
)
from backoffice.services.audit_service import snapshot
from backoffice.services.catalog_service import BookService, CategoryService
from backoffice.services.review_service import ReviewService


class BookHandlers:
    def __init__(self, db: AsyncSession):
        self.service = BookService(db)

    async def create(self, command: BookCreate) -> BookResponse:
        ensure_valid(BOOK_VALIDATOR, command)
        book = await self.service.create(mapper.map(command, Book))
        return mapper.map(book, BookResponse)

    async def update(self, book_id: int, command: BookUpdate) -> BookResponse:
        ensure_valid(BOOK_VALIDATOR, command)
        book = await self.service.get(book_id)
        old_values = snapshot(book)
        mapper.map_onto(command, book)
        book = await self.service.update(book, old_values)
        return mapper.map(book, BookResponse)

    async def delete(self, book_id: int) -> None:
        await self.service.delete(book_id)

    async def get(self, book_id: int) -> BookResponse:
        return mapper.map(await self.service.get(book_id), BookResponse)

    async def search(
        self, request: PageRequest, term: str | None = None,
        category_id: int | None = None,
    ) -> PagedResult[BookResponse]:
        result = await self.service.search(request, term, category_id)
        return to_page(result, request, BookResponse)

    async def available(self, request: PageRequest) -> PagedResult[BookResponse]:
        return to_page(await self.service.available(request), request, BookResponse)


class CategoryHandlers:
    def __init__(self, db: AsyncSession):
        self.service = CategoryService(db)

    async def create(self, command: CategoryCreate) -> CategoryResponse:
        ensure_valid(CATEGORY_VALIDATOR, command)
        category = await self.service.create(mapper.map(command, Category))
        return mapper.map(category, CategoryResponse)

    async def update(self, category_id: int, command: CategoryUpdate) -> CategoryResponse:
        ensure_valid(CATEGORY_VALIDATOR, command)
        category = await self.service.get(category_id)
        old_values = snapshot(category)
        mapper.map_onto(command, category)
        category = await self.service.update(category, old_values)
        return mapper.map(category, CategoryResponse)

    async def delete(self, category_id: int) -> None:
        await self.service.delete(category_id)

    async def get(self, category_id: int) -> CategoryResponse:
        return mapper.map(await self.service.get(category_id), CategoryResponse)

    async def search(
        self, request: PageRequest, term: str | None = None,
        parent_category_id: int | None = None,
    ) -> PagedResult[CategoryResponse]:
        result = await self.service.search(request, term, parent_category_id)
        return to_page(result, request, CategoryResponse)


class ReviewHandlers:
    def __init__(self, db: AsyncSession):
        self.service = ReviewService(db)

    async def create(self, command: ReviewCreate) -> ReviewResponse:
        ensure_valid(REVIEW_CREATE_VALIDATOR, command)
        review = await self.service.create(mapper.map(command, Review))
        return mapper.map(review, ReviewResponse)

    async def update(self, review_id: int, command: ReviewUpdate) -> ReviewResponse:
        ensure_valid(REVIEW_UPDATE_VALIDATOR, command)
        review = await self.service.get(review_id)
        mapper.map_onto(command, review)
        return mapper.map(await self.service.update(review), ReviewResponse)

    async def delete(self, review_id: int) -> None:
        await self.service.delete(review_id)

    async def get(self, review_id: int) -> ReviewResponse:
        return mapper.map(await self.service.get(review_id), ReviewResponse)

    async def by_book(self, book_id: int, request: PageRequest) -> PagedResult[ReviewResponse]:
        return to_page(await self.service.by_book(book_id, request), request, ReviewResponse)

    async def by_member(
        self, member_id: int, request: PageRequest,
    ) -> PagedResult[ReviewResponse]:
        return to_page(
            await self.service.by_member(member_id, request), request, ReviewResponse,
        )

    async def by_approval(
        self, approved: bool, request: PageRequest,
    ) -> PagedResult[ReviewResponse]:
        return to_page(
            await self.service.by_approval(approved, request), request, ReviewResponse,
        )

    async def approve(self, review_id: int) -> ReviewResponse:
        return mapper.map(await self.service.approve(review_id), ReviewResponse)

    async def reject(self, review_id: int, command: RejectReviewRequest) -> None:
        ensure_valid(REVIEW_REJECT_VALIDATOR, command)
        await self.service.reject(review_id, command.reason)

    async def book_stats(self, book_id: int) -> BookReviewStats:
        return BookReviewStats(**await self.service.book_stats(book_id))
