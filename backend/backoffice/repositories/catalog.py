"""Catalog Repositories — books, categories and reviews."""

from sqlalchemy import func, or_, select

from backoffice.core.paging import PageRequest
from backoffice.models import Book, Category, Review
from backoffice.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    model = Book

    async def search(
        self, request: PageRequest, term: str | None = None,
        category_id: int | None = None,
    ) -> tuple[list[Book], int]:
        """Title/author/ISBN contains `term` (case-insensitive), ordered by title."""
        criteria = []
        if term and term.strip():
            t = term.strip()
            criteria.append(or_(
                Book.title.icontains(t, autoescape=True),
                Book.author.icontains(t, autoescape=True),
                Book.isbn.icontains(t, autoescape=True),
            ))
        if category_id:
            criteria.append(Book.category_id == category_id)
        return await self.page(request, *criteria, order_by=[Book.title])

    async def available(self, request: PageRequest) -> tuple[list[Book], int]:
        return await self.page(
            request, Book.available_copies > 0, order_by=[Book.title],
        )

    async def get_by_isbn(self, isbn: str) -> Book | None:
        return await self.find_one(Book.isbn == isbn)

    async def copy_totals(self) -> tuple[int, int]:
        """(sum of total copies, sum of available copies) across the catalog."""
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Book.total_copies), 0),
                func.coalesce(func.sum(Book.available_copies), 0),
            ),
        )
        total, available = result.one()
        return int(total), int(available)

    async def count_by_category(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Category.name, func.count(Book.id))
            .join(Category, Category.id == Book.category_id)
            .group_by(Category.name),
        )
        return {name: int(n) for name, n in result.all()}


class CategoryRepository(BaseRepository[Category]):
    model = Category

    async def search(
        self, request: PageRequest, term: str | None = None,
        parent_category_id: int | None = None,
    ) -> tuple[list[Category], int]:
        criteria = []
        if term and term.strip():
            criteria.append(Category.name.icontains(term.strip(), autoescape=True))
        if parent_category_id:
            criteria.append(Category.parent_category_id == parent_category_id)
        return await self.page(request, *criteria, order_by=[Category.name])

    async def get_by_name(self, name: str) -> Category | None:
        return await self.find_one(func.lower(Category.name) == name.strip().lower())


class ReviewRepository(BaseRepository[Review]):
    model = Review

    async def by_book(self, book_id: int, request: PageRequest):
        return await self.page(
            request, Review.book_id == book_id, order_by=[Review.review_date.desc()],
        )

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.page(
            request, Review.member_id == member_id, order_by=[Review.review_date.desc()],
        )

    async def by_approval(self, approved: bool, request: PageRequest):
        return await self.page(
            request, Review.is_approved.is_(approved),
            order_by=[Review.review_date.desc()],
        )

    async def get_for(self, book_id: int, member_id: int) -> Review | None:
        return await self.find_one(
            Review.book_id == book_id, Review.member_id == member_id,
        )

    async def rating_breakdown(self, book_id: int) -> list[tuple[int, bool, int]]:
        """(rating, is_approved, count) rows for one book."""
        result = await self.db.execute(
            select(Review.rating, Review.is_approved, func.count(Review.id))
            .where(Review.book_id == book_id)
            .group_by(Review.rating, Review.is_approved),
        )
        return [(int(r), bool(a), int(n)) for r, a, n in result.all()]
