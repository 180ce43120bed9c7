"""Catalog Service — books and categories.

Invariants:
    - ISBN and category name are unique; duplicates raise ConflictError before any write
    - A book references an existing category
    - Books with active loans and categories referenced by books cannot be deleted
    - Every create/update/delete appends an audit entry in the same commit

Design Decisions:
    - Updates arrive as an already-modified tracked entity; uniqueness checks run under
      no_autoflush so the pending change is not written before it is checked
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.domain_types import AuditAction
from backoffice.core.errors import (
    BusinessRuleError, ConflictError, ResourceNotFoundError,
)
from backoffice.core.paging import PageRequest
from backoffice.models import Book, Category
from backoffice.repositories.catalog import BookRepository, CategoryRepository
from backoffice.repositories.circulation import TransactionRepository
from backoffice.services.audit_service import AuditService, snapshot

logger = logging.getLogger(__name__)


class BookService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.books = BookRepository(db)
        self.categories = CategoryRepository(db)
        self.transactions = TransactionRepository(db)
        self.audit = AuditService(db)

    async def get(self, book_id: int) -> Book:
        book = await self.books.get_by_id(book_id)
        if book is None:
            raise ResourceNotFoundError("Book", book_id)
        return book

    async def search(
        self, request: PageRequest, term: str | None = None,
        category_id: int | None = None,
    ) -> tuple[list[Book], int]:
        return await self.books.search(request, term, category_id)

    async def available(self, request: PageRequest) -> tuple[list[Book], int]:
        return await self.books.available(request)

    async def create(self, book: Book) -> Book:
        await self._ensure_category(book.category_id)
        if await self.books.get_by_isbn(book.isbn) is not None:
            raise ConflictError(
                f"A book with ISBN {book.isbn} already exists", "DUPLICATE_ISBN",
            )
        await self.books.add(book)
        self.audit.record(AuditAction.CREATE, "Book", book.id, new_values=snapshot(book))
        await self.db.commit()
        logger.info("Book created", extra={"entity": "Book", "entity_id": book.id})
        return await self.books.reload(book)

    async def update(self, book: Book, old_values: dict) -> Book:
        with self.db.no_autoflush:
            await self._ensure_category(book.category_id)
            duplicate = await self.books.get_by_isbn(book.isbn)
        if duplicate is not None and duplicate.id != book.id:
            raise ConflictError(
                f"A book with ISBN {book.isbn} already exists", "DUPLICATE_ISBN",
            )
        await self.db.flush()
        self.audit.record(
            AuditAction.UPDATE, "Book", book.id,
            old_values=old_values, new_values=snapshot(book),
        )
        await self.db.commit()
        return await self.books.reload(book)

    async def delete(self, book_id: int) -> None:
        book = await self.get(book_id)
        if await self.transactions.count_active_for_book(book_id):
            raise BusinessRuleError(
                "Book has active loans and cannot be deleted", "BOOK_ON_LOAN",
            )
        if await self.transactions.exists(self.transactions.model.book_id == book_id):
            raise ConflictError(
                "Book has circulation history and cannot be deleted", "BOOK_HAS_HISTORY",
            )
        old_values = snapshot(book)
        await self.books.delete(book)
        self.audit.record(AuditAction.DELETE, "Book", book_id, old_values=old_values)
        await self.db.commit()
        logger.info("Book deleted", extra={"entity": "Book", "entity_id": book_id})

    async def _ensure_category(self, category_id: int) -> None:
        if await self.categories.get_by_id(category_id) is None:
            raise ResourceNotFoundError("Category", category_id)


class CategoryService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.categories = CategoryRepository(db)
        self.books = BookRepository(db)
        self.audit = AuditService(db)

    async def get(self, category_id: int) -> Category:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        return category

    async def search(
        self, request: PageRequest, term: str | None = None,
        parent_category_id: int | None = None,
    ) -> tuple[list[Category], int]:
        return await self.categories.search(request, term, parent_category_id)

    async def create(self, category: Category) -> Category:
        await self._ensure_parent(category)
        if await self.categories.get_by_name(category.name) is not None:
            raise ConflictError(
                f"A category named '{category.name}' already exists", "DUPLICATE_CATEGORY",
            )
        await self.categories.add(category)
        self.audit.record(
            AuditAction.CREATE, "Category", category.id, new_values=snapshot(category),
        )
        await self.db.commit()
        return category

    async def update(self, category: Category, old_values: dict) -> Category:
        if category.parent_category_id == category.id:
            raise BusinessRuleError(
                "A category cannot be its own parent", "CATEGORY_SELF_PARENT",
            )
        with self.db.no_autoflush:
            await self._ensure_parent(category)
            duplicate = await self.categories.get_by_name(category.name)
        if duplicate is not None and duplicate.id != category.id:
            raise ConflictError(
                f"A category named '{category.name}' already exists", "DUPLICATE_CATEGORY",
            )
        await self.db.flush()
        self.audit.record(
            AuditAction.UPDATE, "Category", category.id,
            old_values=old_values, new_values=snapshot(category),
        )
        await self.db.commit()
        return category

    async def delete(self, category_id: int) -> None:
        category = await self.get(category_id)
        if await self.books.exists(Book.category_id == category_id):
            raise ConflictError(
                "Category has books and cannot be deleted", "CATEGORY_IN_USE",
            )
        old_values = snapshot(category)
        await self.categories.delete(category)
        self.audit.record(AuditAction.DELETE, "Category", category_id, old_values=old_values)
        await self.db.commit()

    async def _ensure_parent(self, category: Category) -> None:
        parent_id = category.parent_category_id
        if parent_id and await self.categories.get_by_id(parent_id) is None:
            raise ResourceNotFoundError("Category", parent_id)
