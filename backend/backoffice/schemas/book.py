"""Book Schemas — create/update payloads and the book response."""

from datetime import date, datetime
from decimal import Decimal

from backoffice.core.domain_types import BookStatus
from backoffice.schemas.common import CamelModel, Money


class BookWrite(CamelModel):
    isbn: str
    title: str
    author: str
    publisher: str | None = None
    publication_date: date | None = None
    description: str | None = None
    category_id: int
    total_copies: int = 0
    available_copies: int = 0
    language: str | None = None
    page_count: int = 0
    image_url: str | None = None
    price: Decimal | None = None
    status: BookStatus = BookStatus.AVAILABLE


class BookCreate(BookWrite):
    pass


class BookUpdate(BookWrite):
    pass


class BookResponse(CamelModel):
    id: int
    isbn: str
    title: str
    author: str
    publisher: str | None = None
    publication_date: date | None = None
    description: str | None = None
    category_id: int
    category_name: str | None = None
    total_copies: int
    available_copies: int
    language: str | None = None
    page_count: int
    image_url: str | None = None
    price: Money | None = None
    status: BookStatus
    created_at: datetime
    updated_at: datetime
