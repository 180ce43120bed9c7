"""Service test fixtures — async DB, FastAPI test client and row factories.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to open one test session per request
    - db_manager points at the test engine so health checks see the test database
    - Factory fixtures commit their rows before the test issues requests

Design Decisions:
    - SQLite in-memory with StaticPool: all sessions share the one connection
      that holds the schema
    - Factories insert ORM rows directly: request tests exercise one endpoint at a time
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import backoffice.infrastructure.database as db_module
from backoffice.db.base import Base
from backoffice.infrastructure.database import DatabaseSessionManager, get_db
from backoffice.main import app
from backoffice.models import Book, Category, Librarian, Member, Transaction


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# --- row factories ------------------------------------------------------------

@pytest.fixture
def make_category(test_db):
    async def _make(name: str = "Fiction", **fields) -> Category:
        category = Category(name=name, **fields)
        test_db.add(category)
        await test_db.commit()
        return category
    return _make


@pytest.fixture
def make_book(test_db, make_category):
    async def _make(
        isbn: str = "9780141439518",
        title: str = "Pride and Prejudice",
        author: str = "Jane Austen",
        copies: int = 2,
        category: Category | None = None,
        **fields,
    ) -> Book:
        category = category or await make_category(f"Category {isbn}")
        fields.setdefault("available_copies", copies)
        book = Book(
            isbn=isbn, title=title, author=author, category_id=category.id,
            total_copies=copies, **fields,
        )
        test_db.add(book)
        await test_db.commit()
        return book
    return _make


@pytest.fixture
def make_member(test_db):
    async def _make(
        number: str = "M-0001",
        first_name: str = "Ada",
        last_name: str = "Lovelace",
        email: str | None = None,
        **fields,
    ) -> Member:
        today = date.today()
        fields.setdefault("membership_start_date", today - timedelta(days=30))
        fields.setdefault("membership_end_date", today + timedelta(days=335))
        member = Member(
            membership_number=number, first_name=first_name, last_name=last_name,
            email=email or f"{number.lower()}@example.org", **fields,
        )
        test_db.add(member)
        await test_db.commit()
        return member
    return _make


@pytest.fixture
def make_librarian(test_db):
    async def _make(number: str = "E-0001", **fields) -> Librarian:
        fields.setdefault("hire_date", date(2020, 1, 6))
        librarian = Librarian(
            employee_number=number, first_name="Melvil", last_name="Dewey",
            email=f"{number.lower()}@example.org", **fields,
        )
        test_db.add(librarian)
        await test_db.commit()
        return librarian
    return _make


@pytest.fixture
def make_loan(test_db):
    """Insert an Active loan checked out `days_ago` days ago and due `due_in` days from now."""
    async def _make(
        book: Book, member: Member, number: str = "TXN-TEST-000001",
        days_ago: int = 20, due_in: int = -6,
    ) -> Transaction:
        now = datetime.now(timezone.utc)
        loan = Transaction(
            transaction_number=number, book_id=book.id, member_id=member.id,
            type="Borrow", checkout_date=now - timedelta(days=days_ago),
            due_date=now + timedelta(days=due_in), status="Active",
        )
        book.available_copies -= 1
        member.current_books_count += 1
        test_db.add(loan)
        await test_db.commit()
        return loan
    return _make


@pytest.fixture
async def book(make_book):
    return await make_book()


@pytest.fixture
async def member(make_member):
    return await make_member()


