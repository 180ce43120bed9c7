"""Seed Script — loads a small demo catalog, membership and staff into an empty database.

Invariants:
    - Runs only against an empty catalog (no categories): never duplicates demo rows
    - Opens its own DatabaseSessionManager and disposes the engine when done

Usage:
    python -m backoffice.seed
"""

import asyncio
import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func, select

from backoffice.config import get_settings
from backoffice.core.domain_types import LibrarianRole, MembershipType
from backoffice.infrastructure.database import DatabaseSessionManager
from backoffice.infrastructure.observability import setup_logging
from backoffice.models import Book, Category, Librarian, Member

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Fiction", "Novels and short stories"),
    ("Science", "Natural sciences and mathematics"),
    ("History", "World and regional history"),
    ("Technology", "Computing and engineering"),
]

BOOKS = [
    ("9780141439518", "Pride and Prejudice", "Jane Austen", "Fiction", 3, Decimal("9.99")),
    ("9780451524935", "Nineteen Eighty-Four", "George Orwell", "Fiction", 4, Decimal("12.50")),
    ("9780553380163", "A Brief History of Time", "Stephen Hawking", "Science", 2, Decimal("18.00")),
    ("9780393354324", "The Guns of August", "Barbara W. Tuchman", "History", 1, Decimal("21.00")),
    ("9780262033848", "Introduction to Algorithms", "Thomas H. Cormen", "Technology", 2, Decimal("95.00")),
]

MEMBERS = [
    ("M-0001", "Ada", "Lovelace", "ada@example.org", MembershipType.PREMIUM),
    ("M-0002", "Alan", "Turing", "alan@example.org", MembershipType.FACULTY),
    ("M-0003", "Grace", "Hopper", "grace@example.org", MembershipType.STUDENT),
]


async def seed(database_url: str) -> bool:
    """Insert demo rows; returns False when the catalog already has data."""
    manager = DatabaseSessionManager(database_url)
    try:
        return await _seed(manager)
    finally:
        await manager.dispose()


async def _seed(manager: DatabaseSessionManager) -> bool:
    async with manager.session() as db:
        existing = (await db.execute(select(func.count()).select_from(Category))).scalar_one()
        if existing:
            logger.info("Catalog already populated, skipping seed")
            return False

        categories = {name: Category(name=name, description=desc) for name, desc in CATEGORIES}
        db.add_all(categories.values())
        await db.flush()

        for isbn, title, author, category, copies, price in BOOKS:
            db.add(Book(
                isbn=isbn, title=title, author=author,
                category_id=categories[category].id,
                total_copies=copies, available_copies=copies,
                language="English", price=price,
            ))

        today = date.today()
        for number, first, last, email, kind in MEMBERS:
            db.add(Member(
                membership_number=number, first_name=first, last_name=last,
                email=email, membership_type=kind.value,
                membership_start_date=today,
                membership_end_date=today + timedelta(days=365),
            ))

        db.add(Librarian(
            employee_number="E-0001", first_name="Melvil", last_name="Dewey",
            email="melvil@example.org", role=LibrarianRole.HEAD_LIBRARIAN.value,
            hire_date=today, department="Circulation",
        ))
        await db.commit()
    logger.info(
        "Seeded demo data",
        extra={"entity": "seed", "action": "create"},
    )
    return True


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.run(seed(settings.database_url))


if __name__ == "__main__":
    main()
