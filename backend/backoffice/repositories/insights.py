"""Insight Repositories — read-only aggregates for statistics and cross-entity search.

Invariants:
    - Nothing here writes; every method is a single SELECT
    - Date bounds are inclusive and optional (None leaves that side open)
    - Search windows order each source stably (name columns, then id) so pages never overlap
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.domain_types import TransactionStatus
from backoffice.models import (
    Book, Category, Fine, Librarian, Member, Reservation, Review, Transaction,
)


def _between(column: Any, start: datetime | None, end: datetime | None) -> list:
    criteria = []
    if start is not None:
        criteria.append(column >= start)
    if end is not None:
        criteria.append(column <= end)
    return criteria


class StatisticsRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _grouped_counts(self, stmt) -> dict[Any, int]:
        result = await self.db.execute(stmt)
        return {key: int(n) for key, n in result.all()}

    async def checkouts_per_book(
        self, start: datetime | None, end: datetime | None,
        category_id: int | None = None,
    ) -> dict[int, int]:
        stmt = (
            select(Transaction.book_id, func.count(Transaction.id))
            .where(*_between(Transaction.checkout_date, start, end))
            .group_by(Transaction.book_id)
        )
        if category_id:
            stmt = stmt.join(Book, Book.id == Transaction.book_id).where(
                Book.category_id == category_id,
            )
        return await self._grouped_counts(stmt)

    async def checkouts_per_member(
        self, start: datetime | None, end: datetime | None,
        membership_type: str | None = None,
    ) -> dict[int, int]:
        stmt = (
            select(Transaction.member_id, func.count(Transaction.id))
            .where(*_between(Transaction.checkout_date, start, end))
            .group_by(Transaction.member_id)
        )
        if membership_type:
            stmt = stmt.join(Member, Member.id == Transaction.member_id).where(
                func.lower(Member.membership_type) == membership_type.lower(),
            )
        return await self._grouped_counts(stmt)

    async def late_loans_per_member(
        self, member_ids: Sequence[int], start: datetime | None,
        end: datetime | None, now: datetime,
    ) -> dict[int, int]:
        """Loans returned after their due date, or still open past it."""
        if not member_ids:
            return {}
        return await self._grouped_counts(
            select(Transaction.member_id, func.count(Transaction.id))
            .where(
                Transaction.member_id.in_(member_ids),
                *_between(Transaction.checkout_date, start, end),
                or_(
                    Transaction.return_date > Transaction.due_date,
                    (Transaction.status == TransactionStatus.ACTIVE.value)
                    & (Transaction.due_date < now),
                ),
            )
            .group_by(Transaction.member_id),
        )

    async def reservations_per_book(
        self, book_ids: Sequence[int], start: datetime | None, end: datetime | None,
    ) -> dict[int, int]:
        if not book_ids:
            return {}
        return await self._grouped_counts(
            select(Reservation.book_id, func.count(Reservation.id))
            .where(
                Reservation.book_id.in_(book_ids),
                *_between(Reservation.reservation_date, start, end),
            )
            .group_by(Reservation.book_id),
        )

    async def approved_ratings(self, book_ids: Sequence[int]) -> dict[int, tuple[float, int]]:
        """book_id -> (average approved rating, approved review count)."""
        if not book_ids:
            return {}
        result = await self.db.execute(
            select(Review.book_id, func.avg(Review.rating), func.count(Review.id))
            .where(Review.book_id.in_(book_ids), Review.is_approved.is_(True))
            .group_by(Review.book_id),
        )
        return {
            book_id: (round(float(avg or 0), 2), int(n))
            for book_id, avg, n in result.all()
        }

    async def fines_per_member(self, member_ids: Sequence[int]) -> dict[int, Decimal]:
        if not member_ids:
            return {}
        result = await self.db.execute(
            select(Fine.member_id, func.coalesce(func.sum(Fine.amount), 0))
            .where(Fine.member_id.in_(member_ids))
            .group_by(Fine.member_id),
        )
        return {member_id: Decimal(str(total)) for member_id, total in result.all()}

    async def members_by_type(self) -> dict[str, int]:
        return await self._grouped_counts(
            select(Member.membership_type, func.count(Member.id))
            .group_by(Member.membership_type),
        )

    async def values_between(
        self, column: Any, start: datetime | None, end: datetime | None,
    ) -> list[Any]:
        """Every non-null value of a date column inside the range."""
        result = await self.db.execute(
            select(column).where(column.is_not(None), *_between(column, start, end)),
        )
        return list(result.scalars().all())

    async def payments_between(
        self, start: datetime | None, end: datetime | None,
    ) -> list[tuple[datetime, Decimal]]:
        """(paid_date, paid_amount) for fines with a recorded payment in the range."""
        result = await self.db.execute(
            select(Fine.paid_date, Fine.paid_amount).where(
                Fine.paid_date.is_not(None),
                Fine.paid_amount.is_not(None),
                *_between(Fine.paid_date, start, end),
            ),
        )
        return [(paid_at, Decimal(str(amount))) for paid_at, amount in result.all()]


def book_match(term: str) -> Any:
    return or_(
        Book.title.icontains(term, autoescape=True),
        Book.author.icontains(term, autoescape=True),
        Book.isbn.icontains(term, autoescape=True),
        Book.description.icontains(term, autoescape=True),
    )


def member_match(term: str) -> Any:
    return or_(
        Member.first_name.icontains(term, autoescape=True),
        Member.last_name.icontains(term, autoescape=True),
        Member.email.icontains(term, autoescape=True),
        Member.membership_number.icontains(term, autoescape=True),
    )


def librarian_match(term: str) -> Any:
    return or_(
        Librarian.first_name.icontains(term, autoescape=True),
        Librarian.last_name.icontains(term, autoescape=True),
        Librarian.email.icontains(term, autoescape=True),
        Librarian.employee_number.icontains(term, autoescape=True),
    )


SEARCH_SOURCES: dict[str, tuple[type, Any, tuple]] = {
    "books": (Book, book_match, (Book.title,)),
    "members": (Member, member_match, (Member.last_name, Member.first_name)),
    "librarians": (Librarian, librarian_match, (Librarian.last_name, Librarian.first_name)),
}


class SearchRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def count(self, source: str, term: str) -> int:
        model, match, _ = SEARCH_SOURCES[source]
        result = await self.db.execute(
            select(func.count()).select_from(model).where(match(term)),
        )
        return int(result.scalar_one())

    async def window(self, source: str, term: str, offset: int, limit: int) -> list[Any]:
        model, match, order = SEARCH_SOURCES[source]
        result = await self.db.execute(
            select(model)
            .where(match(term))
            .order_by(*order, model.id)
            .offset(offset)
            .limit(limit),
        )
        return list(result.scalars().all())

    async def _distinct(self, column: Any, term: str, limit: int, *criteria: Any) -> list[str]:
        result = await self.db.execute(
            select(column)
            .where(column.icontains(term, autoescape=True), *criteria)
            .distinct()
            .order_by(column)
            .limit(limit),
        )
        return [str(v) for v in result.scalars().all()]

    async def title_suggestions(self, term: str, limit: int) -> list[str]:
        return await self._distinct(Book.title, term, limit)

    async def author_suggestions(self, term: str, limit: int) -> list[str]:
        return await self._distinct(Book.author, term, limit)

    async def category_suggestions(self, term: str, limit: int) -> list[str]:
        return await self._distinct(Category.name, term, limit, Category.is_active.is_(True))
