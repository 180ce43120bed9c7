"""Statistics Service — library-wide aggregates, rankings, overdue analysis and trends.

Invariants:
    - Read-only: nothing here flushes or commits
    - Date ranges cover whole UTC days on both ends; a missing bound is open
    - Rankings sort by count descending, ties broken by id ascending
    - Overdue fines in the analysis are accrued (what a return right now would charge),
      computed with the configured daily rate and cap
    - Trends always return twelve months, zero-filled
"""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.config import Settings, get_settings
from backoffice.core.circulation_policy import (
    as_utc, days_overdue, outstanding_balance, overdue_fine, to_money,
)
from backoffice.core.domain_types import (
    MemberStatus, PAYABLE_FINE_STATUSES, ReservationStatus, TransactionStatus,
)
from backoffice.core.statistics import (
    OVERDUE_BUCKETS, day_range, in_range, mean, month_range, overdue_bucket,
    percentage,
)
from backoffice.models import Book, Fine, Member, Reservation, Transaction
from backoffice.repositories.catalog import BookRepository
from backoffice.repositories.circulation import (
    FineRepository, ReservationRepository, TransactionRepository,
)
from backoffice.repositories.insights import StatisticsRepository
from backoffice.repositories.people import MemberRepository

logger = logging.getLogger(__name__)

TOP_OVERDUE_MEMBERS = 10

_PAYABLE = {s.value for s in PAYABLE_FINE_STATUSES}


def _ranked(counts: dict[int, int], top_count: int) -> list[tuple[int, int]]:
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:top_count]


def _by_month(values: list[datetime]) -> Counter:
    return Counter(as_utc(v).month for v in values)


class StatisticsService:
    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.stats = StatisticsRepository(db)
        self.books = BookRepository(db)
        self.members = MemberRepository(db)
        self.transactions = TransactionRepository(db)
        self.reservations = ReservationRepository(db)
        self.fines = FineRepository(db)

    async def overview(self) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        total_copies, available_copies = await self.books.copy_totals()
        fine_totals = await self.fines.totals_by_status()
        return {
            "total_books": await self.books.count(),
            "total_copies": total_copies,
            "available_copies": available_copies,
            "total_members": await self.members.count(),
            "active_members": await self.members.count(
                Member.status == MemberStatus.ACTIVE.value,
            ),
            "total_transactions": await self.transactions.count(),
            "active_loans": await self.transactions.count(
                Transaction.status == TransactionStatus.ACTIVE.value,
            ),
            "overdue_items": await self.transactions.count_overdue(now),
            "total_fines": to_money(sum(
                (amount for _, amount, _ in fine_totals.values()), Decimal(0),
            )),
            "outstanding_fines": to_money(sum(
                (
                    outstanding_balance(amount, paid)
                    for status, (_, amount, paid) in fine_totals.items()
                    if status in _PAYABLE
                ),
                Decimal(0),
            )),
            "active_reservations": await self.reservations.count(
                Reservation.status == ReservationStatus.ACTIVE.value,
            ),
            "books_by_category": await self.books.count_by_category(),
            "members_by_type": await self.stats.members_by_type(),
        }

    async def top_books(
        self, top_count: int, from_date: date | None = None,
        to_date: date | None = None, category_id: int | None = None,
    ) -> list[dict[str, Any]]:
        start, end = day_range(from_date, to_date)
        ranked = _ranked(
            await self.stats.checkouts_per_book(start, end, category_id), top_count,
        )
        ids = [book_id for book_id, _ in ranked]
        books = {b.id: b for b in await self.books.find_all(Book.id.in_(ids))} if ids else {}
        reservations = await self.stats.reservations_per_book(ids, start, end)
        ratings = await self.stats.approved_ratings(ids)
        rows = []
        for book_id, checkouts in ranked:
            book = books[book_id]
            average, reviews = ratings.get(book_id, (0.0, 0))
            rows.append({
                "book_id": book_id,
                "title": book.title,
                "author": book.author,
                "checkout_count": checkouts,
                "reservation_count": reservations.get(book_id, 0),
                "average_rating": average,
                "review_count": reviews,
                "price": book.price,
            })
        return rows

    async def top_members(
        self, top_count: int, from_date: date | None = None,
        to_date: date | None = None, membership_type: str | None = None,
    ) -> list[dict[str, Any]]:
        now = datetime.now(timezone.utc)
        start, end = day_range(from_date, to_date)
        ranked = _ranked(
            await self.stats.checkouts_per_member(start, end, membership_type), top_count,
        )
        ids = [member_id for member_id, _ in ranked]
        members = await self.members.get_many(ids)
        late = await self.stats.late_loans_per_member(ids, start, end, now)
        fines = await self.stats.fines_per_member(ids)
        return [
            {
                "member_id": member_id,
                "member_name": members[member_id].full_name,
                "membership_type": members[member_id].membership_type,
                "checkout_count": checkouts,
                "overdue_count": late.get(member_id, 0),
                "total_fines": to_money(fines.get(member_id)),
                "membership_start_date": members[member_id].membership_start_date,
            }
            for member_id, checkouts in ranked
        ]

    async def overdue_analysis(
        self, from_date: date | None = None, to_date: date | None = None,
    ) -> dict[str, Any]:
        """Open loans past due, optionally limited to those due inside the range."""
        now = datetime.now(timezone.utc)
        start, end = day_range(from_date, to_date)
        loans = [
            t for t in await self.transactions.all_overdue(now)
            if in_range(t.due_date, start, end)
        ]
        rate, cap = self.settings.daily_fine_rate, self.settings.max_overdue_fine

        days_by_loan = {t.id: days_overdue(t.due_date, now) for t in loans}
        per_member: dict[int, list[Transaction]] = defaultdict(list)
        for t in loans:
            per_member[t.member_id].append(t)

        def accrued(items: list[Transaction]) -> Decimal:
            return sum(
                (overdue_fine(days_by_loan[t.id], rate, cap) for t in items),
                Decimal("0.00"),
            )

        buckets = Counter(overdue_bucket(days) for days in days_by_loan.values())
        members = sorted(
            (
                {
                    "member_id": member_id,
                    "member_name": items[0].member.full_name,
                    "overdue_count": len(items),
                    "total_fines": accrued(items),
                    "average_days_overdue": mean(days_by_loan[t.id] for t in items),
                }
                for member_id, items in per_member.items()
            ),
            key=lambda row: (-row["overdue_count"], -row["total_fines"], row["member_id"]),
        )
        logger.info(
            "Overdue analysis: %d loans across %d members", len(loans), len(per_member),
        )
        return {
            "from_date": from_date,
            "to_date": to_date,
            "total_overdue_books": len(loans),
            "total_overdue_members": len(per_member),
            "total_fines": accrued(loans),
            "average_days_overdue": mean(days_by_loan.values()),
            "overdue_patterns": [
                {
                    "pattern": label,
                    "count": buckets.get(label, 0),
                    "percentage": percentage(buckets.get(label, 0), len(loans)),
                }
                for label, _, _ in OVERDUE_BUCKETS
            ],
            "top_overdue_members": members[:TOP_OVERDUE_MEMBERS],
        }

    async def monthly_trends(self, year: int) -> dict[str, Any]:
        start, _ = month_range(year, 1)
        _, end = month_range(year, 12)
        borrowed = _by_month(await self.stats.values_between(Transaction.checkout_date, start, end))
        returned = _by_month(await self.stats.values_between(Transaction.return_date, start, end))
        joined = _by_month(await self.stats.values_between(Member.created_at, start, end))
        issued = _by_month(await self.stats.values_between(Fine.issue_date, start, end))
        collected: dict[int, Decimal] = defaultdict(lambda: Decimal("0.00"))
        for paid_at, amount in await self.stats.payments_between(start, end):
            collected[as_utc(paid_at).month] += to_money(amount)

        months = [
            {
                "month": month,
                "borrowed": borrowed.get(month, 0),
                "returned": returned.get(month, 0),
                "new_members": joined.get(month, 0),
                "fines_issued": issued.get(month, 0),
                "fines_collected": collected[month],
            }
            for month in range(1, 13)
        ]
        return {
            "year": year,
            "months": months,
            "total_borrowed": sum(m["borrowed"] for m in months),
            "total_returned": sum(m["returned"] for m in months),
            "total_new_members": sum(m["new_members"] for m in months),
            "total_fines_collected": sum(
                (m["fines_collected"] for m in months), Decimal("0.00"),
            ),
        }
