"""Circulation Repositories — transactions, reservations and fines.

Invariants:
    - "Open loan" means status Active; overdue is an open loan past its due date
    - Reservation queues order by (priority, reservation_date)
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select

from backoffice.core.domain_types import (
    OPEN_RESERVATION_STATUSES, PAYABLE_FINE_STATUSES,
    ReservationStatus, TransactionStatus,
)
from backoffice.core.paging import PageRequest
from backoffice.models import Fine, Reservation, Transaction
from backoffice.repositories.base import BaseRepository

_OPEN_RESERVATIONS = [s.value for s in OPEN_RESERVATION_STATUSES]
_PAYABLE_FINES = [s.value for s in PAYABLE_FINE_STATUSES]


class TransactionRepository(BaseRepository[Transaction]):
    model = Transaction

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.page(
            request, Transaction.member_id == member_id,
            order_by=[Transaction.checkout_date.desc()],
        )

    async def by_book(self, book_id: int, request: PageRequest):
        return await self.page(
            request, Transaction.book_id == book_id,
            order_by=[Transaction.checkout_date.desc()],
        )

    async def active(self, request: PageRequest):
        return await self.page(
            request, Transaction.status == TransactionStatus.ACTIVE.value,
            order_by=[Transaction.due_date],
        )

    async def overdue(self, now: datetime, request: PageRequest):
        return await self.page(
            request,
            Transaction.status == TransactionStatus.ACTIVE.value,
            Transaction.due_date < now,
            order_by=[Transaction.due_date],
        )

    async def all_overdue(self, now: datetime) -> list[Transaction]:
        return await self.find_all(
            Transaction.status == TransactionStatus.ACTIVE.value,
            Transaction.due_date < now,
            order_by=[Transaction.due_date],
        )

    async def count_overdue(self, now: datetime) -> int:
        return await self.count(
            Transaction.status == TransactionStatus.ACTIVE.value,
            Transaction.due_date < now,
        )

    async def count_due_between(self, start: datetime, end: datetime) -> int:
        return await self.count(
            Transaction.status == TransactionStatus.ACTIVE.value,
            Transaction.due_date >= start,
            Transaction.due_date <= end,
        )

    async def count_by_status(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Transaction.status, func.count(Transaction.id))
            .group_by(Transaction.status),
        )
        return {str(s): int(n) for s, n in result.all()}

    async def total_fine_amount(self) -> Decimal:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Transaction.fine_amount), 0)),
        )
        return Decimal(str(result.scalar_one()))

    async def returned(self) -> list[Transaction]:
        return await self.find_all(
            Transaction.status == TransactionStatus.RETURNED.value,
            Transaction.return_date.is_not(None),
        )

    async def checked_out_between(
        self, start: datetime | None, end: datetime | None,
    ) -> list[Transaction]:
        criteria = []
        if start is not None:
            criteria.append(Transaction.checkout_date >= start)
        if end is not None:
            criteria.append(Transaction.checkout_date <= end)
        return await self.find_all(*criteria, order_by=[Transaction.checkout_date])

    async def count_active_for_member(self, member_id: int) -> int:
        return await self.count(
            Transaction.member_id == member_id,
            Transaction.status == TransactionStatus.ACTIVE.value,
        )

    async def count_active_for_book(self, book_id: int) -> int:
        return await self.count(
            Transaction.book_id == book_id,
            Transaction.status == TransactionStatus.ACTIVE.value,
        )


class ReservationRepository(BaseRepository[Reservation]):
    model = Reservation

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.page(
            request, Reservation.member_id == member_id,
            order_by=[Reservation.reservation_date.desc()],
        )

    async def by_book(self, book_id: int, request: PageRequest):
        return await self.page(
            request, Reservation.book_id == book_id,
            order_by=[Reservation.priority, Reservation.reservation_date],
        )

    async def active(self, request: PageRequest):
        return await self.page(
            request, Reservation.status == ReservationStatus.ACTIVE.value,
            order_by=[Reservation.priority, Reservation.reservation_date],
        )

    async def has_open(self, book_id: int, member_id: int) -> bool:
        return await self.exists(
            Reservation.book_id == book_id,
            Reservation.member_id == member_id,
            Reservation.status.in_(_OPEN_RESERVATIONS),
        )

    async def has_active_by_other(self, book_id: int, member_id: int) -> bool:
        return await self.exists(
            Reservation.book_id == book_id,
            Reservation.member_id != member_id,
            Reservation.status == ReservationStatus.ACTIVE.value,
        )

    async def next_in_queue(self, book_id: int) -> Reservation | None:
        """Earliest Active reservation by (priority, reservation date)."""
        candidates = await self.find_all(
            Reservation.book_id == book_id,
            Reservation.status == ReservationStatus.ACTIVE.value,
            order_by=[Reservation.priority, Reservation.reservation_date, Reservation.id],
            limit=1,
        )
        return candidates[0] if candidates else None

    async def expired_as_of(self, now: datetime) -> list[Reservation]:
        return await self.find_all(
            Reservation.status == ReservationStatus.ACTIVE.value,
            Reservation.expiry_date < now,
        )

    async def count_expiring_between(self, start: datetime, end: datetime) -> int:
        return await self.count(
            Reservation.status == ReservationStatus.ACTIVE.value,
            Reservation.expiry_date >= start,
            Reservation.expiry_date <= end,
        )


class FineRepository(BaseRepository[Fine]):
    model = Fine

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.page(
            request, Fine.member_id == member_id,
            order_by=[Fine.issue_date.desc()],
        )

    async def all_for_member(self, member_id: int) -> list[Fine]:
        return await self.find_all(Fine.member_id == member_id)

    async def pending(self, request: PageRequest):
        return await self.page(
            request, Fine.status.in_(_PAYABLE_FINES),
            order_by=[Fine.issue_date],
        )

    async def overdue(self, now: datetime, request: PageRequest):
        return await self.page(
            request,
            Fine.status.in_(_PAYABLE_FINES),
            Fine.due_date.is_not(None),
            Fine.due_date < now,
            order_by=[Fine.due_date],
        )

    async def totals_by_status(self) -> dict[str, tuple[int, Decimal, Decimal]]:
        """status -> (count, sum of amount, sum of paid amount)."""
        result = await self.db.execute(
            select(
                Fine.status,
                func.count(Fine.id),
                func.coalesce(func.sum(Fine.amount), 0),
                func.coalesce(func.sum(Fine.paid_amount), 0),
            ).group_by(Fine.status),
        )
        return {
            str(s): (int(n), Decimal(str(amount)), Decimal(str(paid)))
            for s, n, amount, paid in result.all()
        }

    async def issued_between(
        self, start: datetime | None, end: datetime | None,
    ) -> list[Fine]:
        criteria = []
        if start is not None:
            criteria.append(Fine.issue_date >= start)
        if end is not None:
            criteria.append(Fine.issue_date <= end)
        return await self.find_all(*criteria, order_by=[Fine.issue_date])

