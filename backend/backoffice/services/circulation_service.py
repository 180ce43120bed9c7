"""Circulation Service — borrow, return and renew.

Invariants:
    - Borrow: book available, member Active, under loan limit and fine limit;
      available_copies - 1 and current_books_count + 1 in the same commit
    - Return: never twice; available_copies + 1 (bounded by total), current_books_count - 1
      (never below 0); a late return accrues a capped overdue fine
    - Renew: Active, under renewal limit, not overdue, not reserved by another member
    - Every command appends an audit entry

Design Decisions:
    - Rule checks live in core/circulation_policy.py; this service loads state,
      applies the verdict and persists
    - The next reservation in the queue is notified when a copy comes back
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.config import Settings, get_settings
from backoffice.core.circulation_policy import (
    PolicyViolation, as_utc, check_book_available, check_can_renew,
    check_can_return, check_member_can_borrow, days_overdue, due_date_for,
    overdue_fine, to_money,
)
from backoffice.core.domain_types import (
    AuditAction, FineStatus, FineType, NotificationType, TransactionStatus,
    TransactionType,
)
from backoffice.core.errors import BusinessRuleError, ResourceNotFoundError
from backoffice.core.numbering import (
    FINE_PREFIX, TRANSACTION_PREFIX, business_number,
)
from backoffice.core.paging import PageRequest
from backoffice.models import Fine, Transaction
from backoffice.repositories.catalog import BookRepository
from backoffice.repositories.circulation import (
    FineRepository, ReservationRepository, TransactionRepository,
)
from backoffice.repositories.people import MemberRepository
from backoffice.services.audit_service import AuditService, snapshot
from backoffice.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def _refuse(violation: PolicyViolation | None) -> None:
    if violation is not None:
        raise BusinessRuleError(violation.message, violation.code)


class CirculationService:
    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.transactions = TransactionRepository(db)
        self.books = BookRepository(db)
        self.members = MemberRepository(db)
        self.reservations = ReservationRepository(db)
        self.fines = FineRepository(db)
        self.notifications = NotificationService(db)
        self.audit = AuditService(db)

    async def get(self, transaction_id: int) -> Transaction:
        transaction = await self.transactions.get_by_id(transaction_id)
        if transaction is None:
            raise ResourceNotFoundError("Transaction", transaction_id)
        return transaction

    async def borrow(
        self,
        book_id: int,
        member_id: int,
        days: int | None = None,
        notes: str | None = None,
        librarian_id: int | None = None,
    ) -> Transaction:
        book = await self.books.get_by_id(book_id)
        if book is None:
            raise ResourceNotFoundError("Book", book_id)
        member = await self.members.get_by_id(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", member_id)

        _refuse(check_book_available(book.available_copies))
        _refuse(check_member_can_borrow(
            member.status, member.current_books_count, member.max_books_allowed,
            member.total_fines_owed, member.max_fine_limit,
        ))

        now = datetime.now(timezone.utc)
        transaction = Transaction(
            transaction_number=business_number(TRANSACTION_PREFIX, now),
            book_id=book.id,
            member_id=member.id,
            type=TransactionType.BORROW.value,
            checkout_date=now,
            due_date=due_date_for(now, days or self.settings.default_loan_days),
            status=TransactionStatus.ACTIVE.value,
            renewal_count=0,
            max_renewals_allowed=self.settings.max_renewals,
            notes=notes,
            processed_by_librarian_id=librarian_id,
        )
        book.available_copies -= 1
        member.current_books_count += 1
        await self.transactions.add(transaction)
        self.audit.record(
            AuditAction.BORROW, "Transaction", transaction.id,
            new_values=snapshot(transaction),
        )
        await self.db.commit()
        logger.info(
            "Book borrowed",
            extra={"entity": "Transaction", "entity_id": transaction.id, "action": "Borrow"},
        )
        return await self.transactions.reload(transaction)

    async def return_book(
        self, transaction_id: int, notes: str | None = None,
    ) -> Transaction:
        transaction = await self.get(transaction_id)
        _refuse(check_can_return(transaction.status))
        old_values = snapshot(transaction)

        now = datetime.now(timezone.utc)
        transaction.return_date = now
        transaction.status = TransactionStatus.RETURNED.value
        if notes:
            transaction.notes = notes

        book = transaction.book
        member = transaction.member
        book.available_copies = min(book.available_copies + 1, book.total_copies)
        member.current_books_count = max(member.current_books_count - 1, 0)

        late_days = days_overdue(transaction.due_date, now)
        fine_amount = overdue_fine(
            late_days, self.settings.daily_fine_rate, self.settings.max_overdue_fine,
        )
        if fine_amount > 0:
            self._issue_overdue_fine(transaction, fine_amount, late_days, now)

        await self._notify_next_reservation(book.id, book.title)
        await self.db.flush()
        self.audit.record(
            AuditAction.RETURN, "Transaction", transaction.id,
            old_values=old_values, new_values=snapshot(transaction),
        )
        await self.db.commit()
        return await self.transactions.reload(transaction)

    async def renew(
        self, transaction_id: int, additional_days: int, notes: str | None = None,
    ) -> Transaction:
        transaction = await self.get(transaction_id)
        now = datetime.now(timezone.utc)
        reserved = await self.reservations.has_active_by_other(
            transaction.book_id, transaction.member_id,
        )
        _refuse(check_can_renew(
            transaction.status, transaction.renewal_count,
            transaction.max_renewals_allowed, transaction.due_date, now, reserved,
        ))
        old_values = snapshot(transaction)
        transaction.due_date = as_utc(transaction.due_date) + timedelta(days=additional_days)
        transaction.renewal_count += 1
        if notes:
            transaction.notes = notes
        await self.db.flush()
        self.audit.record(
            AuditAction.RENEW, "Transaction", transaction.id,
            old_values=old_values, new_values=snapshot(transaction),
        )
        await self.db.commit()
        return await self.transactions.reload(transaction)

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.transactions.by_member(member_id, request)

    async def by_book(self, book_id: int, request: PageRequest):
        return await self.transactions.by_book(book_id, request)

    async def overdue(self, request: PageRequest):
        return await self.transactions.overdue(datetime.now(timezone.utc), request)

    async def active(self, request: PageRequest):
        return await self.transactions.active(request)

    async def stats(self) -> dict[str, Any]:
        by_status = await self.transactions.count_by_status()
        returned = await self.transactions.returned()
        durations = [
            (as_utc(t.return_date) - as_utc(t.checkout_date)).total_seconds() / 86400
            for t in returned
        ]
        return {
            "total_transactions": sum(by_status.values()),
            "active_transactions": by_status.get(TransactionStatus.ACTIVE.value, 0),
            "overdue_transactions": await self.transactions.count_overdue(
                datetime.now(timezone.utc),
            ),
            "completed_transactions": by_status.get(TransactionStatus.RETURNED.value, 0),
            "total_fines": to_money(await self.transactions.total_fine_amount()),
            "average_borrow_duration": (
                round(sum(durations) / len(durations), 2) if durations else 0.0
            ),
        }

    def _issue_overdue_fine(
        self, transaction: Transaction, amount, late_days: int, now: datetime,
    ) -> None:
        member = transaction.member
        transaction.fine_amount = amount
        member.total_fines_owed = to_money(member.total_fines_owed) + amount
        fine = Fine(
            fine_number=business_number(FINE_PREFIX, now),
            transaction_id=transaction.id,
            member_id=member.id,
            type=FineType.OVERDUE_BOOK.value,
            amount=amount,
            issue_date=now,
            due_date=now + timedelta(days=self.settings.fine_due_days),
            status=FineStatus.PENDING.value,
            description=f"Returned {late_days} day(s) late",
        )
        self.db.add(fine)
        self.notifications.notify(
            member.id, NotificationType.FINE_ISSUED, "Fine issued",
            f"A fine of {amount} was issued for the late return of "
            f"'{transaction.book.title}'.",
            transaction.id, "Transaction",
        )
        logger.info(
            "Overdue fine issued",
            extra={"entity": "Transaction", "entity_id": transaction.id},
        )

    async def _notify_next_reservation(self, book_id: int, book_title: str) -> None:
        reservation = await self.reservations.next_in_queue(book_id)
        if reservation is None:
            return
        reservation.notified_date = datetime.now(timezone.utc)
        self.notifications.notify(
            reservation.member_id, NotificationType.BOOK_AVAILABLE, "Book available",
            f"'{book_title}' is available for pickup.",
            reservation.id, "Reservation",
        )
