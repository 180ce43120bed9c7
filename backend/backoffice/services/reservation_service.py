"""Reservation Service — hold queue per book.

Invariants:
    - One open (Active/OnHold) reservation per member and book
    - expiry_date = reservation_date + reservation_hold_days
    - Cancel and fulfill only act on open reservations
    - expire_due() only touches Active reservations whose expiry has passed
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.config import Settings, get_settings
from backoffice.core.circulation_policy import (
    check_reservation_open, reservation_expiry,
)
from backoffice.core.domain_types import MemberStatus, ReservationStatus
from backoffice.core.errors import (
    BusinessRuleError, ConflictError, ResourceNotFoundError,
)
from backoffice.core.numbering import RESERVATION_PREFIX, business_number
from backoffice.core.paging import PageRequest
from backoffice.models import Reservation
from backoffice.repositories.catalog import BookRepository
from backoffice.repositories.circulation import ReservationRepository
from backoffice.repositories.people import MemberRepository

logger = logging.getLogger(__name__)


class ReservationService:
    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.reservations = ReservationRepository(db)
        self.books = BookRepository(db)
        self.members = MemberRepository(db)

    async def get(self, reservation_id: int) -> Reservation:
        reservation = await self.reservations.get_by_id(reservation_id)
        if reservation is None:
            raise ResourceNotFoundError("Reservation", reservation_id)
        return reservation

    async def create(
        self, book_id: int, member_id: int, priority: int = 1, notes: str | None = None,
    ) -> Reservation:
        if await self.books.get_by_id(book_id) is None:
            raise ResourceNotFoundError("Book", book_id)
        member = await self.members.get_by_id(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", member_id)
        if member.status != MemberStatus.ACTIVE:
            raise BusinessRuleError(
                f"Member status is {member.status}; only Active members can reserve",
                "MEMBER_NOT_ACTIVE",
            )
        if await self.reservations.has_open(book_id, member_id):
            raise ConflictError(
                "Member already has an active reservation for this book",
                "DUPLICATE_RESERVATION",
            )
        now = datetime.now(timezone.utc)
        reservation = Reservation(
            reservation_number=business_number(RESERVATION_PREFIX, now),
            book_id=book_id,
            member_id=member_id,
            reservation_date=now,
            expiry_date=reservation_expiry(now, self.settings.reservation_hold_days),
            status=ReservationStatus.ACTIVE.value,
            priority=priority,
            notes=notes,
        )
        await self.reservations.add(reservation)
        await self.db.commit()
        logger.info(
            "Reservation created",
            extra={"entity": "Reservation", "entity_id": reservation.id},
        )
        return await self.reservations.reload(reservation)

    async def cancel(self, reservation_id: int, reason: str | None = None) -> Reservation:
        reservation = await self._open(reservation_id, "cancelled")
        reservation.status = ReservationStatus.CANCELLED.value
        if reason:
            reservation.notes = reason
        await self.db.commit()
        return await self.reservations.reload(reservation)

    async def fulfill(self, reservation_id: int, notes: str | None = None) -> Reservation:
        reservation = await self._open(reservation_id, "fulfilled")
        reservation.status = ReservationStatus.FULFILLED.value
        reservation.fulfilled_date = datetime.now(timezone.utc)
        if notes:
            reservation.notes = notes
        await self.db.commit()
        return await self.reservations.reload(reservation)

    async def expire_due(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        due = await self.reservations.expired_as_of(now)
        for reservation in due:
            reservation.status = ReservationStatus.EXPIRED.value
        await self.db.commit()
        if due:
            logger.info("Expired %d reservation(s)", len(due))
        return len(due)

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.reservations.by_member(member_id, request)

    async def by_book(self, book_id: int, request: PageRequest):
        return await self.reservations.by_book(book_id, request)

    async def active(self, request: PageRequest):
        return await self.reservations.active(request)

    async def _open(self, reservation_id: int, action: str) -> Reservation:
        reservation = await self.get(reservation_id)
        violation = check_reservation_open(reservation.status, action)
        if violation is not None:
            raise BusinessRuleError(violation.message, violation.code)
        return reservation
