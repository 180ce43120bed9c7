"""Circulation Handlers — loans, reservations and fines.

Invariants:
    - Commands carry ids; the services load the entities and apply circulation policy
    - Business refusals surface as BusinessRuleError from the services, never as None
"""

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.paging import PageRequest
from backoffice.core.validate_circulation import (
    BORROW_VALIDATOR, CANCEL_RESERVATION_VALIDATOR, PAY_FINE_VALIDATOR,
    RENEW_VALIDATOR, RESERVATION_VALIDATOR, RETURN_VALIDATOR, WAIVE_FINE_VALIDATOR,
)
from backoffice.handlers.common import ensure_valid, to_page
from backoffice.mapping.profiles import mapper
from backoffice.schemas.common import MessageResponse, PagedResult
from backoffice.schemas.fine import (
    FineResponse, MemberFineSummary, OverallFineSummary, PayFineRequest,
    WaiveFineRequest,
)
from backoffice.schemas.reservation import (
    CancelReservationRequest, FulfillReservationRequest, ReservationCreate,
    ReservationResponse,
)
from backoffice.schemas.transaction import (
    BorrowRequest, RenewRequest, ReturnRequest, TransactionResponse,
    TransactionStats,
)
from backoffice.services.circulation_service import CirculationService
from backoffice.services.fine_service import FineService
from backoffice.services.reservation_service import ReservationService


class TransactionHandlers:
    def __init__(self, db: AsyncSession):
        self.service = CirculationService(db)

    async def borrow(self, command: BorrowRequest) -> TransactionResponse:
        ensure_valid(BORROW_VALIDATOR, command)
        transaction = await self.service.borrow(
            command.book_id, command.member_id, command.days,
            command.notes, command.processed_by_librarian_id,
        )
        return mapper.map(transaction, TransactionResponse)

    async def return_book(self, command: ReturnRequest) -> TransactionResponse:
        ensure_valid(RETURN_VALIDATOR, command)
        transaction = await self.service.return_book(command.transaction_id, command.notes)
        return mapper.map(transaction, TransactionResponse)

    async def renew(self, command: RenewRequest) -> TransactionResponse:
        ensure_valid(RENEW_VALIDATOR, command)
        transaction = await self.service.renew(
            command.transaction_id, command.additional_days, command.notes,
        )
        return mapper.map(transaction, TransactionResponse)

    async def get(self, transaction_id: int) -> TransactionResponse:
        return mapper.map(await self.service.get(transaction_id), TransactionResponse)

    async def by_member(
        self, member_id: int, request: PageRequest,
    ) -> PagedResult[TransactionResponse]:
        return to_page(
            await self.service.by_member(member_id, request), request, TransactionResponse,
        )

    async def by_book(
        self, book_id: int, request: PageRequest,
    ) -> PagedResult[TransactionResponse]:
        return to_page(
            await self.service.by_book(book_id, request), request, TransactionResponse,
        )

    async def overdue(self, request: PageRequest) -> PagedResult[TransactionResponse]:
        return to_page(await self.service.overdue(request), request, TransactionResponse)

    async def active(self, request: PageRequest) -> PagedResult[TransactionResponse]:
        return to_page(await self.service.active(request), request, TransactionResponse)

    async def stats(self) -> TransactionStats:
        return TransactionStats(**await self.service.stats())


class ReservationHandlers:
    def __init__(self, db: AsyncSession):
        self.service = ReservationService(db)

    async def create(self, command: ReservationCreate) -> ReservationResponse:
        ensure_valid(RESERVATION_VALIDATOR, command)
        reservation = await self.service.create(
            command.book_id, command.member_id, command.priority, command.notes,
        )
        return mapper.map(reservation, ReservationResponse)

    async def cancel(
        self, reservation_id: int, command: CancelReservationRequest,
    ) -> ReservationResponse:
        ensure_valid(CANCEL_RESERVATION_VALIDATOR, command)
        reservation = await self.service.cancel(reservation_id, command.reason)
        return mapper.map(reservation, ReservationResponse)

    async def fulfill(
        self, reservation_id: int, command: FulfillReservationRequest,
    ) -> ReservationResponse:
        reservation = await self.service.fulfill(reservation_id, command.notes)
        return mapper.map(reservation, ReservationResponse)

    async def get(self, reservation_id: int) -> ReservationResponse:
        return mapper.map(await self.service.get(reservation_id), ReservationResponse)

    async def by_member(
        self, member_id: int, request: PageRequest,
    ) -> PagedResult[ReservationResponse]:
        return to_page(
            await self.service.by_member(member_id, request), request, ReservationResponse,
        )

    async def by_book(
        self, book_id: int, request: PageRequest,
    ) -> PagedResult[ReservationResponse]:
        return to_page(
            await self.service.by_book(book_id, request), request, ReservationResponse,
        )

    async def active(self, request: PageRequest) -> PagedResult[ReservationResponse]:
        return to_page(await self.service.active(request), request, ReservationResponse)

    async def expire_due(self) -> MessageResponse:
        expired = await self.service.expire_due()
        return MessageResponse(message=f"{expired} reservation(s) expired", affected=expired)


class FineHandlers:
    def __init__(self, db: AsyncSession):
        self.service = FineService(db)

    async def get(self, fine_id: int) -> FineResponse:
        return mapper.map(await self.service.get(fine_id), FineResponse)

    async def by_member(self, member_id: int, request: PageRequest) -> PagedResult[FineResponse]:
        return to_page(await self.service.by_member(member_id, request), request, FineResponse)

    async def pending(self, request: PageRequest) -> PagedResult[FineResponse]:
        return to_page(await self.service.pending(request), request, FineResponse)

    async def overdue(self, request: PageRequest) -> PagedResult[FineResponse]:
        return to_page(await self.service.overdue(request), request, FineResponse)

    async def pay(self, fine_id: int, command: PayFineRequest) -> FineResponse:
        ensure_valid(PAY_FINE_VALIDATOR, command)
        fine = await self.service.pay(
            fine_id, command.amount, command.payment_method,
            command.reference_number, command.notes,
        )
        return mapper.map(fine, FineResponse)

    async def waive(self, fine_id: int, command: WaiveFineRequest) -> FineResponse:
        ensure_valid(WAIVE_FINE_VALIDATOR, command)
        fine = await self.service.waive(fine_id, command.reason, command.notes)
        return mapper.map(fine, FineResponse)

    async def member_summary(self, member_id: int) -> MemberFineSummary:
        return MemberFineSummary(**await self.service.member_summary(member_id))

    async def overall_summary(self) -> OverallFineSummary:
        return OverallFineSummary(**await self.service.overall_summary())
