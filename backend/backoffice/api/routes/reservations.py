"""Reservation Routes."""

from fastapi import APIRouter, Depends, status

from backoffice.api.dependencies import get_reservation_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_circulation import ReservationHandlers
from backoffice.schemas.common import MessageResponse, PagedResult
from backoffice.schemas.reservation import (
    CancelReservationRequest, FulfillReservationRequest, ReservationCreate,
    ReservationResponse,
)

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


@router.post(
    "", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    body: ReservationCreate,
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.create(body)


@router.get("/active", response_model=PagedResult[ReservationResponse])
async def list_active_reservations(
    paging: PageRequest = Depends(page_request),
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.active(paging)


@router.post("/expire", response_model=MessageResponse)
async def expire_reservations(
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    """Mark Active reservations past their expiry date as Expired."""
    return await handlers.expire_due()


@router.get("/member/{member_id}", response_model=PagedResult[ReservationResponse])
async def list_member_reservations(
    member_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.by_member(member_id, paging)


@router.get("/book/{book_id}", response_model=PagedResult[ReservationResponse])
async def list_book_reservations(
    book_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.by_book(book_id, paging)


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: int,
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.get(reservation_id)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: int,
    body: CancelReservationRequest | None = None,
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.cancel(reservation_id, body or CancelReservationRequest())


@router.post("/{reservation_id}/fulfill", response_model=ReservationResponse)
async def fulfill_reservation(
    reservation_id: int,
    body: FulfillReservationRequest | None = None,
    handlers: ReservationHandlers = Depends(get_reservation_handlers),
):
    return await handlers.fulfill(reservation_id, body or FulfillReservationRequest())
