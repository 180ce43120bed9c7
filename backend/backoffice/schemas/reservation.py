"""Reservation Schemas."""

from datetime import datetime

from backoffice.core.domain_types import ReservationStatus
from backoffice.schemas.common import CamelModel


class ReservationCreate(CamelModel):
    book_id: int
    member_id: int
    priority: int = 1
    notes: str | None = None


class CancelReservationRequest(CamelModel):
    reason: str | None = None


class FulfillReservationRequest(CamelModel):
    notes: str | None = None


class ReservationResponse(CamelModel):
    id: int
    reservation_number: str
    book_id: int
    book_title: str | None = None
    member_id: int
    member_name: str | None = None
    reservation_date: datetime
    expiry_date: datetime
    notified_date: datetime | None = None
    status: ReservationStatus
    priority: int
    notes: str | None = None
    fulfilled_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
