"""Fine Schemas — settlement commands, fine responses and summaries."""

from datetime import datetime
from decimal import Decimal

from backoffice.core.domain_types import FineStatus, FineType
from backoffice.schemas.common import CamelModel, Money


class PayFineRequest(CamelModel):
    amount: Decimal
    payment_method: str
    reference_number: str | None = None
    notes: str | None = None


class WaiveFineRequest(CamelModel):
    reason: str
    notes: str | None = None


class FineResponse(CamelModel):
    id: int
    fine_number: str
    transaction_id: int | None = None
    transaction_number: str | None = None
    member_id: int
    member_name: str | None = None
    type: FineType
    amount: Money
    issue_date: datetime
    due_date: datetime | None = None
    status: FineStatus
    paid_date: datetime | None = None
    paid_amount: Money | None = None
    payment_method: str | None = None
    description: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class MemberFineSummary(CamelModel):
    member_id: int
    member_name: str
    total_fines: int
    pending_fines: int
    paid_fines: int
    total_amount: Money
    pending_amount: Money
    paid_amount: Money


class OverallFineSummary(CamelModel):
    total_fines: int
    pending_fines: int
    paid_fines: int
    total_amount: Money
    pending_amount: Money
    paid_amount: Money
    average_fine_amount: Money
