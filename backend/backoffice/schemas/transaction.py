"""Transaction Schemas — borrow/return/renew commands and loan responses."""

from datetime import datetime

from backoffice.core.domain_types import TransactionStatus, TransactionType
from backoffice.schemas.common import CamelModel, Money


class BorrowRequest(CamelModel):
    book_id: int
    member_id: int
    days: int | None = None
    notes: str | None = None
    processed_by_librarian_id: int | None = None


class ReturnRequest(CamelModel):
    transaction_id: int
    notes: str | None = None


class RenewRequest(CamelModel):
    transaction_id: int
    additional_days: int = 14
    notes: str | None = None


class TransactionResponse(CamelModel):
    id: int
    transaction_number: str
    book_id: int
    book_title: str | None = None
    member_id: int
    member_name: str | None = None
    type: TransactionType
    checkout_date: datetime
    due_date: datetime
    return_date: datetime | None = None
    status: TransactionStatus
    renewal_count: int
    max_renewals_allowed: int
    fine_amount: Money | None = None
    notes: str | None = None
    processed_by_librarian_id: int | None = None
    is_overdue: bool = False
    created_at: datetime


class TransactionStats(CamelModel):
    total_transactions: int
    active_transactions: int
    overdue_transactions: int
    completed_transactions: int
    total_fines: Money
    average_borrow_duration: float
