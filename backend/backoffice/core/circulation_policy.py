"""Circulation Policy — pure business rules for loans, fines, reservations and memberships.

Invariants:
    - All functions are PURE: no IO, no async, no DB; "now" is always an argument
    - check_* functions return a PolicyViolation on refusal, None when allowed
    - Money is Decimal quantized to cents; a fine never exceeds its configured cap
    - Naive datetimes (SQLite round-trips) are treated as UTC before comparison

Design Decisions:
    - Thresholds (loan limit, renewal limit, fine rate) arrive as arguments so the
      same rules serve settings-driven production and fixed-number tests
    - Overdue days count calendar days past the due date, not 24h blocks
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from backoffice.core.domain_types import (
    FineStatus, MemberStatus, OPEN_RESERVATION_STATUSES, PAYABLE_FINE_STATUSES,
    TransactionStatus,
)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class PolicyViolation:
    code: str
    message: str


def as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def to_money(value: Decimal | int | float | str | None) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


# --- Loans --------------------------------------------------------------------

def due_date_for(checkout: datetime, days: int) -> datetime:
    return as_utc(checkout) + timedelta(days=days)


def is_overdue(status: str, due_date: datetime, now: datetime) -> bool:
    return status == TransactionStatus.ACTIVE and as_utc(due_date) < as_utc(now)


def days_overdue(due_date: datetime, at: datetime) -> int:
    """Calendar days between due date and `at`; 0 when not late."""
    due, at = as_utc(due_date), as_utc(at)
    if at <= due:
        return 0
    return max((at.date() - due.date()).days, 1)


def overdue_fine(days_late: int, daily_rate: Decimal, cap: Decimal) -> Decimal:
    if days_late <= 0:
        return Decimal("0.00")
    return min(to_money(daily_rate) * days_late, to_money(cap)).quantize(CENT)


def check_book_available(available_copies: int) -> PolicyViolation | None:
    if available_copies <= 0:
        return PolicyViolation("BOOK_NOT_AVAILABLE", "Book is not available")
    return None


def check_member_can_borrow(
    status: str,
    current_books: int,
    max_books: int,
    fines_owed: Decimal,
    fine_limit: Decimal,
) -> PolicyViolation | None:
    if status != MemberStatus.ACTIVE:
        return PolicyViolation(
            "MEMBER_NOT_ACTIVE", f"Member status is {status}; only Active members can borrow",
        )
    if current_books >= max_books:
        return PolicyViolation(
            "BOOK_LIMIT_REACHED", "Member has reached maximum book limit",
        )
    if to_money(fines_owed) > to_money(fine_limit):
        return PolicyViolation(
            "FINE_LIMIT_EXCEEDED", "Member has outstanding fines above the allowed limit",
        )
    return None


def check_can_return(status: str) -> PolicyViolation | None:
    if status == TransactionStatus.RETURNED:
        return PolicyViolation("ALREADY_RETURNED", "Book has already been returned")
    return None


def check_can_renew(
    status: str,
    renewal_count: int,
    max_renewals: int,
    due_date: datetime,
    now: datetime,
    reserved_by_other: bool,
) -> PolicyViolation | None:
    if status != TransactionStatus.ACTIVE:
        return PolicyViolation(
            "NOT_RENEWABLE", "Only active transactions can be renewed",
        )
    if renewal_count >= max_renewals:
        return PolicyViolation(
            "RENEWAL_LIMIT_REACHED", f"Maximum of {max_renewals} renewals reached",
        )
    if is_overdue(status, due_date, now):
        return PolicyViolation(
            "LOAN_OVERDUE", "Overdue transactions cannot be renewed",
        )
    if reserved_by_other:
        return PolicyViolation(
            "BOOK_RESERVED", "Book is reserved by another member",
        )
    return None


# --- Fines --------------------------------------------------------------------

def check_fine_payable(status: str) -> PolicyViolation | None:
    if status not in PAYABLE_FINE_STATUSES:
        return PolicyViolation(
            "FINE_NOT_PAYABLE", f"Fine with status {status} cannot be paid",
        )
    return None


def check_fine_waivable(status: str) -> PolicyViolation | None:
    if status in (FineStatus.PAID, FineStatus.WAIVED, FineStatus.CANCELLED):
        return PolicyViolation(
            "FINE_NOT_WAIVABLE", f"Fine with status {status} cannot be waived",
        )
    return None


def apply_payment(
    amount: Decimal, already_paid: Decimal | None, payment: Decimal,
) -> tuple[Decimal, FineStatus, Decimal]:
    """Return (total paid, new status, portion applied against the balance)."""
    amount, paid = to_money(amount), to_money(already_paid)
    outstanding = max(amount - paid, Decimal("0.00"))
    applied = min(to_money(payment), outstanding)
    total = paid + to_money(payment)
    status = FineStatus.PAID if total >= amount else FineStatus.PARTIALLY_PAID
    return total, status, applied


def outstanding_balance(amount: Decimal, paid: Decimal | None) -> Decimal:
    return max(to_money(amount) - to_money(paid), Decimal("0.00"))


# --- Reservations ---------------------------------------------------------------

def reservation_expiry(reserved_at: datetime, hold_days: int) -> datetime:
    return as_utc(reserved_at) + timedelta(days=hold_days)


def check_reservation_open(status: str, action: str) -> PolicyViolation | None:
    if status not in OPEN_RESERVATION_STATUSES:
        return PolicyViolation(
            "RESERVATION_CLOSED", f"Reservation with status {status} cannot be {action}",
        )
    return None


# --- Membership -----------------------------------------------------------------

def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def extended_membership_end(current_end: date, today: date, months: int) -> date:
    """Extend from the later of the current end date and today."""
    return add_months(max(current_end, today), months)
