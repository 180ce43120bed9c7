"""Circulation Policy — verifies the pure loan, fine, reservation and membership rules."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from backoffice.core.circulation_policy import (
    add_months, apply_payment, check_book_available, check_can_renew,
    check_can_return, check_fine_payable, check_fine_waivable,
    check_member_can_borrow, check_reservation_open, days_overdue, due_date_for,
    extended_membership_end, is_overdue,
    outstanding_balance, overdue_fine, reservation_expiry, to_money,
)
from backoffice.core.domain_types import FineStatus

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


# --- loans --------------------------------------------------------------------

def test_due_date_adds_days():
    assert due_date_for(NOW, 14) == NOW + timedelta(days=14)


def test_naive_datetimes_are_treated_as_utc():
    naive_due = datetime(2026, 3, 9, 12, 0)
    assert is_overdue("Active", naive_due, NOW)


def test_only_active_loans_are_overdue():
    past = NOW - timedelta(days=1)
    assert is_overdue("Active", past, NOW)
    assert not is_overdue("Returned", past, NOW)
    assert not is_overdue("Active", NOW + timedelta(hours=1), NOW)


def test_days_overdue_counts_calendar_days():
    assert days_overdue(NOW, NOW) == 0
    assert days_overdue(NOW, NOW - timedelta(days=2)) == 0
    assert days_overdue(NOW, NOW + timedelta(hours=1)) == 1
    assert days_overdue(NOW, NOW + timedelta(days=4)) == 4


def test_overdue_fine_is_rate_times_days_and_capped():
    assert overdue_fine(0, Decimal("0.25"), Decimal("20")) == Decimal("0.00")
    assert overdue_fine(4, Decimal("0.25"), Decimal("20")) == Decimal("1.00")
    assert overdue_fine(1000, Decimal("0.25"), Decimal("20")) == Decimal("20.00")


def test_book_must_have_copies():
    assert check_book_available(0).code == "BOOK_NOT_AVAILABLE"
    assert check_book_available(0).message == "Book is not available"
    assert check_book_available(1) is None


def test_member_borrow_checks():
    ok = check_member_can_borrow("Active", 0, 5, Decimal("0"), Decimal("50"))
    assert ok is None
    assert check_member_can_borrow(
        "Suspended", 0, 5, Decimal("0"), Decimal("50"),
    ).code == "MEMBER_NOT_ACTIVE"
    limit = check_member_can_borrow("Active", 5, 5, Decimal("0"), Decimal("50"))
    assert limit.message == "Member has reached maximum book limit"
    assert check_member_can_borrow(
        "Active", 0, 5, Decimal("50.01"), Decimal("50"),
    ).code == "FINE_LIMIT_EXCEEDED"
    assert check_member_can_borrow("Active", 0, 5, Decimal("50"), Decimal("50")) is None


def test_return_only_once():
    assert check_can_return("Returned").code == "ALREADY_RETURNED"
    assert check_can_return("Active") is None


def test_renewal_checks_in_order():
    future = NOW + timedelta(days=3)
    assert check_can_renew("Active", 0, 2, future, NOW, False) is None
    assert check_can_renew("Returned", 0, 2, future, NOW, False).code == "NOT_RENEWABLE"
    assert check_can_renew("Active", 2, 2, future, NOW, False).code == "RENEWAL_LIMIT_REACHED"
    assert check_can_renew(
        "Active", 0, 2, NOW - timedelta(days=1), NOW, False,
    ).code == "LOAN_OVERDUE"
    assert check_can_renew("Active", 0, 2, future, NOW, True).code == "BOOK_RESERVED"


# --- fines --------------------------------------------------------------------

def test_payable_and_waivable_statuses():
    for status in ("Pending", "Unpaid", "Overdue", "PartiallyPaid"):
        assert check_fine_payable(status) is None
    assert check_fine_payable("Paid").code == "FINE_NOT_PAYABLE"
    assert check_fine_payable("Waived").code == "FINE_NOT_PAYABLE"
    assert check_fine_waivable("Paid").code == "FINE_NOT_WAIVABLE"
    assert check_fine_waivable("Pending") is None


def test_partial_then_full_payment():
    total, status, applied = apply_payment(Decimal("5.00"), None, Decimal("2.00"))
    assert (total, status, applied) == (
        Decimal("2.00"), FineStatus.PARTIALLY_PAID, Decimal("2.00"),
    )
    total, status, applied = apply_payment(Decimal("5.00"), total, Decimal("4.00"))
    assert total == Decimal("6.00")
    assert status == FineStatus.PAID
    assert applied == Decimal("3.00")


def test_outstanding_balance_never_negative():
    assert outstanding_balance(Decimal("5"), Decimal("2")) == Decimal("3.00")
    assert outstanding_balance(Decimal("5"), Decimal("7")) == Decimal("0.00")
    assert outstanding_balance(Decimal("5"), None) == Decimal("5.00")


def test_to_money_quantizes():
    assert to_money(None) == Decimal("0.00")
    assert to_money(1.005) == Decimal("1.01")
    assert to_money("2") == Decimal("2.00")


# --- reservations ---------------------------------------------------------------

def test_reservation_expiry():
    assert reservation_expiry(NOW, 7) == NOW + timedelta(days=7)


def test_reservation_open_statuses():
    assert check_reservation_open("Active", "cancelled") is None
    assert check_reservation_open("OnHold", "fulfilled") is None
    refused = check_reservation_open("Expired", "cancelled")
    assert refused.code == "RESERVATION_CLOSED"
    assert refused.message == "Reservation with status Expired cannot be cancelled"


# --- membership -----------------------------------------------------------------

def test_add_months_clamps_day():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)


def test_extension_starts_from_later_date():
    today = date(2026, 3, 10)
    assert extended_membership_end(date(2026, 1, 1), today, 2) == date(2026, 5, 10)
    assert extended_membership_end(date(2026, 6, 1), today, 2) == date(2026, 8, 1)
