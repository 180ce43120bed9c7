"""Rule Sets — verifies the per-DTO validators against their documented limits."""

from datetime import date, datetime, timezone
from decimal import Decimal

from backoffice.core.validate_catalog import (
    BOOK_VALIDATOR, CATEGORY_VALIDATOR, REVIEW_CREATE_VALIDATOR,
)
from backoffice.core.validate_circulation import (
    BORROW_VALIDATOR, PAY_FINE_VALIDATOR, RENEW_VALIDATOR, RESERVATION_VALIDATOR,
)
from backoffice.core.validate_operations import (
    ALERT_CREATE_VALIDATOR, EXPORT_VALIDATOR, IMPORT_VALIDATOR, MARK_READ_VALIDATOR,
    REPORT_VALIDATOR,
)
from backoffice.core.validate_people import (
    EXTEND_MEMBERSHIP_VALIDATOR, LIBRARIAN_CREATE_VALIDATOR, MEMBER_VALIDATOR,
)
from backoffice.schemas.alert import AlertCreate
from backoffice.schemas.book import BookCreate
from backoffice.schemas.category import CategoryCreate
from backoffice.schemas.fine import PayFineRequest
from backoffice.schemas.import_export import ExportRequest, ImportRequest
from backoffice.schemas.librarian import LibrarianCreate
from backoffice.schemas.member import ExtendMembershipRequest, MemberCreate
from backoffice.schemas.notification import MarkReadRequest
from backoffice.schemas.reservation import ReservationCreate
from backoffice.schemas.review import ReviewCreate
from backoffice.schemas.report import GenerateReportRequest
from backoffice.schemas.transaction import BorrowRequest, RenewRequest

NOW = datetime(2026, 5, 1, tzinfo=timezone.utc)


def _errors(validator, dto) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for field, message in validator.validate(dto, NOW):
        grouped.setdefault(field, []).append(message)
    return grouped


def _book(**overrides) -> BookCreate:
    data = dict(
        isbn="9780141439518", title="Emma", author="Jane Austen",
        category_id=1, total_copies=2, available_copies=2,
    )
    data.update(overrides)
    return BookCreate(**data)


def _member(**overrides) -> MemberCreate:
    data = dict(
        membership_number="M-1", first_name="Ada", last_name="Lovelace",
        email="ada@example.org",
        membership_start_date=date(2026, 1, 1), membership_end_date=date(2027, 1, 1),
    )
    data.update(overrides)
    return MemberCreate(**data)


# --- catalog ------------------------------------------------------------------

def test_valid_book_passes():
    assert _errors(BOOK_VALIDATOR, _book()) == {}


def test_book_empty_isbn_reports_required():
    errors = _errors(BOOK_VALIDATOR, _book(isbn=""))
    assert "'ISBN' is required." in errors["ISBN"]


def test_book_isbn_length_bounds():
    assert "ISBN" in _errors(BOOK_VALIDATOR, _book(isbn="123456789"))
    assert "ISBN" in _errors(BOOK_VALIDATOR, _book(isbn="12345678901234"))
    assert _errors(BOOK_VALIDATOR, _book(isbn="1234567890")) == {}


def test_book_available_cannot_exceed_total():
    errors = _errors(BOOK_VALIDATOR, _book(total_copies=1, available_copies=2))
    assert errors == {"AvailableCopies": ["'AvailableCopies' cannot exceed 'TotalCopies'."]}


def test_book_negative_counts_and_price():
    errors = _errors(
        BOOK_VALIDATOR,
        _book(total_copies=-1, available_copies=-2, page_count=-1, price=Decimal("-1")),
    )
    assert set(errors) == {"TotalCopies", "AvailableCopies", "PageCount", "Price"}


def test_book_category_must_be_positive():
    assert "CategoryId" in _errors(BOOK_VALIDATOR, _book(category_id=0))


def test_category_rules():
    assert _errors(CATEGORY_VALIDATOR, CategoryCreate(name="Poetry")) == {}
    errors = _errors(CATEGORY_VALIDATOR, CategoryCreate(name="", parent_category_id=0))
    assert set(errors) == {"Name", "ParentCategoryId"}


def test_review_rating_range():
    assert "Rating" in _errors(
        REVIEW_CREATE_VALIDATOR, ReviewCreate(book_id=1, member_id=1, rating=6),
    )
    assert _errors(
        REVIEW_CREATE_VALIDATOR, ReviewCreate(book_id=1, member_id=1, rating=5),
    ) == {}


# --- people -------------------------------------------------------------------

def test_valid_member_passes():
    assert _errors(MEMBER_VALIDATOR, _member()) == {}


def test_member_current_books_within_max():
    errors = _errors(MEMBER_VALIDATOR, _member(max_books_allowed=2, current_books_count=3))
    assert errors == {
        "CurrentBooksCount": ["'CurrentBooksCount' cannot exceed 'MaxBooksAllowed'."],
    }


def test_member_end_date_not_before_start():
    errors = _errors(MEMBER_VALIDATOR, _member(membership_end_date=date(2025, 12, 31)))
    assert "MembershipEndDate" in errors


def test_member_email_and_money():
    errors = _errors(
        MEMBER_VALIDATOR, _member(email="nope", total_fines_owed=Decimal("-0.01")),
    )
    assert set(errors) == {"Email", "TotalFinesOwed"}


def test_extend_membership_months_range():
    assert "Months" in _errors(EXTEND_MEMBERSHIP_VALIDATOR, ExtendMembershipRequest(months=61))
    assert "Months" in _errors(EXTEND_MEMBERSHIP_VALIDATOR, ExtendMembershipRequest(months=0))
    assert _errors(EXTEND_MEMBERSHIP_VALIDATOR, ExtendMembershipRequest(months=60)) == {}


def test_librarian_hire_date_not_in_future():
    dto = LibrarianCreate(
        employee_number="E-1", first_name="Melvil", last_name="Dewey",
        email="melvil@example.org", hire_date=date(2026, 5, 2),
    )
    assert _errors(LIBRARIAN_CREATE_VALIDATOR, dto) == {
        "HireDate": ["'HireDate' cannot be in the future."],
    }


# --- circulation --------------------------------------------------------------

def test_borrow_days_range():
    assert "Days" in _errors(BORROW_VALIDATOR, BorrowRequest(book_id=1, member_id=1, days=91))
    assert _errors(BORROW_VALIDATOR, BorrowRequest(book_id=1, member_id=1, days=90)) == {}


def test_renew_additional_days_range():
    assert "AdditionalDays" in _errors(
        RENEW_VALIDATOR, RenewRequest(transaction_id=1, additional_days=31),
    )


def test_reservation_priority_range():
    assert "Priority" in _errors(
        RESERVATION_VALIDATOR, ReservationCreate(book_id=1, member_id=1, priority=11),
    )


def test_pay_fine_requires_positive_amount_and_method():
    errors = _errors(PAY_FINE_VALIDATOR, PayFineRequest(amount=Decimal("0"), payment_method=""))
    assert set(errors) == {"Amount", "PaymentMethod"}


# --- operations ---------------------------------------------------------------

def test_alert_severity_and_priority():
    dto = AlertCreate(
        title="Heating", message="Broken", alert_type="Facility",
        severity="Severe", priority=6,
    )
    assert set(_errors(ALERT_CREATE_VALIDATOR, dto)) == {"Severity", "Priority"}


def test_mark_read_bounds():
    assert "NotificationIds" in _errors(MARK_READ_VALIDATOR, MarkReadRequest(notification_ids=[]))
    too_many = MarkReadRequest(notification_ids=list(range(101)))
    assert "NotificationIds" in _errors(MARK_READ_VALIDATOR, too_many)


def test_report_request_rules():
    dto = GenerateReportRequest(
        report_type="weather", format="pdf",
        from_date=date(2026, 2, 1), to_date=date(2026, 1, 1),
    )
    assert set(_errors(REPORT_VALIDATOR, dto)) == {"ReportType", "Format", "FromDate"}


def test_import_and_export_types():
    assert set(_errors(IMPORT_VALIDATOR, ImportRequest(import_type="fines", content=""))) == {
        "ImportType", "Content",
    }
    assert set(_errors(EXPORT_VALIDATOR, ExportRequest(export_type="alerts", format="xml"))) == {
        "ExportType", "Format",
    }
