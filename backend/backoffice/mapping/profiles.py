"""Mapping Profiles — every registered DTO <-> entity map in one place.

Invariants:
    - Write DTOs map onto entities by field name; ids and timestamps are never copied from input
    - Response maps flatten related names (book title, member name) through resolvers
    - is_overdue is derived at mapping time from the loan status and due date
"""

from datetime import datetime, timezone

from backoffice.core.circulation_policy import is_overdue
from backoffice.mapping.mapper import MappingProfile
from backoffice.models import (
    Alert, AuditLog, Book, Category, ExportJob, Fine, ImportJob, Librarian,
    Member, Notification, Report, Reservation, Review, Transaction,
)
from backoffice.schemas.alert import AlertCreate, AlertResponse
from backoffice.schemas.audit import AuditLogResponse
from backoffice.schemas.book import BookResponse, BookWrite
from backoffice.schemas.category import CategoryResponse, CategoryWrite
from backoffice.schemas.fine import FineResponse
from backoffice.schemas.import_export import ExportJobResponse, ImportJobResponse
from backoffice.schemas.librarian import (
    LibrarianCreate, LibrarianResponse, LibrarianUpdate,
)
from backoffice.schemas.member import MemberResponse, MemberWrite
from backoffice.schemas.notification import NotificationCreate, NotificationResponse
from backoffice.schemas.report import ReportListItem, ReportResponse
from backoffice.schemas.reservation import ReservationResponse
from backoffice.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from backoffice.schemas.transaction import TransactionResponse

_NEVER_FROM_INPUT = ("id", "created_at", "updated_at")


def _book_title(entity) -> str | None:
    return entity.book.title if entity.book is not None else None


def _member_name(entity) -> str | None:
    return entity.member.full_name if entity.member is not None else None


def build_profile() -> MappingProfile:
    profile = MappingProfile()

    # Catalog
    profile.create_map(BookWrite, Book, exclude=_NEVER_FROM_INPUT)
    profile.create_map(
        Book, BookResponse,
        category_name=lambda b: b.category.name if b.category is not None else None,
    )
    profile.create_map(CategoryWrite, Category, exclude=_NEVER_FROM_INPUT)
    profile.create_map(Category, CategoryResponse)

    # People
    profile.create_map(MemberWrite, Member, exclude=_NEVER_FROM_INPUT)
    profile.create_map(Member, MemberResponse)
    profile.create_map(LibrarianCreate, Librarian, exclude=_NEVER_FROM_INPUT)
    profile.create_map(LibrarianUpdate, Librarian, exclude=_NEVER_FROM_INPUT)
    profile.create_map(Librarian, LibrarianResponse)

    # Circulation
    profile.create_map(
        Transaction, TransactionResponse,
        book_title=_book_title,
        member_name=_member_name,
        is_overdue=lambda t: is_overdue(
            t.status, t.due_date, datetime.now(timezone.utc),
        ),
    )
    profile.create_map(
        Reservation, ReservationResponse,
        book_title=_book_title, member_name=_member_name,
    )
    profile.create_map(
        Fine, FineResponse,
        member_name=_member_name,
        transaction_number=lambda f: (
            f.transaction.transaction_number if f.transaction is not None else None
        ),
    )
    profile.create_map(ReviewCreate, Review, exclude=_NEVER_FROM_INPUT)
    profile.create_map(ReviewUpdate, Review, exclude=_NEVER_FROM_INPUT)
    profile.create_map(
        Review, ReviewResponse,
        book_title=_book_title, member_name=_member_name,
    )

    # Messaging
    profile.create_map(NotificationCreate, Notification, exclude=_NEVER_FROM_INPUT)
    profile.create_map(Notification, NotificationResponse, member_name=_member_name)
    profile.create_map(AlertCreate, Alert, exclude=_NEVER_FROM_INPUT)
    profile.create_map(
        Alert, AlertResponse,
        acknowledged_by_librarian_name=lambda a: (
            a.acknowledged_by.full_name if a.acknowledged_by is not None else None
        ),
    )

    # Operations
    profile.create_map(AuditLog, AuditLogResponse)
    profile.create_map(Report, ReportResponse)
    profile.create_map(Report, ReportListItem)
    profile.create_map(ImportJob, ImportJobResponse)
    profile.create_map(ExportJob, ExportJobResponse)
    return profile


mapper = build_profile()
