"""Domain Types — status enums and fixed vocabularies shared by every layer.

Invariants:
    - All valid states encoded as Enums; services never match raw strings
    - Enum values are the exact wire strings the frontend renders (PascalCase)
    - Status sets used by business rules (payable fines, open reservations) defined once here

Design Decisions:
    - str Enums: serialize to JSON and persist to String columns without custom encoders
"""

from enum import Enum


# ─── Catalog ─────────────────────────────────────────────────────

class BookStatus(str, Enum):
    AVAILABLE = "Available"
    BORROWED = "Borrowed"
    RESERVED = "Reserved"
    OUT_OF_STOCK = "OutOfStock"
    DISCONTINUED = "Discontinued"
    UNDER_MAINTENANCE = "UnderMaintenance"


# ─── Membership ──────────────────────────────────────────────────

class MembershipType(str, Enum):
    STUDENT = "Student"
    FACULTY = "Faculty"
    STAFF = "Staff"
    REGULAR = "Regular"
    PREMIUM = "Premium"


class MemberStatus(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    EXPIRED = "Expired"
    BLOCKED = "Blocked"


# ─── Circulation ─────────────────────────────────────────────────

class TransactionType(str, Enum):
    BORROW = "Borrow"
    CHECKOUT = "Checkout"
    RETURN = "Return"
    RENEWAL = "Renewal"
    LOST = "Lost"
    DAMAGED = "Damaged"


class TransactionStatus(str, Enum):
    ACTIVE = "Active"
    BORROWED = "Borrowed"
    RETURNED = "Returned"
    OVERDUE = "Overdue"
    LOST = "Lost"
    DAMAGED = "Damaged"


class ReservationStatus(str, Enum):
    ACTIVE = "Active"
    FULFILLED = "Fulfilled"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"
    ON_HOLD = "OnHold"


OPEN_RESERVATION_STATUSES = frozenset({
    ReservationStatus.ACTIVE, ReservationStatus.ON_HOLD,
})


# ─── Fines ───────────────────────────────────────────────────────

class FineType(str, Enum):
    OVERDUE_BOOK = "OverdueBook"
    DAMAGED_BOOK = "DamagedBook"
    LOST_BOOK = "LostBook"
    LATE_RETURN = "LateReturn"
    OTHER = "Other"


class FineStatus(str, Enum):
    PENDING = "Pending"
    UNPAID = "Unpaid"
    OVERDUE = "Overdue"
    PARTIALLY_PAID = "PartiallyPaid"
    PAID = "Paid"
    WAIVED = "Waived"
    CANCELLED = "Cancelled"


PAYABLE_FINE_STATUSES = frozenset({
    FineStatus.PENDING, FineStatus.UNPAID,
    FineStatus.OVERDUE, FineStatus.PARTIALLY_PAID,
})


# ─── Messaging ───────────────────────────────────────────────────

class NotificationType(str, Enum):
    BOOK_DUE = "BookDue"
    BOOK_OVERDUE = "BookOverdue"
    BOOK_AVAILABLE = "BookAvailable"
    RESERVATION_EXPIRING = "ReservationExpiring"
    FINE_ISSUED = "FineIssued"
    ACCOUNT_SUSPENDED = "AccountSuspended"
    GENERAL = "General"


class NotificationStatus(str, Enum):
    UNREAD = "Unread"
    READ = "Read"
    ARCHIVED = "Archived"


class AlertSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


# ─── Staff ───────────────────────────────────────────────────────

class LibrarianRole(str, Enum):
    ASSISTANT = "Assistant"
    LIBRARIAN = "Librarian"
    SENIOR_LIBRARIAN = "SeniorLibrarian"
    HEAD_LIBRARIAN = "HeadLibrarian"
    ADMINISTRATOR = "Administrator"


class LibrarianStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ON_LEAVE = "OnLeave"
    TERMINATED = "Terminated"


# ─── Audit / Reports / Jobs ──────────────────────────────────────

class AuditAction(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    BORROW = "Borrow"
    RETURN = "Return"
    RENEW = "Renew"
    PAY = "Pay"
    WAIVE = "Waive"
    IMPORT = "Import"


class ReportType(str, Enum):
    CIRCULATION = "circulation"
    OVERDUE = "overdue"
    FINES = "fines"
    INVENTORY = "inventory"
    MEMBER_ACTIVITY = "member-activity"


class JobStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    COMPLETED_WITH_ERRORS = "CompletedWithErrors"
    FAILED = "Failed"


IMPORT_TYPES = ("books", "members", "categories")
EXPORT_TYPES = ("books", "members", "categories", "transactions", "fines")
EXPORT_FORMATS = ("csv", "json")
REPORT_FORMATS = ("json", "csv")
