"""Body Rules — which rule set guards which request body, and rule checks over rejected bodies.

Invariants:
    - Every request DTO a handler passes to ensure_valid is registered here with the same rule set
    - partial_body_violations reads a field the shape check rejected, or one the body omits,
      as None (or its declared default), so the remaining rules still run over the rest
    - Unregistered models and non-object bodies yield no rule violations

Design Decisions:
    - Rule checks run on a plain namespace, not a model instance: a body that failed the
      shape check cannot be constructed, but its usable fields can still be judged
"""

from types import SimpleNamespace
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from backoffice.core.validate_catalog import (
    BOOK_VALIDATOR, CATEGORY_VALIDATOR, REVIEW_CREATE_VALIDATOR,
    REVIEW_REJECT_VALIDATOR, REVIEW_UPDATE_VALIDATOR,
)
from backoffice.core.validate_circulation import (
    BORROW_VALIDATOR, CANCEL_RESERVATION_VALIDATOR, PAY_FINE_VALIDATOR,
    RENEW_VALIDATOR, RESERVATION_VALIDATOR, RETURN_VALIDATOR, WAIVE_FINE_VALIDATOR,
)
from backoffice.core.validate_operations import (
    ALERT_CREATE_VALIDATOR, ALERT_UPDATE_VALIDATOR, BULK_NOTIFICATION_VALIDATOR,
    EXPORT_VALIDATOR, IMPORT_VALIDATOR, MARK_READ_VALIDATOR, NOTIFICATION_VALIDATOR,
    REPORT_VALIDATOR,
)
from backoffice.core.validate_people import (
    CHANGE_ROLE_VALIDATOR, EXTEND_MEMBERSHIP_VALIDATOR, LIBRARIAN_CREATE_VALIDATOR,
    LIBRARIAN_UPDATE_VALIDATOR, MEMBER_VALIDATOR,
)
from backoffice.core.validation import Validator, Violation
from backoffice.schemas.alert import AlertCreate, AlertUpdate
from backoffice.schemas.book import BookCreate, BookUpdate
from backoffice.schemas.category import CategoryCreate, CategoryUpdate
from backoffice.schemas.fine import PayFineRequest, WaiveFineRequest
from backoffice.schemas.import_export import ExportRequest, ImportRequest
from backoffice.schemas.librarian import ChangeRoleRequest, LibrarianCreate, LibrarianUpdate
from backoffice.schemas.member import ExtendMembershipRequest, MemberCreate, MemberUpdate
from backoffice.schemas.notification import (
    BulkNotificationRequest, MarkReadRequest, NotificationCreate,
)
from backoffice.schemas.report import GenerateReportRequest
from backoffice.schemas.reservation import CancelReservationRequest, ReservationCreate
from backoffice.schemas.review import RejectReviewRequest, ReviewCreate, ReviewUpdate
from backoffice.schemas.transaction import BorrowRequest, RenewRequest, ReturnRequest

BODY_RULES: dict[type[BaseModel], Validator] = {
    # Catalog
    BookCreate: BOOK_VALIDATOR,
    BookUpdate: BOOK_VALIDATOR,
    CategoryCreate: CATEGORY_VALIDATOR,
    CategoryUpdate: CATEGORY_VALIDATOR,
    ReviewCreate: REVIEW_CREATE_VALIDATOR,
    ReviewUpdate: REVIEW_UPDATE_VALIDATOR,
    RejectReviewRequest: REVIEW_REJECT_VALIDATOR,
    # People
    MemberCreate: MEMBER_VALIDATOR,
    MemberUpdate: MEMBER_VALIDATOR,
    ExtendMembershipRequest: EXTEND_MEMBERSHIP_VALIDATOR,
    LibrarianCreate: LIBRARIAN_CREATE_VALIDATOR,
    LibrarianUpdate: LIBRARIAN_UPDATE_VALIDATOR,
    ChangeRoleRequest: CHANGE_ROLE_VALIDATOR,
    # Circulation
    BorrowRequest: BORROW_VALIDATOR,
    ReturnRequest: RETURN_VALIDATOR,
    RenewRequest: RENEW_VALIDATOR,
    ReservationCreate: RESERVATION_VALIDATOR,
    CancelReservationRequest: CANCEL_RESERVATION_VALIDATOR,
    PayFineRequest: PAY_FINE_VALIDATOR,
    WaiveFineRequest: WAIVE_FINE_VALIDATOR,
    # Messaging
    NotificationCreate: NOTIFICATION_VALIDATOR,
    BulkNotificationRequest: BULK_NOTIFICATION_VALIDATOR,
    MarkReadRequest: MARK_READ_VALIDATOR,
    AlertCreate: ALERT_CREATE_VALIDATOR,
    AlertUpdate: ALERT_UPDATE_VALIDATOR,
    # Operations
    GenerateReportRequest: REPORT_VALIDATOR,
    ImportRequest: IMPORT_VALIDATOR,
    ExportRequest: EXPORT_VALIDATOR,
}

_MISSING = object()


def _field_value(field: FieldInfo, raw: Any) -> Any:
    if raw is _MISSING:
        if field.is_required():
            return None
        return field.get_default(call_default_factory=True)
    try:
        return TypeAdapter(field.annotation).validate_python(raw)
    except ValidationError:
        return None


def partial_body_violations(
    model: type, body: Any, rejected: set[str],
) -> list[Violation]:
    """Run the model's rule set over the usable part of a rejected request body.

    `rejected` holds the body keys (alias or attribute name) the shape check
    already reported; those fields read as None.
    """
    validator = BODY_RULES.get(model)
    if validator is None or not isinstance(body, dict):
        return []
    values: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        keys = (field.alias or name, name)
        if rejected.intersection(keys):
            values[name] = None
            continue
        raw = next((body[key] for key in keys if key in body), _MISSING)
        values[name] = _field_value(field, raw)
    return validator.validate(SimpleNamespace(**values))
