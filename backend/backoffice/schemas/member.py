"""Member Schemas — create/update payloads, response and membership extension."""

from datetime import date, datetime
from decimal import Decimal

from backoffice.core.domain_types import MemberStatus, MembershipType
from backoffice.schemas.common import CamelModel, Money


class MemberWrite(CamelModel):
    membership_number: str
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    membership_type: MembershipType = MembershipType.REGULAR
    membership_start_date: date
    membership_end_date: date
    status: MemberStatus = MemberStatus.ACTIVE
    max_books_allowed: int = 5
    current_books_count: int = 0
    total_fines_owed: Decimal = Decimal("0.00")
    max_fine_limit: Decimal = Decimal("50.00")


class MemberCreate(MemberWrite):
    pass


class MemberUpdate(MemberWrite):
    pass


class MemberResponse(CamelModel):
    id: int
    membership_number: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    membership_type: MembershipType
    membership_start_date: date
    membership_end_date: date
    status: MemberStatus
    max_books_allowed: int
    current_books_count: int
    total_fines_owed: Money
    max_fine_limit: Money
    created_at: datetime
    updated_at: datetime


class ExtendMembershipRequest(CamelModel):
    months: int = 12
