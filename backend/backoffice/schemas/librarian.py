"""Librarian Schemas — staff accounts, role changes and staff statistics."""

from datetime import date, datetime

from backoffice.core.domain_types import LibrarianRole, LibrarianStatus
from backoffice.schemas.common import CamelModel


class LibrarianCreate(CamelModel):
    employee_number: str
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    role: LibrarianRole = LibrarianRole.LIBRARIAN
    hire_date: date
    department: str | None = None


class LibrarianUpdate(CamelModel):
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    role: LibrarianRole = LibrarianRole.LIBRARIAN
    department: str | None = None


class ChangeRoleRequest(CamelModel):
    new_role: LibrarianRole
    reason: str | None = None


class LibrarianResponse(CamelModel):
    id: int
    employee_number: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str | None = None
    role: LibrarianRole
    status: LibrarianStatus
    hire_date: date
    department: str | None = None
    created_at: datetime
    updated_at: datetime


class LibrarianStats(CamelModel):
    total_librarians: int
    active_librarians: int
    inactive_librarians: int
    role_distribution: dict[str, int]
