"""People Service — library members and staff accounts.

Invariants:
    - Membership number, employee number and e-mail are unique per table
    - A member with active loans cannot be deleted
    - Membership extension counts from the later of the current end date and today,
      and reactivates an Expired member
    - Role and status changes are audited like any other update
"""

import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.circulation_policy import extended_membership_end
from backoffice.core.domain_types import (
    AuditAction, LibrarianRole, LibrarianStatus, MemberStatus,
)
from backoffice.core.errors import (
    BusinessRuleError, ConflictError, ResourceNotFoundError,
)
from backoffice.core.paging import PageRequest
from backoffice.models import Librarian, Member
from backoffice.repositories.circulation import TransactionRepository
from backoffice.repositories.people import LibrarianRepository, MemberRepository
from backoffice.services.audit_service import AuditService, snapshot

logger = logging.getLogger(__name__)


class MemberService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.members = MemberRepository(db)
        self.transactions = TransactionRepository(db)
        self.audit = AuditService(db)

    async def get(self, member_id: int) -> Member:
        member = await self.members.get_by_id(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", member_id)
        return member

    async def search(
        self, request: PageRequest, term: str | None = None, status: str | None = None,
    ) -> tuple[list[Member], int]:
        return await self.members.search(request, term, status)

    async def create(self, member: Member) -> Member:
        await self._ensure_unique(member)
        await self.members.add(member)
        self.audit.record(AuditAction.CREATE, "Member", member.id, new_values=snapshot(member))
        await self.db.commit()
        logger.info("Member created", extra={"entity": "Member", "entity_id": member.id})
        return member

    async def update(self, member: Member, old_values: dict) -> Member:
        with self.db.no_autoflush:
            await self._ensure_unique(member)
        await self.db.flush()
        self.audit.record(
            AuditAction.UPDATE, "Member", member.id,
            old_values=old_values, new_values=snapshot(member),
        )
        await self.db.commit()
        return member

    async def delete(self, member_id: int) -> None:
        member = await self.get(member_id)
        if await self.transactions.count_active_for_member(member_id):
            raise BusinessRuleError(
                "Member has active loans and cannot be deleted", "MEMBER_HAS_LOANS",
            )
        if await self.transactions.exists(self.transactions.model.member_id == member_id):
            raise ConflictError(
                "Member has circulation history and cannot be deleted", "MEMBER_HAS_HISTORY",
            )
        old_values = snapshot(member)
        await self.members.delete(member)
        self.audit.record(AuditAction.DELETE, "Member", member_id, old_values=old_values)
        await self.db.commit()

    async def extend_membership(
        self, member_id: int, months: int, today: date | None = None,
    ) -> Member:
        member = await self.get(member_id)
        old_values = snapshot(member)
        today = today or datetime.now(timezone.utc).date()
        member.membership_end_date = extended_membership_end(
            member.membership_end_date, today, months,
        )
        if member.status == MemberStatus.EXPIRED:
            member.status = MemberStatus.ACTIVE.value
        await self.db.flush()
        self.audit.record(
            AuditAction.UPDATE, "Member", member.id,
            old_values=old_values, new_values=snapshot(member),
        )
        await self.db.commit()
        return member

    async def _ensure_unique(self, member: Member) -> None:
        same_number = await self.members.get_by_membership_number(member.membership_number)
        if same_number is not None and same_number.id != member.id:
            raise ConflictError(
                f"Membership number {member.membership_number} is already in use",
                "DUPLICATE_MEMBERSHIP_NUMBER",
            )
        same_email = await self.members.get_by_email(member.email)
        if same_email is not None and same_email.id != member.id:
            raise ConflictError(
                f"E-mail {member.email} is already registered", "DUPLICATE_EMAIL",
            )


class LibrarianService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.librarians = LibrarianRepository(db)
        self.audit = AuditService(db)

    async def get(self, librarian_id: int) -> Librarian:
        librarian = await self.librarians.get_by_id(librarian_id)
        if librarian is None:
            raise ResourceNotFoundError("Librarian", librarian_id)
        return librarian

    async def search(
        self, request: PageRequest, term: str | None = None,
        role: str | None = None, status: str | None = None,
    ) -> tuple[list[Librarian], int]:
        return await self.librarians.search(request, term, role, status)

    async def create(self, librarian: Librarian) -> Librarian:
        await self._ensure_unique(librarian)
        librarian.status = LibrarianStatus.ACTIVE.value
        await self.librarians.add(librarian)
        self.audit.record(
            AuditAction.CREATE, "Librarian", librarian.id, new_values=snapshot(librarian),
        )
        await self.db.commit()
        return librarian

    async def update(self, librarian: Librarian, old_values: dict) -> Librarian:
        with self.db.no_autoflush:
            await self._ensure_unique(librarian)
        return await self._save(librarian, old_values)

    async def delete(self, librarian_id: int) -> None:
        librarian = await self.get(librarian_id)
        old_values = snapshot(librarian)
        await self.librarians.delete(librarian)
        self.audit.record(AuditAction.DELETE, "Librarian", librarian_id, old_values=old_values)
        await self.db.commit()

    async def set_status(self, librarian_id: int, status: LibrarianStatus) -> Librarian:
        librarian = await self.get(librarian_id)
        old_values = snapshot(librarian)
        librarian.status = status.value
        return await self._save(librarian, old_values)

    async def change_role(self, librarian_id: int, role: LibrarianRole) -> Librarian:
        librarian = await self.get(librarian_id)
        if librarian.status == LibrarianStatus.TERMINATED:
            raise BusinessRuleError(
                "Cannot change the role of a terminated librarian", "LIBRARIAN_TERMINATED",
            )
        old_values = snapshot(librarian)
        librarian.role = role.value
        return await self._save(librarian, old_values)

    async def stats(self) -> dict[str, Any]:
        by_status = await self.librarians.count_by(Librarian.status)
        total = sum(by_status.values())
        active = by_status.get(LibrarianStatus.ACTIVE.value, 0)
        return {
            "total_librarians": total,
            "active_librarians": active,
            "inactive_librarians": total - active,
            "role_distribution": await self.librarians.count_by(Librarian.role),
        }

    async def _save(self, librarian: Librarian, old_values: dict) -> Librarian:
        await self.db.flush()
        self.audit.record(
            AuditAction.UPDATE, "Librarian", librarian.id,
            old_values=old_values, new_values=snapshot(librarian),
        )
        await self.db.commit()
        return librarian

    async def _ensure_unique(self, librarian: Librarian) -> None:
        if librarian.employee_number:
            same_number = await self.librarians.get_by_employee_number(
                librarian.employee_number,
            )
            if same_number is not None and same_number.id != librarian.id:
                raise ConflictError(
                    f"Employee number {librarian.employee_number} is already in use",
                    "DUPLICATE_EMPLOYEE_NUMBER",
                )
        same_email = await self.librarians.get_by_email(librarian.email)
        if same_email is not None and same_email.id != librarian.id:
            raise ConflictError(
                f"E-mail {librarian.email} is already registered", "DUPLICATE_EMAIL",
            )
