"""Fine Service — settlement of member fines.

Invariants:
    - Only Pending/Unpaid/Overdue/PartiallyPaid fines accept payment
    - paid_amount accumulates; status becomes Paid once paid_amount >= amount
    - member.total_fines_owed drops by the portion applied against the outstanding
      balance, never below zero
    - Waiving removes the outstanding balance from the member's owed total
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.circulation_policy import (
    apply_payment, check_fine_payable, check_fine_waivable,
    outstanding_balance, to_money,
)
from backoffice.core.domain_types import (
    AuditAction, FineStatus, PAYABLE_FINE_STATUSES,
)
from backoffice.core.errors import BusinessRuleError, ResourceNotFoundError
from backoffice.core.paging import PageRequest
from backoffice.models import Fine
from backoffice.repositories.circulation import FineRepository
from backoffice.repositories.people import MemberRepository
from backoffice.services.audit_service import AuditService, snapshot

logger = logging.getLogger(__name__)

_PENDING = {s.value for s in PAYABLE_FINE_STATUSES}


class FineService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.fines = FineRepository(db)
        self.members = MemberRepository(db)
        self.audit = AuditService(db)

    async def get(self, fine_id: int) -> Fine:
        fine = await self.fines.get_by_id(fine_id)
        if fine is None:
            raise ResourceNotFoundError("Fine", fine_id)
        return fine

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.fines.by_member(member_id, request)

    async def pending(self, request: PageRequest):
        return await self.fines.pending(request)

    async def overdue(self, request: PageRequest):
        return await self.fines.overdue(datetime.now(timezone.utc), request)

    async def pay(
        self,
        fine_id: int,
        amount: Decimal,
        payment_method: str,
        reference_number: str | None = None,
        notes: str | None = None,
    ) -> Fine:
        fine = await self.get(fine_id)
        violation = check_fine_payable(fine.status)
        if violation is not None:
            raise BusinessRuleError(violation.message, violation.code)
        old_values = snapshot(fine)

        total_paid, status, applied = apply_payment(fine.amount, fine.paid_amount, amount)
        fine.paid_amount = total_paid
        fine.status = status.value
        fine.payment_method = payment_method
        fine.reference_number = reference_number
        if notes:
            fine.notes = notes
        if status == FineStatus.PAID:
            fine.paid_date = datetime.now(timezone.utc)
        self._reduce_owed(fine, applied)

        await self.db.flush()
        self.audit.record(
            AuditAction.PAY, "Fine", fine.id,
            old_values=old_values, new_values=snapshot(fine),
        )
        await self.db.commit()
        logger.info("Fine payment recorded", extra={"entity": "Fine", "entity_id": fine.id})
        return await self.fines.reload(fine)

    async def waive(self, fine_id: int, reason: str, notes: str | None = None) -> Fine:
        fine = await self.get(fine_id)
        violation = check_fine_waivable(fine.status)
        if violation is not None:
            raise BusinessRuleError(violation.message, violation.code)
        old_values = snapshot(fine)

        self._reduce_owed(fine, outstanding_balance(fine.amount, fine.paid_amount))
        fine.status = FineStatus.WAIVED.value
        fine.notes = f"Waived: {reason}" + (f" ({notes})" if notes else "")

        await self.db.flush()
        self.audit.record(
            AuditAction.WAIVE, "Fine", fine.id,
            old_values=old_values, new_values=snapshot(fine),
        )
        await self.db.commit()
        return await self.fines.reload(fine)

    async def member_summary(self, member_id: int) -> dict[str, Any]:
        member = await self.members.get_by_id(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", member_id)
        fines = await self.fines.all_for_member(member_id)
        pending = [f for f in fines if f.status in _PENDING]
        paid = [f for f in fines if f.status == FineStatus.PAID]
        return {
            "member_id": member.id,
            "member_name": member.full_name,
            "total_fines": len(fines),
            "pending_fines": len(pending),
            "paid_fines": len(paid),
            "total_amount": sum((to_money(f.amount) for f in fines), Decimal("0.00")),
            "pending_amount": sum(
                (outstanding_balance(f.amount, f.paid_amount) for f in pending),
                Decimal("0.00"),
            ),
            "paid_amount": sum(
                (to_money(f.paid_amount) for f in fines), Decimal("0.00"),
            ),
        }

    async def overall_summary(self) -> dict[str, Any]:
        totals = await self.fines.totals_by_status()
        count = sum(n for n, _, _ in totals.values())
        total_amount = sum((amt for _, amt, _ in totals.values()), Decimal("0"))
        pending = [totals[s] for s in _PENDING if s in totals]
        paid = totals.get(FineStatus.PAID.value, (0, Decimal("0"), Decimal("0")))
        return {
            "total_fines": count,
            "pending_fines": sum(n for n, _, _ in pending),
            "paid_fines": paid[0],
            "total_amount": to_money(total_amount),
            "pending_amount": to_money(sum(
                (amt - paid_amt for _, amt, paid_amt in pending), Decimal("0"),
            )),
            "paid_amount": to_money(
                sum((p for _, _, p in totals.values()), Decimal("0")),
            ),
            "average_fine_amount": to_money(total_amount / count) if count else to_money(0),
        }

    def _reduce_owed(self, fine: Fine, amount: Decimal) -> None:
        member = fine.member
        member.total_fines_owed = max(
            to_money(member.total_fines_owed) - to_money(amount), Decimal("0.00"),
        )
