"""Dashboard Service — headline counts and the recent activity feed."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.circulation_policy import to_money
from backoffice.core.domain_types import MemberStatus, ReservationStatus
from backoffice.models import Member, Reservation
from backoffice.repositories.catalog import BookRepository
from backoffice.repositories.circulation import (
    ReservationRepository, TransactionRepository,
)
from backoffice.repositories.operations import AuditLogRepository
from backoffice.repositories.people import MemberRepository

RECENT_ACTIVITY_LIMIT = 10


def describe_activity(action: str, entity_type: str, entity_id: int | None) -> str:
    target = f"{entity_type} #{entity_id}" if entity_id is not None else entity_type
    return f"{action} {target}"


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.books = BookRepository(db)
        self.members = MemberRepository(db)
        self.transactions = TransactionRepository(db)
        self.reservations = ReservationRepository(db)
        self.audit_logs = AuditLogRepository(db)

    async def overview(self) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        total_copies, available_copies = await self.books.copy_totals()
        overdue = await self.transactions.count_overdue(now)
        recent = await self.audit_logs.recent(RECENT_ACTIVITY_LIMIT)
        return {
            "total_books": total_copies,
            "available_books": available_copies,
            "borrowed_books": total_copies - available_copies,
            "overdue_books": overdue,
            "total_members": await self.members.count(),
            "active_members": await self.members.count(
                Member.status == MemberStatus.ACTIVE.value,
            ),
            "total_transactions": await self.transactions.count(),
            "overdue_transactions": overdue,
            "total_fines": to_money(await self.transactions.total_fine_amount()),
            "active_reservations": await self.reservations.count(
                Reservation.status == ReservationStatus.ACTIVE.value,
            ),
            "recent_activities": [
                {
                    "id": entry.id,
                    "type": entry.action,
                    "description": describe_activity(
                        entry.action, entry.entity_type, entry.entity_id,
                    ),
                    "timestamp": entry.timestamp,
                }
                for entry in recent
            ],
        }
