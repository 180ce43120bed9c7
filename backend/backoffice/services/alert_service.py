"""Alert Service — staff-facing alerts and computed circulation warnings.

Invariants:
    - Acknowledging stamps acknowledged_at once; a second acknowledge is refused
    - Dismissing sets is_active False; dismissed alerts never show as active
    - Circulation alerts are computed on request, never stored
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.config import Settings, get_settings
from backoffice.core.circulation_policy import to_money
from backoffice.core.domain_types import (
    AlertSeverity, MemberStatus, PAYABLE_FINE_STATUSES,
)
from backoffice.core.errors import BusinessRuleError, ResourceNotFoundError
from backoffice.core.paging import PageRequest
from backoffice.models import Alert, Member
from backoffice.repositories.circulation import (
    FineRepository, ReservationRepository, TransactionRepository,
)
from backoffice.repositories.operations import AlertRepository
from backoffice.repositories.people import LibrarianRepository, MemberRepository

logger = logging.getLogger(__name__)

HIGH_PRIORITY = 4


class AlertService:
    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.alerts = AlertRepository(db)
        self.librarians = LibrarianRepository(db)
        self.transactions = TransactionRepository(db)
        self.fines = FineRepository(db)
        self.reservations = ReservationRepository(db)
        self.members = MemberRepository(db)

    async def get(self, alert_id: int) -> Alert:
        alert = await self.alerts.get_by_id(alert_id)
        if alert is None:
            raise ResourceNotFoundError("Alert", alert_id)
        return alert

    async def create(self, alert: Alert) -> Alert:
        alert.is_active = True
        alert.created_at = datetime.now(timezone.utc)
        await self.alerts.add(alert)
        await self.db.commit()
        logger.info("Alert raised", extra={"entity": "Alert", "entity_id": alert.id})
        return await self.alerts.reload(alert)

    async def update(self, alert_id: int, changes: dict[str, Any]) -> Alert:
        alert = await self.get(alert_id)
        for name, value in changes.items():
            setattr(alert, name, value)
        await self.db.commit()
        return await self.alerts.reload(alert)

    async def active(self, request: PageRequest):
        return await self.alerts.active(datetime.now(timezone.utc), request)

    async def acknowledge(self, alert_id: int, librarian_id: int | None = None) -> Alert:
        alert = await self.get(alert_id)
        if alert.acknowledged_at is not None:
            raise BusinessRuleError(
                "Alert has already been acknowledged", "ALERT_ALREADY_ACKNOWLEDGED",
            )
        if librarian_id is not None and await self.librarians.get_by_id(librarian_id) is None:
            raise ResourceNotFoundError("Librarian", librarian_id)
        alert.acknowledged_at = datetime.now(timezone.utc)
        alert.acknowledged_by_librarian_id = librarian_id
        await self.db.commit()
        return await self.alerts.reload(alert)

    async def dismiss(self, alert_id: int) -> Alert:
        alert = await self.get(alert_id)
        alert.is_active = False
        await self.db.commit()
        return await self.alerts.reload(alert)

    async def summary(self) -> dict[str, Any]:
        return {
            "total_alerts": await self.alerts.count(),
            "active_alerts": await self.alerts.count(Alert.is_active.is_(True)),
            "critical_alerts": await self.alerts.count(
                Alert.is_active.is_(True),
                Alert.severity == AlertSeverity.CRITICAL.value,
            ),
            "high_priority_alerts": await self.alerts.count(
                Alert.is_active.is_(True), Alert.priority >= HIGH_PRIORITY,
            ),
            "unacknowledged_alerts": await self.alerts.count(
                Alert.is_active.is_(True), Alert.acknowledged_at.is_(None),
            ),
        }

    async def circulation_alerts(self, now: datetime | None = None) -> dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        soon = now + timedelta(days=self.settings.alert_due_soon_days)
        membership_cutoff = now.date() + timedelta(
            days=self.settings.membership_expiry_warning_days,
        )
        totals = await self.fines.totals_by_status()
        payable = [totals[s.value] for s in PAYABLE_FINE_STATUSES if s.value in totals]
        return {
            "overdue_transactions": await self.transactions.count_overdue(now),
            "due_soon_transactions": await self.transactions.count_due_between(now, soon),
            "pending_fines": sum(n for n, _, _ in payable),
            "pending_fine_amount": to_money(sum(
                (amount - paid for _, amount, paid in payable), Decimal("0"),
            )),
            "expiring_reservations": await self.reservations.count_expiring_between(
                now, soon,
            ),
            "expiring_memberships": await self.members.count(
                Member.status == MemberStatus.ACTIVE.value,
                Member.membership_end_date >= now.date(),
                Member.membership_end_date <= membership_cutoff,
            ),
        }
