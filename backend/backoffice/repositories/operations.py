"""Operations Repositories — notifications, alerts, audit trail, reports and jobs."""

from datetime import datetime

from sqlalchemy import func, select, update

from backoffice.core.domain_types import NotificationStatus
from backoffice.core.paging import PageRequest
from backoffice.models import (
    Alert, AuditLog, ExportJob, ImportJob, Notification, Report,
)
from backoffice.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def by_member(
        self, member_id: int, request: PageRequest, unread_only: bool = False,
    ):
        criteria = [Notification.member_id == member_id]
        if unread_only:
            criteria.append(Notification.status == NotificationStatus.UNREAD.value)
        return await self.page(
            request, *criteria, order_by=[Notification.created_at.desc()],
        )

    async def mark_read(self, ids: list[int], at: datetime) -> int:
        """Mark the given unread notifications read; returns rows changed."""
        result = await self.db.execute(
            update(Notification)
            .where(
                Notification.id.in_(ids),
                Notification.status == NotificationStatus.UNREAD.value,
            )
            .values(status=NotificationStatus.READ.value, read_at=at)
            .execution_options(synchronize_session=False),
        )
        return int(result.rowcount or 0)

    async def member_counts(self, member_id: int) -> dict[str, int]:
        result = await self.db.execute(
            select(Notification.status, func.count(Notification.id))
            .where(Notification.member_id == member_id)
            .group_by(Notification.status),
        )
        return {str(s): int(n) for s, n in result.all()}

    async def last_created_at(self, member_id: int) -> datetime | None:
        result = await self.db.execute(
            select(func.max(Notification.created_at))
            .where(Notification.member_id == member_id),
        )
        return result.scalar_one_or_none()


class AlertRepository(BaseRepository[Alert]):
    model = Alert

    async def active(self, now: datetime, request: PageRequest):
        """Active alerts not yet expired, highest priority first."""
        return await self.page(
            request,
            Alert.is_active.is_(True),
            (Alert.expires_at.is_(None)) | (Alert.expires_at > now),
            order_by=[Alert.priority.desc(), Alert.created_at.desc()],
        )


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def search(
        self,
        request: PageRequest,
        action: str | None = None,
        entity_type: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ):
        criteria = []
        if action:
            criteria.append(AuditLog.action == action)
        if entity_type:
            criteria.append(AuditLog.entity_type == entity_type)
        if from_date is not None:
            criteria.append(AuditLog.timestamp >= from_date)
        if to_date is not None:
            criteria.append(AuditLog.timestamp <= to_date)
        return await self.page(
            request, *criteria, order_by=[AuditLog.timestamp.desc()],
        )

    async def history(self, entity_type: str, entity_id: int) -> list[AuditLog]:
        return await self.find_all(
            AuditLog.entity_type == entity_type,
            AuditLog.entity_id == entity_id,
            order_by=[AuditLog.timestamp.desc(), AuditLog.id.desc()],
        )

    async def recent(self, limit: int) -> list[AuditLog]:
        return await self.find_all(
            order_by=[AuditLog.timestamp.desc(), AuditLog.id.desc()], limit=limit,
        )

    async def count_since(self, since: datetime) -> int:
        return await self.count(AuditLog.timestamp >= since)

    async def count_by(self, column) -> dict[str, int]:
        result = await self.db.execute(
            select(column, func.count(AuditLog.id)).group_by(column),
        )
        return {str(k): int(n) for k, n in result.all()}


class ReportRepository(BaseRepository[Report]):
    model = Report

    async def listing(self, request: PageRequest, report_type: str | None = None):
        criteria = [Report.report_type == report_type] if report_type else []
        return await self.page(
            request, *criteria, order_by=[Report.created_at.desc()],
        )


class ImportJobRepository(BaseRepository[ImportJob]):
    model = ImportJob

    async def listing(self, request: PageRequest):
        return await self.page(request, order_by=[ImportJob.created_at.desc()])


class ExportJobRepository(BaseRepository[ExportJob]):
    model = ExportJob

    async def listing(self, request: PageRequest):
        return await self.page(request, order_by=[ExportJob.created_at.desc()])
