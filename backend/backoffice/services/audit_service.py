"""Audit Service — append-only trail of mutations plus trail queries.

Invariants:
    - record() adds to the caller's unit of work and never commits
    - Snapshots are JSON-safe: dates as ISO strings, Decimal as string, Enums as values
    - Audit rows are never updated or deleted through this service
"""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.domain_types import AuditAction
from backoffice.core.errors import ResourceNotFoundError
from backoffice.core.paging import PageRequest
from backoffice.models import AuditLog
from backoffice.repositories.operations import AuditLogRepository

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def snapshot(entity: Any) -> dict[str, Any]:
    """Column values of an ORM entity as a JSON-safe dict."""
    mapper = sa_inspect(entity).mapper
    return {
        attr.key: _json_safe(getattr(entity, attr.key))
        for attr in mapper.column_attrs
    }


class AuditService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logs = AuditLogRepository(db)

    def record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: int | None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            action=action.value,
            entity_type=entity_type,
            entity_id=entity_id,
            old_values=old_values,
            new_values=new_values,
            timestamp=datetime.now(timezone.utc),
        )
        self.db.add(entry)
        logger.info(
            "Audit %s %s", action.value, entity_type,
            extra={"action": action.value, "entity": entity_type, "entity_id": entity_id},
        )
        return entry

    async def search(
        self, request: PageRequest, action: str | None = None,
        entity_type: str | None = None, from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> tuple[list[AuditLog], int]:
        return await self.logs.search(request, action, entity_type, from_date, to_date)

    async def get(self, log_id: int) -> AuditLog:
        entry = await self.logs.get_by_id(log_id)
        if entry is None:
            raise ResourceNotFoundError("AuditLog", log_id)
        return entry

    async def history(self, entity_type: str, entity_id: int) -> list[AuditLog]:
        return await self.logs.history(entity_type, entity_id)

    async def summary(self, now: datetime | None = None) -> dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return {
            "total_logs": await self.logs.count(),
            "today_logs": await self.logs.count_since(start_of_day),
            "this_week_logs": await self.logs.count_since(
                start_of_day - timedelta(days=start_of_day.weekday()),
            ),
            "this_month_logs": await self.logs.count_since(start_of_day.replace(day=1)),
            "actions_by_type": await self.logs.count_by(AuditLog.action),
            "entities_by_type": await self.logs.count_by(AuditLog.entity_type),
        }
