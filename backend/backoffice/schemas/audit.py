"""Audit Schemas."""

from datetime import datetime
from typing import Any

from backoffice.schemas.common import CamelModel


class AuditLogResponse(CamelModel):
    id: int
    action: str
    entity_type: str
    entity_id: int | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    user_id: int | None = None
    user_type: str
    user_email: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    timestamp: datetime


class AuditSummary(CamelModel):
    total_logs: int
    today_logs: int
    this_week_logs: int
    this_month_logs: int
    actions_by_type: dict[str, int]
    entities_by_type: dict[str, int]
