"""Alert Schemas — staff alerts and computed circulation alert counts."""

from datetime import datetime

from backoffice.schemas.common import CamelModel, Money


class AlertCreate(CamelModel):
    title: str
    message: str
    alert_type: str
    severity: str
    expires_at: datetime | None = None
    source: str | None = None
    priority: int = 1
    additional_data: str | None = None


class AlertUpdate(CamelModel):
    title: str | None = None
    message: str | None = None
    alert_type: str | None = None
    severity: str | None = None
    is_active: bool | None = None
    expires_at: datetime | None = None
    priority: int | None = None
    additional_data: str | None = None


class AcknowledgeAlertRequest(CamelModel):
    librarian_id: int | None = None
    notes: str | None = None


class AlertResponse(CamelModel):
    id: int
    title: str
    message: str
    alert_type: str
    severity: str
    is_active: bool
    created_at: datetime
    expires_at: datetime | None = None
    acknowledged_at: datetime | None = None
    acknowledged_by_librarian_id: int | None = None
    acknowledged_by_librarian_name: str | None = None
    additional_data: str | None = None
    source: str | None = None
    priority: int


class AlertSummary(CamelModel):
    total_alerts: int
    active_alerts: int
    critical_alerts: int
    high_priority_alerts: int
    unacknowledged_alerts: int


class CirculationAlerts(CamelModel):
    overdue_transactions: int
    due_soon_transactions: int
    pending_fines: int
    pending_fine_amount: Money
    expiring_reservations: int
    expiring_memberships: int
