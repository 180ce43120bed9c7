"""Messaging Handlers — member notifications and staff alerts."""

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.domain_types import AlertSeverity
from backoffice.core.paging import PageRequest
from backoffice.core.validate_operations import (
    ALERT_CREATE_VALIDATOR, ALERT_UPDATE_VALIDATOR, BULK_NOTIFICATION_VALIDATOR,
    MARK_READ_VALIDATOR, NOTIFICATION_VALIDATOR,
)
from backoffice.handlers.common import ensure_valid, to_page
from backoffice.mapping.profiles import mapper
from backoffice.models import Alert, Notification
from backoffice.schemas.alert import (
    AcknowledgeAlertRequest, AlertCreate, AlertResponse, AlertSummary,
    AlertUpdate, CirculationAlerts,
)
from backoffice.schemas.common import MessageResponse, PagedResult
from backoffice.schemas.notification import (
    BulkNotificationRequest, BulkNotificationResult, MarkReadRequest,
    NotificationCreate, NotificationResponse, NotificationStats,
)
from backoffice.services.alert_service import AlertService
from backoffice.services.notification_service import NotificationService

_CLEARABLE_ALERT_FIELDS = ("expires_at", "additional_data")


def canonical_severity(value: str | None) -> str | None:
    """'high' -> 'High'; unknown values pass through for the validator to reject."""
    if value is None:
        return None
    for severity in AlertSeverity:
        if severity.value.lower() == value.lower():
            return severity.value
    return value


class NotificationHandlers:
    def __init__(self, db: AsyncSession):
        self.service = NotificationService(db)

    async def create(self, command: NotificationCreate) -> NotificationResponse:
        ensure_valid(NOTIFICATION_VALIDATOR, command)
        notification = await self.service.create(mapper.map(command, Notification))
        return mapper.map(notification, NotificationResponse)

    async def bulk_send(self, command: BulkNotificationRequest) -> BulkNotificationResult:
        ensure_valid(BULK_NOTIFICATION_VALIDATOR, command)
        result = await self.service.bulk_send(
            command.member_ids, command.type, command.title, command.message,
            command.related_entity_id, command.related_entity_type,
        )
        return BulkNotificationResult(**result)

    async def get(self, notification_id: int) -> NotificationResponse:
        return mapper.map(await self.service.get(notification_id), NotificationResponse)

    async def by_member(
        self, member_id: int, request: PageRequest, unread_only: bool = False,
    ) -> PagedResult[NotificationResponse]:
        result = await self.service.by_member(member_id, request, unread_only)
        return to_page(result, request, NotificationResponse)

    async def mark_read(self, notification_id: int) -> NotificationResponse:
        return mapper.map(await self.service.mark_read(notification_id), NotificationResponse)

    async def mark_many_read(self, command: MarkReadRequest) -> MessageResponse:
        ensure_valid(MARK_READ_VALIDATOR, command)
        changed = await self.service.mark_many_read(command.notification_ids)
        return MessageResponse(
            message=f"{changed} notification(s) marked as read", affected=changed,
        )

    async def delete(self, notification_id: int) -> None:
        await self.service.delete(notification_id)

    async def member_stats(self, member_id: int) -> NotificationStats:
        return NotificationStats(**await self.service.member_stats(member_id))


class AlertHandlers:
    def __init__(self, db: AsyncSession):
        self.service = AlertService(db)

    async def create(self, command: AlertCreate) -> AlertResponse:
        command = command.model_copy(
            update={"severity": canonical_severity(command.severity)},
        )
        ensure_valid(ALERT_CREATE_VALIDATOR, command)
        alert = await self.service.create(mapper.map(command, Alert))
        return mapper.map(alert, AlertResponse)

    async def update(self, alert_id: int, command: AlertUpdate) -> AlertResponse:
        changes = {
            name: value
            for name, value in command.model_dump(exclude_unset=True).items()
            if value is not None or name in _CLEARABLE_ALERT_FIELDS
        }
        if "severity" in changes:
            changes["severity"] = canonical_severity(changes["severity"])
        ensure_valid(ALERT_UPDATE_VALIDATOR, AlertUpdate(**changes))
        alert = await self.service.update(alert_id, changes)
        return mapper.map(alert, AlertResponse)

    async def get(self, alert_id: int) -> AlertResponse:
        return mapper.map(await self.service.get(alert_id), AlertResponse)

    async def active(self, request: PageRequest) -> PagedResult[AlertResponse]:
        return to_page(await self.service.active(request), request, AlertResponse)

    async def acknowledge(
        self, alert_id: int, command: AcknowledgeAlertRequest,
    ) -> AlertResponse:
        alert = await self.service.acknowledge(alert_id, command.librarian_id)
        return mapper.map(alert, AlertResponse)

    async def dismiss(self, alert_id: int) -> AlertResponse:
        return mapper.map(await self.service.dismiss(alert_id), AlertResponse)

    async def summary(self) -> AlertSummary:
        return AlertSummary(**await self.service.summary())

    async def circulation_alerts(self) -> CirculationAlerts:
        return CirculationAlerts(**await self.service.circulation_alerts())
