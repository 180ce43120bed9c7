"""Notification Schemas."""

from datetime import datetime

from backoffice.core.domain_types import NotificationStatus, NotificationType
from backoffice.schemas.common import CamelModel


class NotificationCreate(CamelModel):
    member_id: int
    title: str
    message: str
    type: NotificationType = NotificationType.GENERAL
    related_entity_id: int | None = None
    related_entity_type: str | None = None


class BulkNotificationRequest(CamelModel):
    member_ids: list[int]
    title: str
    message: str
    type: NotificationType = NotificationType.GENERAL
    related_entity_id: int | None = None
    related_entity_type: str | None = None


class MarkReadRequest(CamelModel):
    notification_ids: list[int]


class NotificationResponse(CamelModel):
    id: int
    member_id: int
    member_name: str | None = None
    title: str
    message: str
    type: NotificationType
    status: NotificationStatus
    created_at: datetime
    read_at: datetime | None = None
    related_entity_id: int | None = None
    related_entity_type: str | None = None
    is_email_sent: bool


class BulkNotificationResult(CamelModel):
    total_sent: int
    success_count: int
    failure_count: int
    errors: list[str]


class NotificationStats(CamelModel):
    member_id: int
    member_name: str
    total_notifications: int
    unread_count: int
    read_count: int
    last_notification_date: datetime | None = None
