"""Notification Service — member-addressed messages and their read state.

Invariants:
    - notify() adds to the caller's unit of work without committing; other services
      use it for FineIssued / BookAvailable messages
    - New notifications start Unread; marking read sets read_at once
    - Bulk send skips unknown members and reports them instead of failing the batch
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.domain_types import NotificationStatus, NotificationType
from backoffice.core.errors import ResourceNotFoundError
from backoffice.core.paging import PageRequest
from backoffice.models import Notification
from backoffice.repositories.operations import NotificationRepository
from backoffice.repositories.people import MemberRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationRepository(db)
        self.members = MemberRepository(db)

    def notify(
        self,
        member_id: int,
        type_: NotificationType,
        title: str,
        message: str,
        related_entity_id: int | None = None,
        related_entity_type: str | None = None,
    ) -> Notification:
        notification = Notification(
            member_id=member_id,
            title=title,
            message=message,
            type=type_.value,
            status=NotificationStatus.UNREAD.value,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(notification)
        return notification

    async def create(self, notification: Notification) -> Notification:
        if await self.members.get_by_id(notification.member_id) is None:
            raise ResourceNotFoundError("Member", notification.member_id)
        notification.status = NotificationStatus.UNREAD.value
        await self.notifications.add(notification)
        await self.db.commit()
        return await self.notifications.reload(notification)

    async def bulk_send(
        self,
        member_ids: list[int],
        type_: NotificationType,
        title: str,
        message: str,
        related_entity_id: int | None = None,
        related_entity_type: str | None = None,
    ) -> dict[str, Any]:
        unique_ids = list(dict.fromkeys(member_ids))
        known = await self.members.get_many(unique_ids)
        errors: list[str] = []
        sent = 0
        for member_id in unique_ids:
            if member_id not in known:
                errors.append(f"Member with id {member_id} was not found")
                continue
            self.notify(
                member_id, type_, title, message,
                related_entity_id, related_entity_type,
            )
            sent += 1
        await self.db.commit()
        logger.info("Bulk notification sent to %d member(s)", sent)
        return {
            "total_sent": len(unique_ids),
            "success_count": sent,
            "failure_count": len(errors),
            "errors": errors,
        }

    async def get(self, notification_id: int) -> Notification:
        notification = await self.notifications.get_by_id(notification_id)
        if notification is None:
            raise ResourceNotFoundError("Notification", notification_id)
        return notification

    async def by_member(
        self, member_id: int, request: PageRequest, unread_only: bool = False,
    ) -> tuple[list[Notification], int]:
        return await self.notifications.by_member(member_id, request, unread_only)

    async def mark_read(self, notification_id: int) -> Notification:
        notification = await self.get(notification_id)
        if notification.status == NotificationStatus.UNREAD:
            notification.status = NotificationStatus.READ.value
            notification.read_at = datetime.now(timezone.utc)
            await self.db.commit()
        return notification

    async def mark_many_read(self, notification_ids: list[int]) -> int:
        changed = await self.notifications.mark_read(
            notification_ids, datetime.now(timezone.utc),
        )
        await self.db.commit()
        return changed

    async def delete(self, notification_id: int) -> None:
        notification = await self.get(notification_id)
        await self.notifications.delete(notification)
        await self.db.commit()

    async def member_stats(self, member_id: int) -> dict[str, Any]:
        member = await self.members.get_by_id(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", member_id)
        counts = await self.notifications.member_counts(member_id)
        return {
            "member_id": member.id,
            "member_name": member.full_name,
            "total_notifications": sum(counts.values()),
            "unread_count": counts.get(NotificationStatus.UNREAD.value, 0),
            "read_count": counts.get(NotificationStatus.READ.value, 0),
            "last_notification_date": await self.notifications.last_created_at(member_id),
        }
