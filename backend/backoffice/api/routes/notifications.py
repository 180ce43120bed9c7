"""Notification Routes."""

from fastapi import APIRouter, Depends, Response, status

from backoffice.api.dependencies import get_notification_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_messaging import NotificationHandlers
from backoffice.schemas.common import MessageResponse, PagedResult
from backoffice.schemas.notification import (
    BulkNotificationRequest, BulkNotificationResult, MarkReadRequest,
    NotificationCreate, NotificationResponse, NotificationStats,
)

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.post(
    "", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_notification(
    body: NotificationCreate,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.create(body)


@router.post("/bulk", response_model=BulkNotificationResult)
async def send_bulk_notification(
    body: BulkNotificationRequest,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.bulk_send(body)


@router.post("/mark-read", response_model=MessageResponse)
async def mark_notifications_read(
    body: MarkReadRequest,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.mark_many_read(body)


@router.get("/member/{member_id}", response_model=PagedResult[NotificationResponse])
async def list_member_notifications(
    member_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.by_member(member_id, paging)


@router.get(
    "/member/{member_id}/unread", response_model=PagedResult[NotificationResponse],
)
async def list_unread_notifications(
    member_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.by_member(member_id, paging, unread_only=True)


@router.get("/member/{member_id}/stats", response_model=NotificationStats)
async def member_notification_stats(
    member_id: int,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.member_stats(member_id)


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: int,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.get(notification_id)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    return await handlers.mark_read(notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    handlers: NotificationHandlers = Depends(get_notification_handlers),
):
    await handlers.delete(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
