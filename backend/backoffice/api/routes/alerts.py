"""Alert Routes — staff alerts and computed circulation warnings."""

from fastapi import APIRouter, Depends, status

from backoffice.api.dependencies import get_alert_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_messaging import AlertHandlers
from backoffice.schemas.alert import (
    AcknowledgeAlertRequest, AlertCreate, AlertResponse, AlertSummary,
    AlertUpdate, CirculationAlerts,
)
from backoffice.schemas.common import PagedResult

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])


@router.post("", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    body: AlertCreate, handlers: AlertHandlers = Depends(get_alert_handlers),
):
    return await handlers.create(body)


@router.get("/active", response_model=PagedResult[AlertResponse])
async def list_active_alerts(
    paging: PageRequest = Depends(page_request),
    handlers: AlertHandlers = Depends(get_alert_handlers),
):
    return await handlers.active(paging)


@router.get("/summary", response_model=AlertSummary)
async def alert_summary(handlers: AlertHandlers = Depends(get_alert_handlers)):
    return await handlers.summary()


@router.get("/circulation", response_model=CirculationAlerts)
async def circulation_alerts(handlers: AlertHandlers = Depends(get_alert_handlers)):
    """Overdue, due-soon, unpaid-fine and expiring counts computed now."""
    return await handlers.circulation_alerts()


@router.get("/{alert_id}", response_model=AlertResponse)
async def get_alert(alert_id: int, handlers: AlertHandlers = Depends(get_alert_handlers)):
    return await handlers.get(alert_id)


@router.put("/{alert_id}", response_model=AlertResponse)
async def update_alert(
    alert_id: int, body: AlertUpdate,
    handlers: AlertHandlers = Depends(get_alert_handlers),
):
    return await handlers.update(alert_id, body)


@router.post("/{alert_id}/acknowledge", response_model=AlertResponse)
async def acknowledge_alert(
    alert_id: int,
    body: AcknowledgeAlertRequest | None = None,
    handlers: AlertHandlers = Depends(get_alert_handlers),
):
    return await handlers.acknowledge(alert_id, body or AcknowledgeAlertRequest())


@router.post("/{alert_id}/dismiss", response_model=AlertResponse)
async def dismiss_alert(
    alert_id: int, handlers: AlertHandlers = Depends(get_alert_handlers),
):
    return await handlers.dismiss(alert_id)
