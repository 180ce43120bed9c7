"""Audit Routes — read-only access to the audit trail."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from backoffice.api.dependencies import get_audit_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_operations import AuditHandlers
from backoffice.schemas.audit import AuditLogResponse, AuditSummary
from backoffice.schemas.common import PagedResult

router = APIRouter(prefix="/api/v1/audit", tags=["audit"])


@router.get("", response_model=PagedResult[AuditLogResponse])
async def search_audit_logs(
    action: str | None = Query(None),
    entity_type: str | None = Query(None, alias="entityType"),
    from_date: datetime | None = Query(None, alias="fromDate"),
    to_date: datetime | None = Query(None, alias="toDate"),
    paging: PageRequest = Depends(page_request),
    handlers: AuditHandlers = Depends(get_audit_handlers),
):
    return await handlers.search(paging, action, entity_type, from_date, to_date)


@router.get("/summary", response_model=AuditSummary)
async def audit_summary(handlers: AuditHandlers = Depends(get_audit_handlers)):
    return await handlers.summary()


@router.get("/entity/{entity_type}/{entity_id}", response_model=list[AuditLogResponse])
async def entity_history(
    entity_type: str, entity_id: int,
    handlers: AuditHandlers = Depends(get_audit_handlers),
):
    """Every audit entry for one entity, newest first."""
    return await handlers.history(entity_type, entity_id)


@router.get("/{log_id}", response_model=AuditLogResponse)
async def get_audit_log(log_id: int, handlers: AuditHandlers = Depends(get_audit_handlers)):
    return await handlers.get(log_id)
