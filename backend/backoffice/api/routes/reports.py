"""Report Routes."""

from fastapi import APIRouter, Depends, Query, Response, status

from backoffice.api.dependencies import get_report_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_operations import ReportHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.report import (
    GenerateReportRequest, ReportListItem, ReportResponse, ReportTypeInfo,
)

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/types", response_model=list[ReportTypeInfo])
async def list_report_types(handlers: ReportHandlers = Depends(get_report_handlers)):
    return handlers.report_types()


@router.post(
    "/generate", response_model=ReportResponse, status_code=status.HTTP_201_CREATED,
)
async def generate_report(
    body: GenerateReportRequest,
    handlers: ReportHandlers = Depends(get_report_handlers),
):
    return await handlers.generate(body)


@router.get("", response_model=PagedResult[ReportListItem])
async def list_reports(
    report_type: str | None = Query(None, alias="reportType"),
    paging: PageRequest = Depends(page_request),
    handlers: ReportHandlers = Depends(get_report_handlers),
):
    return await handlers.listing(paging, report_type)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: int, handlers: ReportHandlers = Depends(get_report_handlers)):
    return await handlers.get(report_id)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: int, handlers: ReportHandlers = Depends(get_report_handlers),
):
    await handlers.delete(report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
