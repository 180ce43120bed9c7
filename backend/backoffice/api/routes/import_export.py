"""Import/Export Routes — CSV import and CSV/JSON export jobs."""

from fastapi import APIRouter, Depends, status

from backoffice.api.dependencies import get_import_export_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_operations import ImportExportHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.import_export import (
    ExportJobResponse, ExportRequest, ImportJobResponse, ImportRequest,
)

router = APIRouter(prefix="/api/v1/import-export", tags=["import-export"])


@router.post(
    "/import", response_model=ImportJobResponse, status_code=status.HTTP_201_CREATED,
)
async def import_records(
    body: ImportRequest,
    handlers: ImportExportHandlers = Depends(get_import_export_handlers),
):
    """Import CSV text; bad rows are reported on the job, good rows are saved."""
    return await handlers.import_csv(body)


@router.post("/export", response_model=ExportJobResponse)
async def export_records(
    body: ExportRequest,
    handlers: ImportExportHandlers = Depends(get_import_export_handlers),
):
    return await handlers.export(body)


@router.get("/import/jobs", response_model=PagedResult[ImportJobResponse])
async def list_import_jobs(
    paging: PageRequest = Depends(page_request),
    handlers: ImportExportHandlers = Depends(get_import_export_handlers),
):
    return await handlers.import_jobs(paging)


@router.get("/import/jobs/{job_id}", response_model=ImportJobResponse)
async def get_import_job(
    job_id: int,
    handlers: ImportExportHandlers = Depends(get_import_export_handlers),
):
    return await handlers.get_import_job(job_id)


@router.get("/export/jobs", response_model=PagedResult[ExportJobResponse])
async def list_export_jobs(
    paging: PageRequest = Depends(page_request),
    handlers: ImportExportHandlers = Depends(get_import_export_handlers),
):
    return await handlers.export_jobs(paging)


@router.get("/export/jobs/{job_id}", response_model=ExportJobResponse)
async def get_export_job(
    job_id: int,
    handlers: ImportExportHandlers = Depends(get_import_export_handlers),
):
    return await handlers.get_export_job(job_id)
