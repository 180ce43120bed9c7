"""Operations Handlers — audit trail, reports, import/export jobs and the dashboard."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.paging import PageRequest
from backoffice.core.validate_operations import (
    EXPORT_VALIDATOR, IMPORT_VALIDATOR, REPORT_VALIDATOR,
)
from backoffice.handlers.common import ensure_valid, to_page
from backoffice.mapping.profiles import mapper
from backoffice.schemas.audit import AuditLogResponse, AuditSummary
from backoffice.schemas.common import PagedResult
from backoffice.schemas.dashboard import DashboardOverview
from backoffice.schemas.import_export import (
    ExportJobResponse, ExportRequest, ImportJobResponse, ImportRequest,
)
from backoffice.schemas.report import (
    GenerateReportRequest, ReportListItem, ReportResponse, ReportTypeInfo,
)
from backoffice.services.audit_service import AuditService
from backoffice.services.dashboard_service import DashboardService
from backoffice.services.import_export_service import ImportExportService
from backoffice.services.report_service import ReportService


class AuditHandlers:
    def __init__(self, db: AsyncSession):
        self.service = AuditService(db)

    async def search(
        self, request: PageRequest, action: str | None = None,
        entity_type: str | None = None, from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> PagedResult[AuditLogResponse]:
        result = await self.service.search(request, action, entity_type, from_date, to_date)
        return to_page(result, request, AuditLogResponse)

    async def get(self, log_id: int) -> AuditLogResponse:
        return mapper.map(await self.service.get(log_id), AuditLogResponse)

    async def history(self, entity_type: str, entity_id: int) -> list[AuditLogResponse]:
        entries = await self.service.history(entity_type, entity_id)
        return mapper.map_many(entries, AuditLogResponse)

    async def summary(self) -> AuditSummary:
        return AuditSummary(**await self.service.summary())


class ReportHandlers:
    def __init__(self, db: AsyncSession):
        self.service = ReportService(db)

    def report_types(self) -> list[ReportTypeInfo]:
        return [ReportTypeInfo(**info) for info in self.service.report_types()]

    async def generate(self, command: GenerateReportRequest) -> ReportResponse:
        ensure_valid(REPORT_VALIDATOR, command)
        report = await self.service.generate(
            command.report_type.lower(), command.format.lower(),
            command.from_date, command.to_date, command.parameters,
        )
        return mapper.map(report, ReportResponse)

    async def get(self, report_id: int) -> ReportResponse:
        return mapper.map(await self.service.get(report_id), ReportResponse)

    async def listing(
        self, request: PageRequest, report_type: str | None = None,
    ) -> PagedResult[ReportListItem]:
        return to_page(
            await self.service.listing(request, report_type), request, ReportListItem,
        )

    async def delete(self, report_id: int) -> None:
        await self.service.delete(report_id)


class ImportExportHandlers:
    def __init__(self, db: AsyncSession):
        self.service = ImportExportService(db)

    async def import_csv(self, command: ImportRequest) -> ImportJobResponse:
        ensure_valid(IMPORT_VALIDATOR, command)
        job = await self.service.import_csv(
            command.import_type, command.file_name, command.content,
        )
        return mapper.map(job, ImportJobResponse)

    async def export(self, command: ExportRequest) -> ExportJobResponse:
        ensure_valid(EXPORT_VALIDATOR, command)
        job, content = await self.service.export(
            command.export_type, command.format, command.filters,
        )
        response = mapper.map(job, ExportJobResponse)
        response.content = content
        return response

    async def get_import_job(self, job_id: int) -> ImportJobResponse:
        return mapper.map(await self.service.get_import_job(job_id), ImportJobResponse)

    async def import_jobs(self, request: PageRequest) -> PagedResult[ImportJobResponse]:
        return to_page(await self.service.import_jobs_page(request), request, ImportJobResponse)

    async def get_export_job(self, job_id: int) -> ExportJobResponse:
        return mapper.map(await self.service.get_export_job(job_id), ExportJobResponse)

    async def export_jobs(self, request: PageRequest) -> PagedResult[ExportJobResponse]:
        return to_page(await self.service.export_jobs_page(request), request, ExportJobResponse)


class DashboardHandlers:
    def __init__(self, db: AsyncSession):
        self.service = DashboardService(db)

    async def overview(self) -> DashboardOverview:
        return DashboardOverview(**await self.service.overview())
