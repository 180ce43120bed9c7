"""Report Schemas."""

from datetime import date, datetime
from typing import Any

from backoffice.schemas.common import CamelModel


class GenerateReportRequest(CamelModel):
    report_type: str
    format: str = "json"
    from_date: date | None = None
    to_date: date | None = None
    parameters: dict[str, Any] | None = None


class ReportResponse(CamelModel):
    id: int
    report_type: str
    format: str
    status: str
    parameters: dict[str, Any] | None = None
    data: dict[str, Any] | None = None
    generated_at: datetime | None = None
    created_at: datetime


class ReportListItem(CamelModel):
    id: int
    report_type: str
    format: str
    status: str
    created_at: datetime
    generated_at: datetime | None = None


class ReportTypeInfo(CamelModel):
    name: str
    display_name: str
    description: str
    supported_formats: list[str]
