"""Import/Export Schemas."""

from datetime import datetime
from typing import Any

from backoffice.schemas.common import CamelModel


class ImportRequest(CamelModel):
    import_type: str
    file_name: str = "upload.csv"
    content: str


class ImportJobResponse(CamelModel):
    id: int
    file_name: str
    file_size: int
    import_type: str
    status: str
    total_records: int
    processed_records: int
    success_records: int
    failed_records: int
    errors: list[str]
    created_at: datetime
    updated_at: datetime


class ExportRequest(CamelModel):
    export_type: str
    format: str = "csv"
    filters: dict[str, Any] | None = None


class ExportJobResponse(CamelModel):
    id: int
    export_type: str
    format: str
    status: str
    total_records: int
    processed_records: int
    file_name: str
    file_size: int
    created_at: datetime
    updated_at: datetime
    content: str | None = None
