"""Import/Export Service — bulk CSV import and CSV/JSON export with job records.

Invariants:
    - Import rows pass the same shape checks and field rules as single-record creates
    - A bad row is recorded as "Row N: ..." and never aborts the rest of the file
    - Uniqueness is checked against earlier rows of the same file, then against the database
    - Job status: Completed (no failures), CompletedWithErrors (some), Failed (all rows failed)
    - Export rows carry every column of the entity, in column order
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.csv_codec import header_to_attr, parse_csv, render_csv
from backoffice.core.domain_types import AuditAction, JobStatus
from backoffice.core.errors import ResourceNotFoundError, ValidationFailedError
from backoffice.core.paging import PageRequest
from backoffice.core.validate_catalog import BOOK_VALIDATOR, CATEGORY_VALIDATOR
from backoffice.core.validate_people import MEMBER_VALIDATOR
from backoffice.core.validation import Validator, shape_violations
from backoffice.mapping.profiles import mapper
from backoffice.models import Book, Category, ExportJob, ImportJob, Member
from backoffice.repositories.base import BaseRepository
from backoffice.repositories.catalog import BookRepository, CategoryRepository
from backoffice.repositories.circulation import FineRepository, TransactionRepository
from backoffice.repositories.operations import ExportJobRepository, ImportJobRepository
from backoffice.repositories.people import MemberRepository
from backoffice.schemas.book import BookCreate
from backoffice.schemas.category import CategoryCreate
from backoffice.schemas.member import MemberCreate
from backoffice.services.audit_service import AuditService, snapshot

logger = logging.getLogger(__name__)

_IMPORTS: dict[str, tuple[type, Validator, type]] = {
    "books": (BookCreate, BOOK_VALIDATOR, Book),
    "members": (MemberCreate, MEMBER_VALIDATOR, Member),
    "categories": (CategoryCreate, CATEGORY_VALIDATOR, Category),
}

_EXPORT_SOURCES: dict[str, type[BaseRepository]] = {
    "books": BookRepository,
    "members": MemberRepository,
    "categories": CategoryRepository,
    "transactions": TransactionRepository,
    "fines": FineRepository,
}


def job_status(success: int, failed: int) -> JobStatus:
    if failed == 0:
        return JobStatus.COMPLETED
    if success == 0:
        return JobStatus.FAILED
    return JobStatus.COMPLETED_WITH_ERRORS


class ImportExportService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.import_jobs = ImportJobRepository(db)
        self.export_jobs = ExportJobRepository(db)
        self.books = BookRepository(db)
        self.categories = CategoryRepository(db)
        self.members = MemberRepository(db)
        self.audit = AuditService(db)

    # --- import -----------------------------------------------------------------

    async def import_csv(self, import_type: str, file_name: str, content: str) -> ImportJob:
        kind = import_type.lower()
        schema, validator, model = _IMPORTS[kind]
        rows = parse_csv(content)
        job = ImportJob(
            file_name=file_name,
            file_size=len(content.encode("utf-8")),
            import_type=kind,
            status=JobStatus.PROCESSING.value,
            total_records=len(rows),
        )
        await self.import_jobs.add(job)

        errors: list[str] = []
        seen: set[tuple[str, str]] = set()
        success = 0
        for line_no, row in enumerate(rows, start=2):
            problems = await self._import_row(schema, validator, model, row, seen)
            if problems:
                errors.append(f"Row {line_no}: " + " ".join(problems))
            else:
                success += 1

        job.processed_records = len(rows)
        job.success_records = success
        job.failed_records = len(errors)
        job.errors = errors
        job.status = job_status(success, len(errors)).value
        await self.db.flush()
        self.audit.record(
            AuditAction.IMPORT, "ImportJob", job.id,
            new_values={"import_type": kind, "success": success, "failed": len(errors)},
        )
        await self.db.commit()
        logger.info(
            "Import finished: %d ok, %d failed", success, len(errors),
            extra={"job_id": job.id, "entity": kind},
        )
        return job

    async def _import_row(
        self, schema: type, validator: Validator, model: type,
        row: dict[str, Any], seen: set[tuple[str, str]],
    ) -> list[str]:
        try:
            dto = schema.model_validate({k: v for k, v in row.items() if v is not None})
        except ValidationError as e:
            return [v.message for v in shape_violations(e.errors())]
        violations = validator.validate(dto)
        if violations:
            return [v.message for v in violations]

        keys = self._unique_keys(dto)
        problems = [
            f"Duplicate {name} '{value}' in file."
            for name, value in keys if (name, value) in seen
        ]
        problems = problems or await self._conflicts(dto)
        if problems:
            return problems
        seen.update(keys)
        self.db.add(mapper.map(dto, model))
        await self.db.flush()
        return []

    def _unique_keys(self, dto) -> list[tuple[str, str]]:
        if isinstance(dto, BookCreate):
            return [("ISBN", dto.isbn)]
        if isinstance(dto, MemberCreate):
            return [
                ("MembershipNumber", dto.membership_number),
                ("Email", dto.email.lower()),
            ]
        return [("Name", dto.name.lower())]

    async def _conflicts(self, dto) -> list[str]:
        problems: list[str] = []
        if isinstance(dto, BookCreate):
            if await self.books.get_by_isbn(dto.isbn) is not None:
                problems.append(f"ISBN '{dto.isbn}' already exists.")
            if await self.categories.get_by_id(dto.category_id) is None:
                problems.append(f"Category with id {dto.category_id} was not found.")
        elif isinstance(dto, MemberCreate):
            if await self.members.get_by_membership_number(dto.membership_number):
                problems.append(
                    f"MembershipNumber '{dto.membership_number}' already exists.",
                )
            if await self.members.get_by_email(dto.email):
                problems.append(f"Email '{dto.email}' already exists.")
        elif await self.categories.get_by_name(dto.name) is not None:
            problems.append(f"Category '{dto.name}' already exists.")
        return problems

    async def get_import_job(self, job_id: int) -> ImportJob:
        job = await self.import_jobs.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundError("ImportJob", job_id)
        return job

    async def import_jobs_page(self, request: PageRequest):
        return await self.import_jobs.listing(request)

    # --- export -----------------------------------------------------------------

    async def export(
        self, export_type: str, fmt: str, filters: dict[str, Any] | None = None,
    ) -> tuple[ExportJob, str]:
        kind, fmt = export_type.lower(), fmt.lower()
        repository = _EXPORT_SOURCES[kind](self.db)
        model = repository.model
        columns = [attr.key for attr in sa_inspect(model).column_attrs]
        criteria = self._filter_criteria(model, columns, filters or {})
        entities = await repository.find_all(*criteria, order_by=[model.id])
        rows = [snapshot(e) for e in entities]
        content = render_csv(rows, columns) if fmt == "csv" else json.dumps(rows, indent=2)

        now = datetime.now(timezone.utc)
        job = ExportJob(
            export_type=kind,
            format=fmt,
            filters=filters,
            status=JobStatus.COMPLETED.value,
            total_records=len(rows),
            processed_records=len(rows),
            file_name=f"{kind}_{now:%Y%m%d%H%M%S}.{fmt}",
            file_size=len(content.encode("utf-8")),
        )
        await self.export_jobs.add(job)
        await self.db.commit()
        logger.info("Export finished", extra={"job_id": job.id, "entity": kind})
        return job, content

    def _filter_criteria(self, model: type, columns: list[str], filters: dict[str, Any]):
        filters = {header_to_attr(key): value for key, value in filters.items()}
        unknown = [key for key in filters if key not in columns]
        if unknown:
            raise ValidationFailedError({
                "Filters": [f"Unknown filter '{key}'." for key in unknown],
            })
        return [getattr(model, key) == value for key, value in filters.items()]

    async def get_export_job(self, job_id: int) -> ExportJob:
        job = await self.export_jobs.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundError("ExportJob", job_id)
        return job

    async def export_jobs_page(self, request: PageRequest):
        return await self.export_jobs.listing(request)
