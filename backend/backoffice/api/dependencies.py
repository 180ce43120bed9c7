"""API Dependencies — FastAPI factories for handlers and paging.

Invariants:
    - Every handler is built per request around the request-scoped AsyncSession
    - page/pageSize query values are normalized once here with the configured limits
"""

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.config import get_settings
from backoffice.core.paging import PageRequest, normalize_page
from backoffice.handlers.handle_catalog import (
    BookHandlers, CategoryHandlers, ReviewHandlers,
)
from backoffice.handlers.handle_circulation import (
    FineHandlers, ReservationHandlers, TransactionHandlers,
)
from backoffice.handlers.handle_insights import SearchHandlers, StatisticsHandlers
from backoffice.handlers.handle_messaging import AlertHandlers, NotificationHandlers
from backoffice.handlers.handle_operations import (
    AuditHandlers, DashboardHandlers, ImportExportHandlers, ReportHandlers,
)
from backoffice.handlers.handle_people import LibrarianHandlers, MemberHandlers
from backoffice.infrastructure.database import get_db


def page_request(
    page: int | None = Query(None),
    page_size: int | None = Query(None, alias="pageSize"),
) -> PageRequest:
    settings = get_settings()
    return normalize_page(
        page, page_size, settings.default_page_size, settings.max_page_size,
    )


def get_book_handlers(db: AsyncSession = Depends(get_db)) -> BookHandlers:
    return BookHandlers(db)


def get_category_handlers(db: AsyncSession = Depends(get_db)) -> CategoryHandlers:
    return CategoryHandlers(db)


def get_review_handlers(db: AsyncSession = Depends(get_db)) -> ReviewHandlers:
    return ReviewHandlers(db)


def get_member_handlers(db: AsyncSession = Depends(get_db)) -> MemberHandlers:
    return MemberHandlers(db)


def get_librarian_handlers(db: AsyncSession = Depends(get_db)) -> LibrarianHandlers:
    return LibrarianHandlers(db)


def get_transaction_handlers(db: AsyncSession = Depends(get_db)) -> TransactionHandlers:
    return TransactionHandlers(db)


def get_reservation_handlers(db: AsyncSession = Depends(get_db)) -> ReservationHandlers:
    return ReservationHandlers(db)


def get_fine_handlers(db: AsyncSession = Depends(get_db)) -> FineHandlers:
    return FineHandlers(db)


def get_notification_handlers(
    db: AsyncSession = Depends(get_db),
) -> NotificationHandlers:
    return NotificationHandlers(db)


def get_alert_handlers(db: AsyncSession = Depends(get_db)) -> AlertHandlers:
    return AlertHandlers(db)


def get_audit_handlers(db: AsyncSession = Depends(get_db)) -> AuditHandlers:
    return AuditHandlers(db)


def get_report_handlers(db: AsyncSession = Depends(get_db)) -> ReportHandlers:
    return ReportHandlers(db)


def get_import_export_handlers(
    db: AsyncSession = Depends(get_db),
) -> ImportExportHandlers:
    return ImportExportHandlers(db)


def get_dashboard_handlers(db: AsyncSession = Depends(get_db)) -> DashboardHandlers:
    return DashboardHandlers(db)


def get_statistics_handlers(db: AsyncSession = Depends(get_db)) -> StatisticsHandlers:
    return StatisticsHandlers(db)


def get_search_handlers(db: AsyncSession = Depends(get_db)) -> SearchHandlers:
    return SearchHandlers(db)
