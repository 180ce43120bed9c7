"""Report Service — on-demand statistical reports stored as JSON snapshots.

Invariants:
    - Every report body has "summary" (scalar figures) and "rows" (tabular detail)
    - csv format additionally stores the rows rendered as CSV text under "csv"
    - Date ranges are inclusive of both endpoints (to_date covers the whole day)
    - A generated report is immutable; it can only be read or deleted
"""

import logging
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.circulation_policy import (
    as_utc, days_overdue, outstanding_balance, to_money,
)
from backoffice.core.csv_codec import render_csv
from backoffice.core.domain_types import (
    FineStatus, JobStatus, MemberStatus, PAYABLE_FINE_STATUSES, ReportType,
    TransactionStatus,
)
from backoffice.core.errors import ResourceNotFoundError
from backoffice.core.paging import PageRequest
from backoffice.core.statistics import day_range
from backoffice.models import Member, Report
from backoffice.repositories.catalog import BookRepository
from backoffice.repositories.circulation import FineRepository, TransactionRepository
from backoffice.repositories.operations import ReportRepository
from backoffice.repositories.people import MemberRepository

logger = logging.getLogger(__name__)

REPORT_CATALOG: dict[ReportType, tuple[str, str]] = {
    ReportType.CIRCULATION: (
        "Circulation", "Loans, returns and renewals over a period",
    ),
    ReportType.OVERDUE: (
        "Overdue Items", "Active loans past their due date",
    ),
    ReportType.FINES: (
        "Fines", "Fines issued, paid and outstanding",
    ),
    ReportType.INVENTORY: (
        "Inventory", "Copies per category and availability",
    ),
    ReportType.MEMBER_ACTIVITY: (
        "Member Activity", "Borrowing activity per member",
    ),
}

_PENDING = {s.value for s in PAYABLE_FINE_STATUSES}


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.reports = ReportRepository(db)
        self.transactions = TransactionRepository(db)
        self.fines = FineRepository(db)
        self.books = BookRepository(db)
        self.members = MemberRepository(db)

    def report_types(self) -> list[dict[str, Any]]:
        return [
            {
                "name": kind.value,
                "display_name": display,
                "description": description,
                "supported_formats": ["json", "csv"],
            }
            for kind, (display, description) in REPORT_CATALOG.items()
        ]

    async def generate(
        self,
        report_type: str,
        fmt: str = "json",
        from_date: date | None = None,
        to_date: date | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Report:
        kind = ReportType(report_type)
        start, end = day_range(from_date, to_date)
        builders = {
            ReportType.CIRCULATION: self._circulation,
            ReportType.OVERDUE: self._overdue,
            ReportType.FINES: self._fines,
            ReportType.INVENTORY: self._inventory,
            ReportType.MEMBER_ACTIVITY: self._member_activity,
        }
        data = await builders[kind](start, end)
        if fmt == "csv":
            columns = list(data["rows"][0]) if data["rows"] else []
            data["csv"] = render_csv(data["rows"], columns)

        now = datetime.now(timezone.utc)
        report = Report(
            report_type=kind.value,
            format=fmt,
            status=JobStatus.COMPLETED.value,
            parameters={
                **(parameters or {}),
                "from_date": from_date.isoformat() if from_date else None,
                "to_date": to_date.isoformat() if to_date else None,
            },
            data=data,
            generated_at=now,
        )
        await self.reports.add(report)
        await self.db.commit()
        logger.info(
            "Report generated: %s", kind.value,
            extra={"entity": "Report", "entity_id": report.id},
        )
        return report

    async def get(self, report_id: int) -> Report:
        report = await self.reports.get_by_id(report_id)
        if report is None:
            raise ResourceNotFoundError("Report", report_id)
        return report

    async def listing(self, request: PageRequest, report_type: str | None = None):
        return await self.reports.listing(request, report_type)

    async def delete(self, report_id: int) -> None:
        report = await self.get(report_id)
        await self.reports.delete(report)
        await self.db.commit()

    # --- builders ---------------------------------------------------------------

    async def _circulation(self, start, end) -> dict[str, Any]:
        loans = await self.transactions.checked_out_between(start, end)
        by_status = Counter(t.status for t in loans)
        rows = [
            {
                "transaction_number": t.transaction_number,
                "book_title": t.book.title,
                "member_name": t.member.full_name,
                "checkout_date": as_utc(t.checkout_date).isoformat(),
                "due_date": as_utc(t.due_date).isoformat(),
                "status": t.status,
                "renewal_count": t.renewal_count,
            }
            for t in loans
        ]
        return {
            "summary": {
                "total_loans": len(loans),
                "returned": by_status.get(TransactionStatus.RETURNED.value, 0),
                "active": by_status.get(TransactionStatus.ACTIVE.value, 0),
                "renewals": sum(t.renewal_count for t in loans),
                "fines_accrued": str(sum(
                    (to_money(t.fine_amount) for t in loans), to_money(0),
                )),
            },
            "rows": rows,
        }

    async def _overdue(self, start, end) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        loans = await self.transactions.all_overdue(now)
        rows = [
            {
                "transaction_number": t.transaction_number,
                "book_title": t.book.title,
                "member_name": t.member.full_name,
                "due_date": as_utc(t.due_date).isoformat(),
                "days_overdue": days_overdue(t.due_date, now),
            }
            for t in loans
        ]
        return {"summary": {"overdue_loans": len(loans)}, "rows": rows}

    async def _fines(self, start, end) -> dict[str, Any]:
        fines = await self.fines.issued_between(start, end)
        pending = [f for f in fines if f.status in _PENDING]
        rows = [
            {
                "fine_number": f.fine_number,
                "member_name": f.member.full_name,
                "type": f.type,
                "amount": str(to_money(f.amount)),
                "paid_amount": str(to_money(f.paid_amount)),
                "status": f.status,
                "issue_date": as_utc(f.issue_date).isoformat(),
            }
            for f in fines
        ]
        return {
            "summary": {
                "total_fines": len(fines),
                "total_amount": str(sum((to_money(f.amount) for f in fines), to_money(0))),
                "paid_fines": sum(1 for f in fines if f.status == FineStatus.PAID),
                "outstanding_amount": str(sum(
                    (outstanding_balance(f.amount, f.paid_amount) for f in pending),
                    to_money(0),
                )),
            },
            "rows": rows,
        }

    async def _inventory(self, start, end) -> dict[str, Any]:
        total, available = await self.books.copy_totals()
        by_category = await self.books.count_by_category()
        rows = [
            {"category": name, "titles": count}
            for name, count in sorted(by_category.items())
        ]
        return {
            "summary": {
                "titles": await self.books.count(),
                "total_copies": total,
                "available_copies": available,
                "on_loan_copies": total - available,
            },
            "rows": rows,
        }

    async def _member_activity(self, start, end) -> dict[str, Any]:
        loans = await self.transactions.checked_out_between(start, end)
        per_member = Counter(t.member_id for t in loans)
        members = await self.members.get_many(list(per_member))
        rows = [
            {
                "membership_number": members[member_id].membership_number,
                "member_name": members[member_id].full_name,
                "loans": count,
            }
            for member_id, count in per_member.most_common()
            if member_id in members
        ]
        return {
            "summary": {
                "total_members": await self.members.count(),
                "active_members": await self.members.count(
                    Member.status == MemberStatus.ACTIVE.value,
                ),
                "borrowing_members": len(per_member),
            },
            "rows": rows,
        }
