"""Dashboard Schemas."""

from datetime import datetime

from backoffice.schemas.common import CamelModel, Money


class RecentActivity(CamelModel):
    id: int
    type: str
    description: str
    timestamp: datetime


class DashboardOverview(CamelModel):
    total_books: int
    available_books: int
    borrowed_books: int
    overdue_books: int
    total_members: int
    active_members: int
    total_transactions: int
    overdue_transactions: int
    total_fines: Money
    active_reservations: int
    recent_activities: list[RecentActivity]
