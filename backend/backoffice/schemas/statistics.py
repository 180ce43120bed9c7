"""Statistics Schemas — query objects for ranges/rankings and the aggregate views."""

from datetime import date

from backoffice.schemas.common import CamelModel, Money


class StatisticsRangeQuery(CamelModel):
    from_date: date | None = None
    to_date: date | None = None


class RankingQuery(StatisticsRangeQuery):
    top_count: int = 10
    category_id: int | None = None
    membership_type: str | None = None


class TrendsQuery(CamelModel):
    year: int | None = None


class StatisticsOverview(CamelModel):
    total_books: int
    total_copies: int
    available_copies: int
    total_members: int
    active_members: int
    total_transactions: int
    active_loans: int
    overdue_items: int
    total_fines: Money
    outstanding_fines: Money
    active_reservations: int
    books_by_category: dict[str, int]
    members_by_type: dict[str, int]


class TopBook(CamelModel):
    book_id: int
    title: str
    author: str
    checkout_count: int
    reservation_count: int
    average_rating: float
    review_count: int
    price: Money | None = None


class TopMember(CamelModel):
    member_id: int
    member_name: str
    membership_type: str
    checkout_count: int
    overdue_count: int
    total_fines: Money
    membership_start_date: date


class OverduePattern(CamelModel):
    pattern: str
    count: int
    percentage: float


class MemberOverdue(CamelModel):
    member_id: int
    member_name: str
    overdue_count: int
    total_fines: Money
    average_days_overdue: float


class OverdueAnalysis(CamelModel):
    from_date: date | None = None
    to_date: date | None = None
    total_overdue_books: int
    total_overdue_members: int
    total_fines: Money
    average_days_overdue: float
    overdue_patterns: list[OverduePattern]
    top_overdue_members: list[MemberOverdue]


class MonthlyTrend(CamelModel):
    month: int
    borrowed: int
    returned: int
    new_members: int
    fines_issued: int
    fines_collected: Money


class TrendsStatistics(CamelModel):
    year: int
    months: list[MonthlyTrend]
    total_borrowed: int
    total_returned: int
    total_new_members: int
    total_fines_collected: Money
