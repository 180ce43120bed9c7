"""Statistics Routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from backoffice.api.dependencies import get_statistics_handlers
from backoffice.handlers.handle_insights import StatisticsHandlers
from backoffice.schemas.statistics import (
    OverdueAnalysis, RankingQuery, StatisticsOverview, StatisticsRangeQuery,
    TopBook, TopMember, TrendsQuery, TrendsStatistics,
)

router = APIRouter(prefix="/api/v1/statistics", tags=["statistics"])


def range_query(
    from_date: date | None = Query(None, alias="fromDate"),
    to_date: date | None = Query(None, alias="toDate"),
) -> StatisticsRangeQuery:
    return StatisticsRangeQuery(from_date=from_date, to_date=to_date)


@router.get("/overview", response_model=StatisticsOverview)
async def statistics_overview(
    handlers: StatisticsHandlers = Depends(get_statistics_handlers),
):
    return await handlers.overview()


@router.get("/top-books", response_model=list[TopBook])
async def top_books(
    top_count: int = Query(10, alias="topCount"),
    category_id: int | None = Query(None, alias="categoryId"),
    period: StatisticsRangeQuery = Depends(range_query),
    handlers: StatisticsHandlers = Depends(get_statistics_handlers),
):
    query = RankingQuery(
        top_count=top_count, category_id=category_id,
        from_date=period.from_date, to_date=period.to_date,
    )
    return await handlers.top_books(query)


@router.get("/top-members", response_model=list[TopMember])
async def top_members(
    top_count: int = Query(10, alias="topCount"),
    membership_type: str | None = Query(None, alias="membershipType"),
    period: StatisticsRangeQuery = Depends(range_query),
    handlers: StatisticsHandlers = Depends(get_statistics_handlers),
):
    query = RankingQuery(
        top_count=top_count, membership_type=membership_type,
        from_date=period.from_date, to_date=period.to_date,
    )
    return await handlers.top_members(query)


@router.get("/overdue-analysis", response_model=OverdueAnalysis)
async def overdue_analysis(
    period: StatisticsRangeQuery = Depends(range_query),
    handlers: StatisticsHandlers = Depends(get_statistics_handlers),
):
    return await handlers.overdue_analysis(period)


@router.get("/trends", response_model=TrendsStatistics)
async def monthly_trends(
    year: int | None = Query(None),
    handlers: StatisticsHandlers = Depends(get_statistics_handlers),
):
    return await handlers.trends(TrendsQuery(year=year))
