"""Insight Handlers — statistics views and global search."""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.paging import PageRequest
from backoffice.core.validate_insights import (
    GLOBAL_SEARCH_VALIDATOR, RANKING_VALIDATOR, STATISTICS_RANGE_VALIDATOR,
    SUGGESTION_VALIDATOR, TRENDS_VALIDATOR,
)
from backoffice.handlers.common import ensure_valid
from backoffice.schemas.search import (
    GlobalSearchQuery, SearchHit, SearchResult, SearchSuggestion, SuggestionQuery,
)
from backoffice.schemas.statistics import (
    OverdueAnalysis, RankingQuery, StatisticsOverview, StatisticsRangeQuery,
    TopBook, TopMember, TrendsQuery, TrendsStatistics,
)
from backoffice.services.search_service import SearchService
from backoffice.services.statistics_service import StatisticsService


class StatisticsHandlers:
    def __init__(self, db: AsyncSession):
        self.service = StatisticsService(db)

    async def overview(self) -> StatisticsOverview:
        return StatisticsOverview(**await self.service.overview())

    async def top_books(self, query: RankingQuery) -> list[TopBook]:
        ensure_valid(RANKING_VALIDATOR, query)
        rows = await self.service.top_books(
            query.top_count, query.from_date, query.to_date, query.category_id,
        )
        return [TopBook(**row) for row in rows]

    async def top_members(self, query: RankingQuery) -> list[TopMember]:
        ensure_valid(RANKING_VALIDATOR, query)
        rows = await self.service.top_members(
            query.top_count, query.from_date, query.to_date, query.membership_type,
        )
        return [TopMember(**row) for row in rows]

    async def overdue_analysis(self, query: StatisticsRangeQuery) -> OverdueAnalysis:
        ensure_valid(STATISTICS_RANGE_VALIDATOR, query)
        return OverdueAnalysis(
            **await self.service.overdue_analysis(query.from_date, query.to_date),
        )

    async def trends(self, query: TrendsQuery) -> TrendsStatistics:
        ensure_valid(TRENDS_VALIDATOR, query)
        year = query.year or datetime.now(timezone.utc).year
        return TrendsStatistics(**await self.service.monthly_trends(year))


class SearchHandlers:
    def __init__(self, db: AsyncSession):
        self.service = SearchService(db)

    async def global_search(
        self, query: GlobalSearchQuery, request: PageRequest,
    ) -> SearchResult:
        ensure_valid(GLOBAL_SEARCH_VALIDATOR, query)
        hits, total = await self.service.global_search(query.query, request, query.type)
        return SearchResult(
            query=query.query.strip(),
            items=[SearchHit(**hit) for hit in hits],
            total_count=total,
            page=request.page,
            page_size=request.page_size,
        )

    async def suggestions(self, query: SuggestionQuery) -> list[SearchSuggestion]:
        ensure_valid(SUGGESTION_VALIDATOR, query)
        rows = await self.service.suggestions(query.query, query.max_results)
        return [SearchSuggestion(**row) for row in rows]
