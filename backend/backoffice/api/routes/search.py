"""Search Routes."""

from fastapi import APIRouter, Depends, Query

from backoffice.api.dependencies import get_search_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_insights import SearchHandlers
from backoffice.schemas.search import (
    GlobalSearchQuery, SearchResult, SearchSuggestion, SuggestionQuery,
)

router = APIRouter(prefix="/api/v1/search", tags=["search"])


@router.get("/global", response_model=SearchResult)
async def global_search(
    query: str | None = Query(None),
    source: str | None = Query(None, alias="type"),
    paging: PageRequest = Depends(page_request),
    handlers: SearchHandlers = Depends(get_search_handlers),
):
    return await handlers.global_search(
        GlobalSearchQuery(query=query, type=source), paging,
    )


@router.get("/suggestions", response_model=list[SearchSuggestion])
async def search_suggestions(
    query: str | None = Query(None),
    max_results: int = Query(10, alias="maxResults"),
    handlers: SearchHandlers = Depends(get_search_handlers),
):
    return await handlers.suggestions(
        SuggestionQuery(query=query, max_results=max_results),
    )
