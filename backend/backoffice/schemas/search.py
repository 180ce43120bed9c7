"""Search Schemas."""

from typing import Any

from backoffice.schemas.common import CamelModel, PagedResult


class GlobalSearchQuery(CamelModel):
    query: str | None = None
    type: str | None = None


class SuggestionQuery(CamelModel):
    query: str | None = None
    max_results: int = 10


class SearchHit(CamelModel):
    id: int
    type: str
    title: str
    description: str
    metadata: dict[str, Any]


class SearchResult(PagedResult[SearchHit]):
    query: str


class SearchSuggestion(CamelModel):
    text: str
    type: str
    relevance: int
