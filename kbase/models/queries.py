"""Search request, result and query log models."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from kbase.models.documents import Document, TechnologyCategory

SortBy = Literal["relevance", "date", "views"]


class QueryType(str, Enum):
    """Kind of search the user asked for."""

    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    HYBRID = "hybrid"


class QueryRecord(BaseModel):
    """One entry of the search history.

    Attributes:
        id: Unique record identifier.
        query: Query text as typed.
        type: Query type.
        timestamp: When the search ran.
        result_count: Total number of matches before pagination.
        latency: Search latency in milliseconds.
        has_results: Whether anything matched.
        selected_document_id: Document the user opened from the results.
    """

    id: str
    query: str
    type: QueryType
    timestamp: datetime
    result_count: int = Field(ge=0)
    latency: float = Field(ge=0)
    has_results: bool
    selected_document_id: str | None = None


class SearchRequest(BaseModel):
    """Full search request with filters, sorting and pagination."""

    query: str = ""
    type: QueryType = QueryType.KEYWORD
    categories: list[TechnologyCategory] | None = None
    tags: list[str] | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
    sort_by: SortBy | None = None


class SearchResult(BaseModel):
    """A page of search results.

    Attributes:
        documents: Documents on the requested page.
        total: Number of matches across all pages.
        latency: Search latency in milliseconds.
        suggestions: Hints shown when nothing matched.
    """

    documents: list[Document]
    total: int
    latency: float
    suggestions: list[str] | None = None


class InstantSearchHit(BaseModel):
    """A scored search-as-you-type hit with highlighted fields."""

    document: Document
    score: int
    highlighted_title: str
    highlighted_summary: str


class InstantSearchResult(BaseModel):
    """Search-as-you-type response."""

    query: str
    hits: list[InstantSearchHit]
    latency: float


class PopularQuery(BaseModel):
    """Aggregated query frequency."""

    query: str
    count: int
    last_searched: datetime


class SimilarityResult(BaseModel):
    """Vector search match."""

    document_id: str
    similarity: float = Field(ge=0.0, le=1.0)
    distance: float | None = None
