"""Search endpoints: paginated search, search-as-you-type and vector search."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from kbase.knowledge.service import KnowledgeBaseService, get_knowledge_base
from kbase.models.queries import (
    InstantSearchHit,
    InstantSearchResult,
    SearchRequest,
    SearchResult,
    SimilarityResult,
)
from kbase.search.highlight import highlight_text
from kbase.search.relevance import INSTANT_SEARCH_LIMIT, instant_search

router = APIRouter(prefix="/search", tags=["search"])

KnowledgeBase = Annotated[KnowledgeBaseService, Depends(get_knowledge_base)]


@router.post("", response_model=SearchResult)
async def search(request: SearchRequest, kb: KnowledgeBase) -> SearchResult:
    """Filter, rank and paginate documents. The query is logged."""
    return kb.search(request)


@router.get("/instant", response_model=InstantSearchResult)
async def search_instant(
    kb: KnowledgeBase,
    q: str = "",
    limit: Annotated[int, Query(ge=1, le=INSTANT_SEARCH_LIMIT)] = INSTANT_SEARCH_LIMIT,
) -> InstantSearchResult:
    """Rank every document against the query and highlight the matches."""
    hits, latency = instant_search(kb.documents, q, limit)
    query = q.strip()

    return InstantSearchResult(
        query=query,
        hits=[
            InstantSearchHit(
                document=doc,
                score=score,
                highlighted_title=highlight_text(doc.title, query),
                highlighted_summary=highlight_text(doc.summary, query),
            )
            for doc, score in hits
        ],
        latency=latency,
    )


@router.get("/vector", response_model=list[SimilarityResult])
async def search_vector(
    kb: KnowledgeBase,
    q: str = "",
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[SimilarityResult]:
    return kb.vector_search(q, limit)
