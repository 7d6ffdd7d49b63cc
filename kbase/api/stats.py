"""Dashboard statistics endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from kbase.knowledge.service import KnowledgeBaseService, get_knowledge_base
from kbase.models.queries import PopularQuery
from kbase.models.statistics import CategoryStats, KnowledgeBaseStats, QueryStatistics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])

KnowledgeBase = Annotated[KnowledgeBaseService, Depends(get_knowledge_base)]


@router.get("", response_model=KnowledgeBaseStats)
async def get_stats(kb: KnowledgeBase) -> KnowledgeBaseStats:
    return kb.stats()


@router.get("/categories", response_model=list[CategoryStats])
async def get_category_stats(kb: KnowledgeBase) -> list[CategoryStats]:
    return kb.category_stats()


@router.get("/queries", response_model=QueryStatistics)
async def get_query_stats(kb: KnowledgeBase) -> QueryStatistics:
    """Success rate, latency and the 7-day query trend."""
    return kb.query_stats()


@router.get("/popular-queries", response_model=list[PopularQuery])
async def get_popular_queries(
    kb: KnowledgeBase,
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
) -> list[PopularQuery]:
    return kb.popular_queries(limit)


@router.post("/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_data(kb: KnowledgeBase) -> None:
    """Regenerate the seed corpus and wipe stored data."""
    logger.warning("Resetting knowledge base data")
    kb.reset_data()
