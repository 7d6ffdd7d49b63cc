"""Dashboard statistics models."""

from datetime import datetime

from pydantic import BaseModel

from kbase.models.documents import TechnologyCategory


class KnowledgeBaseStats(BaseModel):
    """Overview counters for the knowledge base."""

    total_documents: int
    documents_added_today: int
    total_storage: int
    total_views: int
    views_this_week: int
    total_queries: int
    queries_today: int
    avg_query_latency: float
    last_updated: datetime


class CategoryStats(BaseModel):
    """Per-category document distribution."""

    category: TechnologyCategory
    document_count: int
    percentage: float
    avg_views: float
    color: str | None = None


class TimeSeriesDataPoint(BaseModel):
    date: datetime
    value: float
    label: str | None = None


class QueryStatistics(BaseModel):
    """Aggregates over the query log."""

    total: int
    successful: int
    failed: int
    success_rate: float
    avg_latency: float
    max_latency: float
    min_latency: float
    trend: list[TimeSeriesDataPoint]
