"""Knowledge base service: documents, search and statistics.

Holds the document collection and query log in memory and mirrors every
mutation to the JSON store. All operations are synchronous filters, maps
and sorts over a collection of a few hundred documents.
"""

import logging
import math
import re
import time
from collections import Counter
from datetime import datetime, timedelta, timezone

from pydantic import TypeAdapter, ValidationError

from kbase.agent.config import Settings, get_settings
from kbase.knowledge.seed import (
    generate_documents,
    generate_id,
    generate_query_records,
    make_summary,
)
from kbase.models.documents import (
    CreateDocumentRequest,
    Document,
    DocumentStatus,
    TechnologyCategory,
    UpdateDocumentRequest,
)
from kbase.models.queries import (
    PopularQuery,
    QueryRecord,
    QueryType,
    SearchRequest,
    SearchResult,
    SimilarityResult,
)
from kbase.models.statistics import (
    CategoryStats,
    KnowledgeBaseStats,
    QueryStatistics,
    TimeSeriesDataPoint,
)
from kbase.search.relevance import basic_relevance, matches_query
from kbase.storage.store import JSONStore

logger = logging.getLogger(__name__)

DOCUMENTS_KEY = "documents"
QUERY_RECORDS_KEY = "query_records"

NO_RESULT_SUGGESTIONS = [
    "Try different keywords",
    "Check the spelling",
    "Use a broader search term",
]

CATEGORY_COLORS = [
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#FF6384",
    "#C9CBCF",
]

_TOKEN_RE = re.compile(r"\w+")

_documents_adapter = TypeAdapter(list[Document])
_records_adapter = TypeAdapter(list[QueryRecord])


class DocumentNotFoundError(Exception):
    """Raised when a document id is not in the knowledge base."""

    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _tokens(text: str) -> Counter[str]:
    return Counter(_TOKEN_RE.findall(text.lower()))


def _cosine(a: Counter[str], b: Counter[str]) -> float:
    if not a or not b:
        return 0.0
    dot = sum(count * b[token] for token, count in a.items())
    norm = math.sqrt(sum(v * v for v in a.values())) * math.sqrt(sum(v * v for v in b.values()))
    return dot / norm if norm else 0.0


class KnowledgeBaseService:
    """In-memory document collection with search and statistics.

    Loads stored documents on start, or generates the seed corpus when
    nothing usable is stored.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: JSONStore | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store or JSONStore(self._settings.data_dir)
        self._documents: list[Document] = []
        self._query_records: list[QueryRecord] = []
        self._initialize_data()

    # ==================== initialization ====================

    def _initialize_data(self) -> None:
        documents = self._load_documents()
        if documents is None:
            documents = generate_documents(self._settings.seed_document_count)
            self._documents = documents
            self._save_documents()
        else:
            self._documents = documents

        records = self._load_query_records()
        if records is None:
            records = generate_query_records(self._settings.seed_query_count)
            self._query_records = records
            self._save_query_records()
        else:
            self._query_records = records

        logger.info(
            f"Knowledge base ready: {len(self._documents)} documents, "
            f"{len(self._query_records)} query records"
        )

    def _load_documents(self) -> list[Document] | None:
        raw = self._store.get(DOCUMENTS_KEY)
        if not raw or not isinstance(raw, list):
            return None

        if isinstance(raw[0], dict) and "author" in raw[0]:
            logger.info("Stored documents use a legacy format, regenerating seed data")
            return None

        try:
            return _documents_adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Stored documents are invalid, regenerating seed data: {e}")
            return None

    def _load_query_records(self) -> list[QueryRecord] | None:
        raw = self._store.get(QUERY_RECORDS_KEY)
        if raw is None:
            return None

        try:
            return _records_adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Stored query records are invalid, regenerating: {e}")
            return None

    def _save_documents(self) -> None:
        self._store.set(DOCUMENTS_KEY, _documents_adapter.dump_python(self._documents, mode="json"))

    def _save_query_records(self) -> None:
        self._store.set(
            QUERY_RECORDS_KEY, _records_adapter.dump_python(self._query_records, mode="json")
        )

    # ==================== document access ====================

    @property
    def documents(self) -> list[Document]:
        """All documents, in collection order."""
        return list(self._documents)

    @property
    def query_records(self) -> list[QueryRecord]:
        """Query log, newest first."""
        return list(self._query_records)

    def get_document(self, document_id: str) -> Document | None:
        return next((doc for doc in self._documents if doc.id == document_id), None)

    def require_document(self, document_id: str) -> Document:
        """Get a document or raise DocumentNotFoundError."""
        doc = self.get_document(document_id)
        if doc is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        return doc

    def _replace(self, updated: Document) -> Document:
        self._documents = [updated if doc.id == updated.id else doc for doc in self._documents]
        self._save_documents()
        return updated

    def filtered_documents(
        self,
        query: str = "",
        categories: list[TechnologyCategory] | None = None,
    ) -> list[Document]:
        """Documents filtered by category and by a case-insensitive substring."""
        docs = self._documents

        if categories:
            docs = [doc for doc in docs if doc.category in categories]

        query = query.lower()
        if query:
            docs = [doc for doc in docs if matches_query(doc, query)]

        return list(docs)

    def category_document_counts(self) -> dict[str, int]:
        counts = Counter(doc.category for doc in self._documents)
        return {category.value: counts.get(category, 0) for category in TechnologyCategory}

    # ==================== document mutations ====================

    def create_document(self, request: CreateDocumentRequest) -> Document:
        """Add a new active document."""
        now = _now()
        doc = Document(
            id=generate_id("doc-"),
            title=request.title,
            content=request.content,
            summary=make_summary(request.content),
            category=request.category,
            tags=list(request.tags),
            embedding_id=generate_id("emb-"),
            status=DocumentStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            source=request.source,
            source_url=request.source_url,
            view_count=0,
            size=len(request.content),
            language=request.language or "zh-TW",
        )

        self._documents = [*self._documents, doc]
        self._save_documents()
        logger.info(f"Created document {doc.id}: {doc.title}")
        return doc

    def update_document(self, document_id: str, request: UpdateDocumentRequest) -> Document:
        """Merge the provided fields into a document.

        Raises:
            DocumentNotFoundError: If the id is unknown.
        """
        doc = self.require_document(document_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "content" in changes:
            changes["size"] = len(changes["content"])
            changes["summary"] = make_summary(changes["content"])
        changes["updated_at"] = _now()

        return self._replace(doc.model_copy(update=changes))

    def delete_document(self, document_id: str) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: If the id is unknown.
        """
        self.require_document(document_id)
        self._documents = [doc for doc in self._documents if doc.id != document_id]
        self._save_documents()
        logger.info(f"Deleted document {document_id}")

    def increment_view_count(self, document_id: str) -> Document:
        doc = self.require_document(document_id)
        return self._replace(doc.model_copy(update={"view_count": doc.view_count + 1}))

    def record_view(self, document_id: str) -> Document:
        """Record that a document was opened."""
        return self.increment_view_count(document_id)

    def toggle_pin(self, document_id: str) -> Document:
        doc = self.require_document(document_id)
        return self._replace(doc.model_copy(update={"is_pinned": not doc.is_pinned}))

    def toggle_favorite(self, document_id: str) -> Document:
        doc = self.require_document(document_id)
        return self._replace(doc.model_copy(update={"is_favorited": not doc.is_favorited}))

    # ==================== search ====================

    def search(self, request: SearchRequest) -> SearchResult:
        """Filter, score, sort and paginate documents, then log the query.

        Args:
            request: Search parameters.

        Returns:
            The requested page, the total match count and, when nothing
            matched, a list of suggestions.
        """
        start = time.perf_counter()
        results = self._documents

        if request.categories:
            results = [doc for doc in results if doc.category in request.categories]

        if request.tags:
            wanted = set(request.tags)
            results = [doc for doc in results if wanted.intersection(doc.tags)]

        query = request.query.lower()
        if query:
            results = [
                doc.model_copy(update={"relevance_score": float(basic_relevance(doc, query))})
                for doc in results
                if matches_query(doc, query)
            ]
            if request.sort_by in (None, "relevance"):
                results.sort(key=lambda doc: doc.relevance_score or 0, reverse=True)
        else:
            results = list(results)

        if request.sort_by == "date":
            results.sort(key=lambda doc: doc.updated_at, reverse=True)
        elif request.sort_by == "views":
            results.sort(key=lambda doc: doc.view_count, reverse=True)

        start_index = (request.page - 1) * request.page_size
        page = results[start_index : start_index + request.page_size]

        latency = round((time.perf_counter() - start) * 1000, 2)
        self._record_query(request.query, request.type, len(results), latency)

        return SearchResult(
            documents=page,
            total=len(results),
            latency=latency,
            suggestions=list(NO_RESULT_SUGGESTIONS) if not results else None,
        )

    def _record_query(self, query: str, query_type: QueryType, result_count: int, latency: float) -> None:
        record = QueryRecord(
            id=generate_id("q-"),
            query=query,
            type=query_type,
            timestamp=_now(),
            result_count=result_count,
            latency=latency,
            has_results=result_count > 0,
        )
        self._query_records = [record, *self._query_records]
        self._save_query_records()

    def vector_search(self, query: str, limit: int = 10) -> list[SimilarityResult]:
        """Approximate semantic search with bag-of-words cosine similarity.

        Similarity is mapped onto [0.5, 1.0] so every document gets a
        plausible score.
        """
        query_vector = _tokens(query)
        results = []
        for doc in self._documents:
            doc_vector = _tokens(" ".join([doc.title, doc.content, *doc.tags]))
            cosine = _cosine(query_vector, doc_vector)
            results.append(
                SimilarityResult(
                    document_id=doc.id,
                    similarity=round(0.5 + 0.5 * cosine, 4),
                    distance=round(1.0 - cosine, 4),
                )
            )

        results.sort(key=lambda r: r.similarity, reverse=True)
        return results[:limit]

    def related_documents(self, document_id: str, limit: int = 5) -> list[Document]:
        """Documents sharing the category (+10) or tags (+5 each) with a document."""
        doc = self.require_document(document_id)

        scored = []
        for other in self._documents:
            if other.id == doc.id:
                continue
            score = 10 if other.category == doc.category else 0
            score += 5 * len(set(other.tags).intersection(doc.tags))
            if score > 0:
                scored.append((score, other))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [other for _, other in scored[:limit]]

    # ==================== statistics ====================

    def stats(self) -> KnowledgeBaseStats:
        now = _now()
        today = now.date()
        docs = self._documents
        records = self._query_records
        latencies = [r.latency for r in records]

        return KnowledgeBaseStats(
            total_documents=len(docs),
            documents_added_today=sum(1 for doc in docs if doc.created_at.date() == today),
            total_storage=sum(doc.size for doc in docs),
            total_views=sum(doc.view_count for doc in docs),
            views_this_week=sum(int(doc.view_count * 0.3) for doc in docs),
            total_queries=len(records),
            queries_today=sum(1 for r in records if r.timestamp.date() == today),
            avg_query_latency=round(sum(latencies) / len(latencies), 2) if latencies else 0.0,
            last_updated=now,
        )

    def category_stats(self) -> list[CategoryStats]:
        total = len(self._documents)
        stats = []
        for index, category in enumerate(TechnologyCategory):
            docs = [doc for doc in self._documents if doc.category == category]
            views = sum(doc.view_count for doc in docs)
            stats.append(
                CategoryStats(
                    category=category,
                    document_count=len(docs),
                    percentage=round(len(docs) / total * 100, 2) if total else 0.0,
                    avg_views=round(views / len(docs), 2) if docs else 0.0,
                    color=CATEGORY_COLORS[index % len(CATEGORY_COLORS)],
                )
            )
        return stats

    def query_stats(self) -> QueryStatistics:
        records = self._query_records
        successful = sum(1 for r in records if r.has_results)
        latencies = [r.latency for r in records]

        return QueryStatistics(
            total=len(records),
            successful=successful,
            failed=len(records) - successful,
            success_rate=round(successful / len(records) * 100, 2) if records else 0.0,
            avg_latency=round(sum(latencies) / len(latencies), 2) if latencies else 0.0,
            max_latency=max(latencies, default=0.0),
            min_latency=min(latencies, default=0.0),
            trend=self._query_trend(days=7),
        )

    def _query_trend(self, days: int) -> list[TimeSeriesDataPoint]:
        today = _now().date()
        per_day = Counter(r.timestamp.date() for r in self._query_records)
        trend = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            trend.append(
                TimeSeriesDataPoint(
                    date=datetime(day.year, day.month, day.day, tzinfo=timezone.utc),
                    value=per_day.get(day, 0),
                    label=day.isoformat(),
                )
            )
        return trend

    def popular_queries(self, limit: int = 5) -> list[PopularQuery]:
        """Most frequent non-empty queries in the log."""
        counts: Counter[str] = Counter()
        last_searched: dict[str, datetime] = {}
        for record in self._query_records:
            if not record.query.strip():
                continue
            counts[record.query] += 1
            if record.query not in last_searched or record.timestamp > last_searched[record.query]:
                last_searched[record.query] = record.timestamp

        return [
            PopularQuery(query=query, count=count, last_searched=last_searched[query])
            for query, count in counts.most_common(limit)
        ]

    # ==================== maintenance ====================

    def reset_data(self) -> None:
        """Regenerate the seed corpus and query log and wipe the store."""
        self._store.clear()
        self._documents = generate_documents(self._settings.seed_document_count)
        self._query_records = generate_query_records(self._settings.seed_query_count)
        self._save_documents()
        self._save_query_records()
        logger.info("Knowledge base data reset")


# Module-level singleton instance
_knowledge_base: KnowledgeBaseService | None = None


def get_knowledge_base() -> KnowledgeBaseService:
    """Get or create the global knowledge base service.

    Returns:
        The KnowledgeBaseService instance.
    """
    global _knowledge_base
    if _knowledge_base is None:
        _knowledge_base = KnowledgeBaseService()
    return _knowledge_base
