"""Weighted substring relevance scoring.

Two scorers share the same shape: the full search endpoint uses the
lighter ``basic_relevance`` while search-as-you-type ranks with
``calculate_relevance``, which also rewards title prefixes, category
matches, repeated content hits and summary matches.
"""

import logging
import time
from collections.abc import Iterable

from kbase.models.documents import Document

logger = logging.getLogger(__name__)

INSTANT_SEARCH_LIMIT = 50

# Bonus for repeated content matches is capped at this many points
_MAX_OCCURRENCE_BONUS = 20


def matches_query(doc: Document, query: str) -> bool:
    """Case-insensitive substring match over title, content and tags.

    Args:
        doc: Document to test.
        query: Lower-cased query text.
    """
    return (
        query in doc.title.lower()
        or query in doc.content.lower()
        or any(query in tag.lower() for tag in doc.tags)
    )


def basic_relevance(doc: Document, query: str) -> int:
    """Score used by the paginated search endpoint.

    Exact title 100, otherwise title containing the query 50; each tag
    30 when equal, 15 when containing; content containing the query 10.
    """
    query = query.lower()
    score = 0

    title = doc.title.lower()
    if title == query:
        score += 100
    elif query in title:
        score += 50

    for tag in doc.tags:
        tag = tag.lower()
        if tag == query:
            score += 30
        elif query in tag:
            score += 15

    if query in doc.content.lower():
        score += 10

    return score


def calculate_relevance(doc: Document, query: str) -> int:
    """Score a document against a query for search-as-you-type.

    Args:
        doc: Document to score.
        query: Query text, matched literally and case-insensitively.

    Returns:
        Non-negative score; 0 means the document does not match.
    """
    query = query.lower()
    if not query:
        return 0

    score = 0

    title = doc.title.lower()
    if title == query:
        score += 100
    elif query in title:
        score += 50
        if title.startswith(query):
            score += 25

    for tag in doc.tags:
        tag = tag.lower()
        if tag == query:
            score += 30
        elif query in tag:
            score += 15

    if query in doc.category.value.lower():
        score += 20

    content = doc.content.lower()
    if query in content:
        score += 10
        score += min(content.count(query) * 2, _MAX_OCCURRENCE_BONUS)

    if doc.summary and query in doc.summary.lower():
        score += 5

    return score


def instant_search(
    documents: Iterable[Document],
    query: str,
    limit: int = INSTANT_SEARCH_LIMIT,
) -> tuple[list[tuple[Document, int]], float]:
    """Rank documents for search-as-you-type.

    Args:
        documents: Candidate documents.
        query: Raw query text; trimmed and lower-cased here.
        limit: Maximum number of hits.

    Returns:
        (hits, latency_ms) where hits are (document, score) pairs with
        score > 0, best first. Ties keep collection order.
    """
    query = query.strip().lower()
    if not query:
        return [], 0.0

    start = time.perf_counter()
    scored = [(doc, calculate_relevance(doc, query)) for doc in documents]
    hits = [(doc, score) for doc, score in scored if score > 0]
    hits.sort(key=lambda hit: hit[1], reverse=True)
    latency = round((time.perf_counter() - start) * 1000, 2)

    logger.debug(f"Instant search '{query}': {len(hits)} hits in {latency}ms")
    return hits[:limit], latency
