"""Client-side style search: relevance heuristics and match highlighting.

Responsibilities:
    - Weighted substring scoring for paginated and instant search
    - Literal, case-insensitive highlighting with HTML escaping
"""

from kbase.search.highlight import highlight_text
from kbase.search.relevance import (
    INSTANT_SEARCH_LIMIT,
    basic_relevance,
    calculate_relevance,
    instant_search,
    matches_query,
)

__all__ = [
    "INSTANT_SEARCH_LIMIT",
    "basic_relevance",
    "calculate_relevance",
    "highlight_text",
    "instant_search",
    "matches_query",
]
