"""Pydantic models for the knowledge base domain and its API.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - documents: Document and its create/update requests
    - notebooks: Notebook grouping with colour and icon presets
    - pages: Block-based pages arranged in a hierarchy
    - queries: Search requests, results and the query log
    - statistics: Dashboard statistics
    - chat: Chat messages, citations and AI responses
    - schemas: Streaming and upload wire schemas
"""

from kbase.models.chat import AIResponse, ChatMessage, ChatRequest, Citation, MessageRole
from kbase.models.documents import (
    CreateDocumentRequest,
    Document,
    DocumentSource,
    DocumentStatus,
    Language,
    TechnologyCategory,
    UpdateDocumentRequest,
)
from kbase.models.notebooks import (
    NOTEBOOK_COLOR_MAP,
    CreateNotebookParams,
    Notebook,
    NotebookColor,
    NotebookIcon,
    UpdateNotebookParams,
)
from kbase.models.pages import (
    Block,
    BlockContent,
    BlockType,
    CreatePageRequest,
    MovePageRequest,
    Page,
    PageTreeNode,
    UpdatePageRequest,
)
from kbase.models.queries import (
    InstantSearchHit,
    InstantSearchResult,
    PopularQuery,
    QueryRecord,
    QueryType,
    SearchRequest,
    SearchResult,
    SimilarityResult,
    SortBy,
)
from kbase.models.statistics import (
    CategoryStats,
    KnowledgeBaseStats,
    QueryStatistics,
    TimeSeriesDataPoint,
)

__all__ = [
    "NOTEBOOK_COLOR_MAP",
    "AIResponse",
    "Block",
    "BlockContent",
    "BlockType",
    "CategoryStats",
    "ChatMessage",
    "ChatRequest",
    "Citation",
    "CreateDocumentRequest",
    "CreateNotebookParams",
    "CreatePageRequest",
    "Document",
    "DocumentSource",
    "DocumentStatus",
    "InstantSearchHit",
    "InstantSearchResult",
    "KnowledgeBaseStats",
    "Language",
    "MessageRole",
    "MovePageRequest",
    "Notebook",
    "NotebookColor",
    "NotebookIcon",
    "Page",
    "PageTreeNode",
    "PopularQuery",
    "QueryRecord",
    "QueryStatistics",
    "QueryType",
    "SearchRequest",
    "SearchResult",
    "SimilarityResult",
    "SortBy",
    "TechnologyCategory",
    "TimeSeriesDataPoint",
    "UpdateDocumentRequest",
    "UpdateNotebookParams",
    "UpdatePageRequest",
]
