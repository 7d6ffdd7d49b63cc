"""Knowledge base state: documents, query log, notebooks and pages.

Responsibilities:
    - Document CRUD, view tracking and related-document lookup
    - Paginated search with filters and a query log
    - Dashboard statistics
    - Notebook grouping with default-notebook protection
    - Page hierarchy with archive, blocks and search
    - Seed corpus for a fresh installation
"""

from kbase.knowledge.notebooks import (
    DefaultNotebookError,
    NotebookNotFoundError,
    NotebookService,
    get_notebook_service,
)
from kbase.knowledge.pages import (
    InvalidMoveError,
    PageNotFoundError,
    PageService,
    get_page_service,
)
from kbase.knowledge.service import (
    DocumentNotFoundError,
    KnowledgeBaseService,
    get_knowledge_base,
)

__all__ = [
    "DefaultNotebookError",
    "DocumentNotFoundError",
    "InvalidMoveError",
    "KnowledgeBaseService",
    "NotebookNotFoundError",
    "NotebookService",
    "PageNotFoundError",
    "PageService",
    "get_knowledge_base",
    "get_notebook_service",
    "get_page_service",
]
