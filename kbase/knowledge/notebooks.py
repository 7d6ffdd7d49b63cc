"""Notebook service: CRUD over named document groups.

Notebooks reference documents by id. Default notebooks are created on
first start and cannot be deleted. Every mutation is persisted.
"""

import logging
from datetime import datetime, timezone

from pydantic import TypeAdapter, ValidationError

from kbase.agent.config import get_settings
from kbase.knowledge.seed import generate_id
from kbase.knowledge.service import KnowledgeBaseService
from kbase.models.documents import Document
from kbase.models.notebooks import (
    CreateNotebookParams,
    Notebook,
    NotebookColor,
    NotebookIcon,
    UpdateNotebookParams,
)
from kbase.storage.store import JSONStore

logger = logging.getLogger(__name__)

NOTEBOOKS_KEY = "notebooks"

_notebooks_adapter = TypeAdapter(list[Notebook])


class NotebookNotFoundError(Exception):
    """Raised when a notebook id is unknown."""

    pass


class DefaultNotebookError(Exception):
    """Raised when trying to delete a default notebook."""

    pass


def _default_notebooks() -> list[Notebook]:
    now = datetime.now(timezone.utc)
    return [
        Notebook(
            id=generate_id("nb-"),
            name="Work Projects",
            description="Technical documents and notes for work",
            color=NotebookColor.BLUE,
            icon=NotebookIcon.WORK,
            is_default=True,
            created_at=now,
            updated_at=now,
        ),
        Notebook(
            id=generate_id("nb-"),
            name="Study Notes",
            description="Material for personal learning and research",
            color=NotebookColor.PURPLE,
            icon=NotebookIcon.SCHOOL,
            created_at=now,
            updated_at=now,
        ),
        Notebook(
            id=generate_id("nb-"),
            name="Tech Research",
            description="In-depth technical topics and experiments",
            color=NotebookColor.PINK,
            icon=NotebookIcon.SCIENCE,
            created_at=now,
            updated_at=now,
        ),
    ]


class NotebookService:
    """Manages notebooks and the current selection."""

    def __init__(self, store: JSONStore | None = None) -> None:
        self._store = store or JSONStore(get_settings().data_dir)
        self._notebooks = self._load()
        self._selected_id: str | None = self._notebooks[0].id if self._notebooks else None

    def _load(self) -> list[Notebook]:
        raw = self._store.get(NOTEBOOKS_KEY)
        if raw is not None:
            try:
                return _notebooks_adapter.validate_python(raw)
            except ValidationError as e:
                logger.error(f"Failed to parse stored notebooks, using defaults: {e}")

        notebooks = _default_notebooks()
        self._notebooks = notebooks
        self._save()
        return notebooks

    def _save(self) -> None:
        self._store.set(NOTEBOOKS_KEY, _notebooks_adapter.dump_python(self._notebooks, mode="json"))

    @property
    def notebooks(self) -> list[Notebook]:
        return list(self._notebooks)

    @property
    def selected_notebook_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_notebook(self) -> Notebook | None:
        if self._selected_id is None:
            return None
        return self.get_notebook(self._selected_id)

    def get_notebook(self, notebook_id: str) -> Notebook | None:
        return next((nb for nb in self._notebooks if nb.id == notebook_id), None)

    def require_notebook(self, notebook_id: str) -> Notebook:
        notebook = self.get_notebook(notebook_id)
        if notebook is None:
            raise NotebookNotFoundError(f"Notebook not found: {notebook_id}")
        return notebook

    def _replace(self, updated: Notebook) -> Notebook:
        self._notebooks = [updated if nb.id == updated.id else nb for nb in self._notebooks]
        self._save()
        return updated

    def create_notebook(self, params: CreateNotebookParams) -> Notebook:
        """Create an empty notebook, blue with a folder icon unless given."""
        now = datetime.now(timezone.utc)
        notebook = Notebook(
            id=generate_id("nb-"),
            name=params.name,
            description=params.description,
            color=params.color or NotebookColor.BLUE,
            icon=params.icon or NotebookIcon.FOLDER,
            created_at=now,
            updated_at=now,
        )

        self._notebooks = [*self._notebooks, notebook]
        self._save()
        logger.info(f"Created notebook {notebook.id}: {notebook.name}")
        return notebook

    def update_notebook(self, notebook_id: str, params: UpdateNotebookParams) -> Notebook | None:
        """Apply the provided fields.

        Returns:
            The updated notebook, or None if the id is unknown.
        """
        notebook = self.get_notebook(notebook_id)
        if notebook is None:
            return None

        changes = params.model_dump(exclude_unset=True)
        # name, colour and icon cannot be cleared
        for field in ("name", "color", "icon"):
            if field in changes and changes[field] is None:
                del changes[field]
        changes["updated_at"] = datetime.now(timezone.utc)
        return self._replace(notebook.model_copy(update=changes))

    def require_deletable(self, notebook_id: str) -> Notebook:
        """Return a notebook that may be deleted.

        Raises:
            NotebookNotFoundError: If the id is unknown.
            DefaultNotebookError: If it is a default notebook.
        """
        notebook = self.require_notebook(notebook_id)
        if notebook.is_default:
            raise DefaultNotebookError(f"Default notebook cannot be deleted: {notebook.name}")
        return notebook

    def delete_notebook(self, notebook_id: str) -> bool:
        """Delete a notebook.

        Returns:
            False if the notebook is unknown or a default notebook.
        """
        notebook = self.get_notebook(notebook_id)
        if notebook is None:
            return False

        if notebook.is_default:
            logger.warning(f"Cannot delete default notebook {notebook_id}")
            return False

        self._notebooks = [nb for nb in self._notebooks if nb.id != notebook_id]

        if self._selected_id == notebook_id:
            self._selected_id = self._notebooks[0].id if self._notebooks else None

        self._save()
        logger.info(f"Deleted notebook {notebook_id}")
        return True

    def select_notebook(self, notebook_id: str | None) -> None:
        self._selected_id = notebook_id

    def add_document_to_notebook(self, notebook_id: str, document_id: str) -> bool:
        """Append a document id. False if the notebook is unknown or already has it."""
        notebook = self.get_notebook(notebook_id)
        if notebook is None or document_id in notebook.document_ids:
            return False

        self._replace(
            notebook.model_copy(
                update={
                    "document_ids": [*notebook.document_ids, document_id],
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )
        return True

    def remove_document_from_notebook(self, notebook_id: str, document_id: str) -> bool:
        """Remove a document id. False if nothing was removed."""
        notebook = self.get_notebook(notebook_id)
        if notebook is None or document_id not in notebook.document_ids:
            return False

        self._replace(
            notebook.model_copy(
                update={
                    "document_ids": [d for d in notebook.document_ids if d != document_id],
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )
        return True

    def get_document_count(self, notebook_id: str) -> int:
        notebook = self.get_notebook(notebook_id)
        return len(notebook.document_ids) if notebook else 0

    def documents_in(self, notebook_id: str, knowledge_base: KnowledgeBaseService) -> list[Document]:
        """Resolve a notebook's document ids, skipping deleted documents.

        Raises:
            NotebookNotFoundError: If the id is unknown.
        """
        notebook = self.require_notebook(notebook_id)
        docs = []
        for document_id in notebook.document_ids:
            doc = knowledge_base.get_document(document_id)
            if doc is not None:
                docs.append(doc)
        return docs


# Module-level singleton instance
_notebook_service: NotebookService | None = None


def get_notebook_service() -> NotebookService:
    """Get or create the global notebook service."""
    global _notebook_service
    if _notebook_service is None:
        _notebook_service = NotebookService()
    return _notebook_service
