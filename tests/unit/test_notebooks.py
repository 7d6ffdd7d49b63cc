"""Unit tests for the notebook service."""

import pytest
import pytest_check as check

from kbase.knowledge.notebooks import (
    NOTEBOOKS_KEY,
    DefaultNotebookError,
    NotebookNotFoundError,
    NotebookService,
)
from kbase.knowledge.service import KnowledgeBaseService
from kbase.models.notebooks import (
    CreateNotebookParams,
    NotebookColor,
    NotebookIcon,
    UpdateNotebookParams,
)
from kbase.storage.store import JSONStore


class TestDefaults:
    def test_creates_default_notebooks(self, notebook_service: NotebookService) -> None:
        notebooks = notebook_service.notebooks

        check.equal([nb.name for nb in notebooks], ["Work Projects", "Study Notes", "Tech Research"])
        check.equal([nb.is_default for nb in notebooks], [True, False, False])
        check.equal(notebooks[0].color, NotebookColor.BLUE)
        check.equal(notebooks[0].hex_color, "#3b82f6")
        check.equal(notebooks[1].icon, NotebookIcon.SCHOOL)

    def test_selects_first_notebook(self, notebook_service: NotebookService) -> None:
        assert notebook_service.selected_notebook_id == notebook_service.notebooks[0].id

    def test_malformed_storage_falls_back(self, store: JSONStore) -> None:
        store.set(NOTEBOOKS_KEY, [{"unexpected": True}])

        service = NotebookService(store=store)

        assert len(service.notebooks) == 3

    def test_reloads_stored_notebooks(self, store: JSONStore) -> None:
        first = NotebookService(store=store)
        created = first.create_notebook(CreateNotebookParams(name="Reading List"))

        second = NotebookService(store=store)

        assert second.get_notebook(created.id) is not None


class TestCrud:
    def test_create_defaults(self, notebook_service: NotebookService) -> None:
        notebook = notebook_service.create_notebook(CreateNotebookParams(name="Ideas"))

        check.equal(notebook.color, NotebookColor.BLUE)
        check.equal(notebook.icon, NotebookIcon.FOLDER)
        check.equal(notebook.document_ids, [])
        check.is_false(notebook.is_default)
        check.equal(len(notebook_service.notebooks), 4)

    def test_update_applies_fields(self, notebook_service: NotebookService) -> None:
        notebook = notebook_service.create_notebook(CreateNotebookParams(name="Ideas"))

        updated = notebook_service.update_notebook(
            notebook.id, UpdateNotebookParams(name="Plans", color=NotebookColor.GREEN)
        )

        check.equal(updated.name, "Plans")
        check.equal(updated.color, NotebookColor.GREEN)
        check.equal(updated.icon, NotebookIcon.FOLDER)

    def test_update_cannot_clear_name(self, notebook_service: NotebookService) -> None:
        notebook = notebook_service.create_notebook(CreateNotebookParams(name="Ideas", description="d"))

        updated = notebook_service.update_notebook(
            notebook.id, UpdateNotebookParams(name=None, description=None)
        )

        check.equal(updated.name, "Ideas")
        check.is_none(updated.description)

    def test_update_unknown_returns_none(self, notebook_service: NotebookService) -> None:
        assert notebook_service.update_notebook("missing", UpdateNotebookParams(name="x")) is None

    def test_delete_reselects_first(self, notebook_service: NotebookService) -> None:
        notebook = notebook_service.create_notebook(CreateNotebookParams(name="Temp"))
        notebook_service.select_notebook(notebook.id)

        check.is_true(notebook_service.delete_notebook(notebook.id))
        check.equal(notebook_service.selected_notebook_id, notebook_service.notebooks[0].id)

    def test_default_notebook_is_protected(self, notebook_service: NotebookService) -> None:
        default = notebook_service.notebooks[0]

        check.is_false(notebook_service.delete_notebook(default.id))
        check.equal(len(notebook_service.notebooks), 3)
        with pytest.raises(DefaultNotebookError):
            notebook_service.require_deletable(default.id)

    def test_delete_unknown(self, notebook_service: NotebookService) -> None:
        check.is_false(notebook_service.delete_notebook("missing"))
        with pytest.raises(NotebookNotFoundError):
            notebook_service.require_deletable("missing")

    def test_select_none(self, notebook_service: NotebookService) -> None:
        notebook_service.select_notebook(None)

        assert notebook_service.selected_notebook is None


class TestMembership:
    def test_add_is_idempotent(self, notebook_service: NotebookService) -> None:
        notebook_id = notebook_service.notebooks[1].id

        check.is_true(notebook_service.add_document_to_notebook(notebook_id, "doc-1"))
        check.is_false(notebook_service.add_document_to_notebook(notebook_id, "doc-1"))
        check.equal(notebook_service.get_document_count(notebook_id), 1)

    def test_remove(self, notebook_service: NotebookService) -> None:
        notebook_id = notebook_service.notebooks[1].id
        notebook_service.add_document_to_notebook(notebook_id, "doc-1")

        check.is_true(notebook_service.remove_document_from_notebook(notebook_id, "doc-1"))
        check.is_false(notebook_service.remove_document_from_notebook(notebook_id, "doc-1"))
        check.equal(notebook_service.get_document_count(notebook_id), 0)

    def test_unknown_notebook(self, notebook_service: NotebookService) -> None:
        check.is_false(notebook_service.add_document_to_notebook("missing", "doc-1"))
        check.equal(notebook_service.get_document_count("missing"), 0)

    def test_documents_in_skips_deleted(
        self,
        notebook_service: NotebookService,
        knowledge_base: KnowledgeBaseService,
    ) -> None:
        notebook_id = notebook_service.notebooks[0].id
        first, second = knowledge_base.documents[:2]
        notebook_service.add_document_to_notebook(notebook_id, first.id)
        notebook_service.add_document_to_notebook(notebook_id, second.id)
        knowledge_base.delete_document(second.id)

        docs = notebook_service.documents_in(notebook_id, knowledge_base)

        assert [doc.id for doc in docs] == [first.id]

    def test_documents_in_unknown_raises(
        self,
        notebook_service: NotebookService,
        knowledge_base: KnowledgeBaseService,
    ) -> None:
        with pytest.raises(NotebookNotFoundError):
            notebook_service.documents_in("missing", knowledge_base)
