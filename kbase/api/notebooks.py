"""Notebook endpoints: CRUD, selection and document membership."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from kbase.knowledge.notebooks import (
    DefaultNotebookError,
    NotebookNotFoundError,
    NotebookService,
    get_notebook_service,
)
from kbase.knowledge.service import KnowledgeBaseService, get_knowledge_base
from kbase.models.documents import Document
from kbase.models.notebooks import CreateNotebookParams, Notebook, UpdateNotebookParams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notebooks", tags=["notebooks"])

Notebooks = Annotated[NotebookService, Depends(get_notebook_service)]
KnowledgeBase = Annotated[KnowledgeBaseService, Depends(get_knowledge_base)]


def _require(notebooks: NotebookService, notebook_id: str) -> Notebook:
    try:
        return notebooks.require_notebook(notebook_id)
    except NotebookNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("", response_model=list[Notebook])
async def list_notebooks(notebooks: Notebooks) -> list[Notebook]:
    return notebooks.notebooks


@router.post("", response_model=Notebook, status_code=status.HTTP_201_CREATED)
async def create_notebook(params: CreateNotebookParams, notebooks: Notebooks) -> Notebook:
    return notebooks.create_notebook(params)


@router.get("/{notebook_id}", response_model=Notebook)
async def get_notebook(notebook_id: str, notebooks: Notebooks) -> Notebook:
    return _require(notebooks, notebook_id)


@router.patch("/{notebook_id}", response_model=Notebook)
async def update_notebook(
    notebook_id: str,
    params: UpdateNotebookParams,
    notebooks: Notebooks,
) -> Notebook:
    updated = notebooks.update_notebook(notebook_id, params)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notebook not found: {notebook_id}",
        )
    return updated


@router.delete("/{notebook_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notebook(notebook_id: str, notebooks: Notebooks) -> None:
    """Delete a notebook. Default notebooks are protected.

    Raises:
        404: Unknown notebook.
        409: Default notebook.
    """
    try:
        notebooks.require_deletable(notebook_id)
    except NotebookNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except DefaultNotebookError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    notebooks.delete_notebook(notebook_id)


@router.post("/{notebook_id}/select", response_model=Notebook)
async def select_notebook(notebook_id: str, notebooks: Notebooks) -> Notebook:
    notebook = _require(notebooks, notebook_id)
    notebooks.select_notebook(notebook_id)
    return notebook


@router.get("/{notebook_id}/documents", response_model=list[Document])
async def notebook_documents(
    notebook_id: str,
    notebooks: Notebooks,
    kb: KnowledgeBase,
) -> list[Document]:
    """Documents of a notebook. Ids of deleted documents are skipped."""
    _require(notebooks, notebook_id)
    return notebooks.documents_in(notebook_id, kb)


@router.put("/{notebook_id}/documents/{document_id}", response_model=Notebook)
async def add_document(
    notebook_id: str,
    document_id: str,
    notebooks: Notebooks,
    kb: KnowledgeBase,
) -> Notebook:
    """Add a document to a notebook. Adding it twice is a no-op."""
    _require(notebooks, notebook_id)
    if kb.get_document(document_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document not found: {document_id}",
        )

    notebooks.add_document_to_notebook(notebook_id, document_id)
    return _require(notebooks, notebook_id)


@router.delete("/{notebook_id}/documents/{document_id}", response_model=Notebook)
async def remove_document(notebook_id: str, document_id: str, notebooks: Notebooks) -> Notebook:
    _require(notebooks, notebook_id)
    notebooks.remove_document_from_notebook(notebook_id, document_id)
    return _require(notebooks, notebook_id)
