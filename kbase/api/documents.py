"""Document endpoints: browsing, CRUD, view tracking and bookmarks."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from kbase.knowledge.service import DocumentNotFoundError, KnowledgeBaseService, get_knowledge_base
from kbase.models.documents import (
    CreateDocumentRequest,
    Document,
    TechnologyCategory,
    UpdateDocumentRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

KnowledgeBase = Annotated[KnowledgeBaseService, Depends(get_knowledge_base)]


def _not_found(e: DocumentNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=list[Document])
async def list_documents(
    kb: KnowledgeBase,
    q: str = "",
    category: Annotated[list[TechnologyCategory] | None, Query()] = None,
) -> list[Document]:
    """List documents, optionally filtered by categories and a substring."""
    return kb.filtered_documents(q, category)


@router.post("", response_model=Document, status_code=status.HTTP_201_CREATED)
async def create_document(request: CreateDocumentRequest, kb: KnowledgeBase) -> Document:
    return kb.create_document(request)


@router.get("/{document_id}", response_model=Document)
async def get_document(document_id: str, kb: KnowledgeBase) -> Document:
    try:
        return kb.require_document(document_id)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e


@router.patch("/{document_id}", response_model=Document)
async def update_document(
    document_id: str,
    request: UpdateDocumentRequest,
    kb: KnowledgeBase,
) -> Document:
    """Merge the provided fields into a document."""
    try:
        return kb.update_document(document_id, request)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, kb: KnowledgeBase) -> None:
    try:
        kb.delete_document(document_id)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e


@router.post("/{document_id}/view", response_model=Document)
async def record_view(document_id: str, kb: KnowledgeBase) -> Document:
    """Count one view of a document."""
    try:
        return kb.record_view(document_id)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e


@router.post("/{document_id}/pin", response_model=Document)
async def toggle_pin(document_id: str, kb: KnowledgeBase) -> Document:
    try:
        return kb.toggle_pin(document_id)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e


@router.post("/{document_id}/favorite", response_model=Document)
async def toggle_favorite(document_id: str, kb: KnowledgeBase) -> Document:
    try:
        return kb.toggle_favorite(document_id)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e


@router.get("/{document_id}/related", response_model=list[Document])
async def related_documents(
    document_id: str,
    kb: KnowledgeBase,
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
) -> list[Document]:
    """Documents sharing the category or tags of a document."""
    try:
        return kb.related_documents(document_id, limit)
    except DocumentNotFoundError as e:
        raise _not_found(e) from e
