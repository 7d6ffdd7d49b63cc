"""PDF upload endpoint for document ingestion.

Handles file upload, validation, parsing, and knowledge base storage.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status

from kbase.agent.chat_agent import AIService, get_ai_service
from kbase.knowledge.service import KnowledgeBaseService, get_knowledge_base
from kbase.models.documents import (
    CreateDocumentRequest,
    DocumentSource,
    TechnologyCategory,
    UpdateDocumentRequest,
)
from kbase.models.schemas import PDFUploadResponse
from kbase.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, parse_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

# 10MB limit matches pdf_parser constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE


def _validate_file_extension(filename: str | None) -> str:
    """Validate that file has .pdf extension.

    Raises:
        HTTPException: 400 if extension is invalid.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    return filename


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


@router.post("/pdf", response_model=PDFUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_pdf(
    file: UploadFile,
    kb: Annotated[KnowledgeBaseService, Depends(get_knowledge_base)],
    assistant: Annotated[AIService, Depends(get_ai_service)],
    category: Annotated[TechnologyCategory, Form()] = TechnologyCategory.AI,
) -> PDFUploadResponse:
    """Upload a PDF and add it to the knowledge base.

    The document title comes from the PDF metadata, falling back to the
    file name; tags are suggested by the assistant.

    Args:
        file: The uploaded PDF file (multipart/form-data).
        category: Category of the new document.

    Returns:
        PDFUploadResponse with the created document.

    Raises:
        400: Invalid file (not PDF, empty, corrupt, no text).
        413: File exceeds 10MB limit.
    """
    filename = _validate_file_extension(file.filename)
    content = await _read_and_validate_size(file)

    try:
        pdf_content = parse_pdf(content)
    except PDFParseError as e:
        logger.warning(f"PDF parse error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    if not pdf_content.text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="PDF contains no extractable text",
        )

    title = pdf_content.title_or(filename)
    document = kb.create_document(
        CreateDocumentRequest(
            title=title,
            content=pdf_content.text,
            category=category,
            source=DocumentSource.PDF,
            language="en",
        )
    )

    tags = await assistant.suggest_tags(document)
    if tags:
        document = kb.update_document(document.id, UpdateDocumentRequest(tags=tags))

    logger.info(f"Ingested PDF {filename} ({pdf_content.pages} pages) as {document.id}")

    return PDFUploadResponse(
        filename=filename,
        pages=pdf_content.pages,
        success=True,
        document=document,
    )
