from enum import Enum

from pydantic import BaseModel, Field

from kbase.models.chat import Citation
from kbase.models.documents import Document


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    RECEIVED = "received"
    SEARCHING = "searching"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status (received, searching, generating, complete, error).
        error: Error message if something went wrong.
        citations: Sources for the full answer, sent with the final chunk.
    """

    content: str
    done: bool
    status: StreamStatus | None = None
    error: str | None = None
    citations: list[Citation] = Field(default_factory=list)


class PDFUploadResponse(BaseModel):
    """Response after PDF upload processing.

    Attributes:
        filename: Name of the uploaded file.
        pages: Number of pages in the document.
        success: Whether the upload was successful.
        document: The knowledge base document created from the PDF.
        error: Error message if upload failed.
    """

    filename: str
    pages: int
    success: bool
    document: Document | None = None
    error: str | None = None


class TagSuggestions(BaseModel):
    document_id: str
    tags: list[str]


class APIKeyRequest(BaseModel):
    api_key: str
