"""Chat and AI response models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Citation(BaseModel):
    """A source reference attached to an AI answer.

    Attributes:
        index: 1-based marker number used in the answer text, e.g. [1].
        document_id: Cited document id.
        document_title: Cited document title.
        snippet: Quoted excerpt of the document content.
        start_position: Character offset of the snippet in the content.
        end_position: End offset (exclusive) of the snippet.
        relevance_score: Relevance in (0, 1].
        category: Document category.
        tags: Document tags.
    """

    index: int = Field(ge=1)
    document_id: str
    document_title: str
    snippet: str
    start_position: int | None = None
    end_position: int | None = None
    relevance_score: float = Field(gt=0.0, le=1.0)
    category: str | None = None
    tags: list[str] = Field(default_factory=list)


class ChatMessage(BaseModel):
    """A single message in the assistant conversation."""

    id: str
    role: MessageRole
    content: str
    timestamp: datetime
    citations: list[Citation] = Field(default_factory=list)


class AIResponse(BaseModel):
    """Result of an AI operation.

    Attributes:
        text: Generated text (answers carry [n] citation markers).
        citations: Sources referenced by the text.
        is_error: Whether the text is an error message.
        latency: Processing time in milliseconds.
    """

    text: str
    citations: list[Citation] = Field(default_factory=list)
    is_error: bool = False
    latency: int | None = None


class ChatRequest(BaseModel):
    """Request payload for the chat endpoints.

    Attributes:
        message: User's question.
        notebook_id: Restrict the context to a notebook's documents.
    """

    message: str = Field(..., min_length=1)
    notebook_id: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v
