"""Document models for the technical knowledge base."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

Language = Literal["zh-TW", "en", "ja"]


class TechnologyCategory(str, Enum):
    """Technology areas a document can belong to."""

    GOLANG = "Golang"
    RUST = "Rust"
    FLUTTER = "Flutter"
    ANGULAR = "Angular"
    AI = "AI"
    GEMINI = "Gemini"
    SYSTEM_DESIGN = "System Design"
    POSTGRES = "PostgreSQL"


class DocumentStatus(str, Enum):
    """Lifecycle state of a document."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    DRAFT = "draft"
    PROCESSING = "processing"


class DocumentSource(str, Enum):
    """Where a document was imported from."""

    NOTION = "Notion"
    GOOGLE_DOCS = "Google Docs"
    GITHUB = "GitHub"
    OBSIDIAN = "Obsidian"
    WEB_ARTICLE = "Web Article"
    MARKDOWN = "Markdown File"
    PDF = "PDF"
    MANUAL = "Manual Input"


class Document(BaseModel):
    """A technical document stored in the knowledge base.

    Attributes:
        id: Unique document identifier.
        title: Document title.
        content: Full text content.
        summary: Short preview, usually the first 100 characters.
        category: Technology category.
        tags: Free-form tags.
        embedding_id: Identifier of the associated embedding record.
        status: Lifecycle state.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
        source: Import source.
        source_url: Original URL when known.
        view_count: Number of recorded views.
        relevance_score: Search score, only set on search results.
        size: Content length in characters.
        language: Content language.
        is_pinned: Pinned by the user.
        is_favorited: Marked as favourite by the user.
    """

    id: str
    title: str
    content: str
    summary: str = ""
    category: TechnologyCategory
    tags: list[str] = Field(default_factory=list)
    embedding_id: str | None = None
    status: DocumentStatus = DocumentStatus.ACTIVE
    created_at: datetime
    updated_at: datetime
    source: DocumentSource = DocumentSource.MANUAL
    source_url: str | None = None
    view_count: int = Field(default=0, ge=0)
    relevance_score: float | None = None
    size: int = Field(default=0, ge=0)
    language: Language = "zh-TW"
    is_pinned: bool = False
    is_favorited: bool = False


class CreateDocumentRequest(BaseModel):
    """Payload for creating a document."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: TechnologyCategory
    tags: list[str] = Field(default_factory=list)
    source: DocumentSource = DocumentSource.MANUAL
    source_url: str | None = None
    language: Language | None = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip whitespace so blank values fail min_length."""
        if isinstance(v, str):
            return v.strip()
        return v


class UpdateDocumentRequest(BaseModel):
    """Partial update of a document. Unset fields are left unchanged."""

    title: str | None = Field(None, min_length=1)
    content: str | None = Field(None, min_length=1)
    category: TechnologyCategory | None = None
    tags: list[str] | None = None
    status: DocumentStatus | None = None
