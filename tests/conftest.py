"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - settings: Demo-mode settings over a temporary data directory
    - store: JSON store in that directory
    - knowledge_base, notebook_service, page_service, ai_service: Services
      sharing the store
    - app: FastAPI app with the services injected
    - async_client: HTTPX client for API testing
    - make_pdf: Builder for small in-memory PDF files

Every test gets its own data directory, so services never share state.
"""

import random
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from kbase.agent.chat_agent import AIService, get_ai_service
from kbase.agent.config import Settings
from kbase.api.app import create_app
from kbase.knowledge.notebooks import NotebookService, get_notebook_service
from kbase.knowledge.pages import PageService, get_page_service
from kbase.knowledge.service import KnowledgeBaseService, get_knowledge_base
from kbase.models.documents import Document, TechnologyCategory
from kbase.storage.store import JSONStore

SEED_DOCUMENTS = 40


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Demo-mode settings without artificial latency."""
    return Settings(
        data_dir=tmp_path,
        seed_document_count=SEED_DOCUMENTS,
        seed_query_count=20,
        demo_mode=True,
        demo_latency_ms=0,
        llm_api_key=None,
    )


@pytest.fixture
def store(settings: Settings) -> JSONStore:
    return JSONStore(settings.data_dir)


@pytest.fixture
def knowledge_base(settings: Settings, store: JSONStore) -> KnowledgeBaseService:
    return KnowledgeBaseService(settings=settings, store=store)


@pytest.fixture
def notebook_service(store: JSONStore) -> NotebookService:
    return NotebookService(store=store)


@pytest.fixture
def page_service(store: JSONStore) -> PageService:
    return PageService(store=store)


@pytest.fixture
def ai_service(settings: Settings, store: JSONStore) -> AIService:
    """Assistant with a fixed random seed."""
    return AIService(settings=settings, store=store, rng=random.Random(7))


@pytest.fixture
def app(
    knowledge_base: KnowledgeBaseService,
    notebook_service: NotebookService,
    page_service: PageService,
    ai_service: AIService,
) -> FastAPI:
    """Application with the per-test services injected."""
    application = create_app()
    application.dependency_overrides[get_knowledge_base] = lambda: knowledge_base
    application.dependency_overrides[get_notebook_service] = lambda: notebook_service
    application.dependency_overrides[get_page_service] = lambda: page_service
    application.dependency_overrides[get_ai_service] = lambda: ai_service
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Factory for standalone documents."""

    def _make(
        title: str = "Understanding Rust Ownership",
        content: str = "Ownership is the core of Rust. Borrowing keeps references valid.",
        category: TechnologyCategory = TechnologyCategory.RUST,
        tags: list[str] | None = None,
        summary: str = "",
        doc_id: str = "doc-test",
    ) -> Document:
        now = datetime.now(timezone.utc)
        return Document(
            id=doc_id,
            title=title,
            content=content,
            summary=summary,
            category=category,
            tags=tags if tags is not None else ["ownership", "memory safety"],
            created_at=now,
            updated_at=now,
        )

    return _make


def _pdf_bytes(text: str | None, title: str | None) -> bytes:
    """Assemble a one-page PDF with a Helvetica text line and a valid xref table."""
    stream = b""
    if text is not None:
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 18 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    if title is not None:
        objects.append(b"<< /Title (" + title.encode("latin-1") + b") >>")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()

    info = f" /Info {len(objects)} 0 R" if title is not None else ""
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R{info} >>\n".encode()
    out += f"startxref\n{xref_offset}\n%%EOF\n".encode()
    return bytes(out)


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Factory for small PDFs: make_pdf("text", title="Title")."""

    def _make(text: str | None = "Hello knowledge base", title: str | None = None) -> bytes:
        return _pdf_bytes(text, title)

    return _make
