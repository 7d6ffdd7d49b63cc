"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kbase import __version__
from kbase.api.chat import ai_router
from kbase.api.chat import router as chat_router
from kbase.api.documents import router as documents_router
from kbase.api.notebooks import router as notebooks_router
from kbase.api.pages import router as pages_router
from kbase.api.search import router as search_router
from kbase.api.stats import router as stats_router
from kbase.api.upload import router as upload_router
from kbase.knowledge.service import get_knowledge_base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Loads the knowledge base on startup so the first request does not pay
    for seeding.
    """
    logger.info("Starting knowledge base API...")
    kb = get_knowledge_base()
    logger.info(f"Knowledge base ready with {len(kb.documents)} documents")
    yield
    logger.info("Shutting down knowledge base API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Knowledge Base API",
        description=(
            "Technical knowledge base with document browsing, notebooks, pages, full-text "
            "search with highlighting and an AI assistant that answers with "
            "citations. Supports streaming responses and PDF ingestion."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(documents_router)
    application.include_router(search_router)
    application.include_router(notebooks_router)
    application.include_router(pages_router)
    application.include_router(stats_router)
    application.include_router(chat_router)
    application.include_router(ai_router)
    application.include_router(upload_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "knowledge-base"}

    return application


app = create_app()
