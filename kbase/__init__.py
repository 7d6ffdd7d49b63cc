"""Knowledge Base - document browsing, notebooks, search and a demo AI assistant.

Serves an in-memory technical knowledge base over FastAPI, with pydantic
models for validation and an optional agno-backed LLM for live answers.

Components:
    - api: HTTP endpoints and streaming chat responses
    - agent: settings and the AI assistant (summaries, Q&A, citations, tags)
    - knowledge: document collection, notebooks and seed data
    - search: relevance scoring and highlighting
    - storage: JSON key/value persistence
    - parsing: PDF extraction for document ingestion
    - models: domain and request/response schemas
"""

__version__ = "0.1.0"
