"""Test package for the knowledge base service.

Structure:
    - unit/: Services, search heuristics, citations, storage and parsing
    - integration/: HTTP endpoints through the real FastAPI app

Every test runs against its own temporary data directory. PDFs are built
in memory by the make_pdf fixture. Leverages pytest with pytest-check for
soft assertions.
"""
