"""Integration tests for the HTTP API.

Coverage:
    - Document, search and statistics endpoints
    - Notebook CRUD and membership
    - Chat answers, SSE streaming and assistant endpoints
    - PDF upload into the knowledge base

Services are injected through dependency overrides and the assistant runs
in demo mode, so no API key or network access is required.
"""
