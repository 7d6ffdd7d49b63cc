"""Unit tests for individual components in isolation.

Coverage:
    - config: Settings validation and environment loading
    - storage: JSON key/value store
    - search: Relevance scoring and highlighting
    - knowledge: Knowledge base and notebook services, seed data
    - agent: Citations and the AI service (live mode with a mocked agent)
    - parsing: PDF text extraction

Leverages pytest-check for multiple assertions per test.
"""
