"""FastAPI endpoints for the knowledge base.

HTTP and streaming routes with RESTful API design and async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - /documents: Document browsing, CRUD and bookmarks
    - /search: Paginated, instant and vector search
    - /notebooks: Notebook CRUD and membership
    - /stats: Dashboard statistics
    - /chat, /ai: Assistant answers, history, summaries and tags
    - POST /upload/pdf: PDF ingestion
"""
