"""Local persistence for the knowledge base."""

from kbase.storage.store import JSONStore

__all__ = ["JSONStore"]
