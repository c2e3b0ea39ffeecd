"""
In-memory backend implementation.

Useful for tests and local development without Datastore credentials.
Data lives only as long as the store object.
"""

from __future__ import annotations

from typing import Optional

from ..repository import BookRepository
from .store import MemoryBookStore


class MemoryBackend:
    """In-memory implementation of DatabaseBackendProtocol.

    Pass a shared store to have several backend instances (e.g. one per
    request) see the same data.

    Usage:
        from bookshelf.db.memory import MemoryBackend

        db = MemoryBackend()
        book_id = db.books.create(Book(title="Dune", author="Frank Herbert"))
    """

    def __init__(self, store: Optional[MemoryBookStore] = None) -> None:
        self._store = store if store is not None else MemoryBookStore()
        self._books = BookRepository(self._store)

    @property
    def books(self) -> BookRepository:
        """Access the Book repository."""
        return self._books

    @property
    def store(self) -> MemoryBookStore:
        return self._store

    def commit(self) -> None:
        """Writes are immediate; nothing to commit."""
        pass

    def rollback(self) -> None:
        """Writes are immediate; nothing to roll back."""
        pass

    def close(self) -> None:
        pass
