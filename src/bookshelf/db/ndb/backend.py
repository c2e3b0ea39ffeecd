"""
NDB Backend implementation.

This module provides the NDBBackend class that implements
DatabaseBackendProtocol over Google Cloud Datastore.
"""

from __future__ import annotations

from typing import Iterator
from contextlib import contextmanager

from ..repository import BookRepository
from .client import Client
from .store import NDBBookStore


class NDBBackend:
    """NDB implementation of DatabaseBackendProtocol.

    Usage:
        from bookshelf.db.ndb import NDBBackend

        db = NDBBackend()
        with db.context():
            book = db.books.get(5629499534213120)
    """

    def __init__(self) -> None:
        """Initialize the NDB backend.

        Note: The NDB client is a singleton managed by Client.
        This backend doesn't create new connections.
        """
        self._books = BookRepository(NDBBookStore())

    @property
    def books(self) -> BookRepository:
        """Access the Book repository."""
        return self._books

    def commit(self) -> None:
        """Each put() is persisted immediately; nothing to commit."""
        pass

    def rollback(self) -> None:
        """Each put() is persisted immediately; nothing to roll back."""
        pass

    def close(self) -> None:
        """The NDB client is a process-wide singleton and is not closed here."""
        pass

    @contextmanager
    def context(self) -> Iterator[None]:
        """Get an NDB context for database operations.

        Usage:
            with db.context():
                page = db.books.list()
        """
        with Client.get_context():
            yield
