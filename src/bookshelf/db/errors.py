"""
Exceptions raised by the database layer.

Every backend translates its own failure modes into these classes, so
callers can handle a missing book or an unreachable store the same way
whether the data lives in Datastore, in a SQL database or in memory.
"""

from __future__ import annotations

from typing import Optional


class DatabaseError(Exception):
    """Base class for errors raised by the database layer."""


class BookNotFoundError(DatabaseError, KeyError):
    """No book entity exists at the given key."""

    def __init__(self, book_id: Optional[int]) -> None:
        super().__init__(book_id)
        self.book_id = book_id

    def __str__(self) -> str:
        return f"Book {self.book_id} not found"


class StoreUnavailableError(DatabaseError):
    """The underlying store failed to complete a request.

    The original exception is available as __cause__.
    """


class MalformedCursorError(DatabaseError, ValueError):
    """A pagination token could not be decoded into a cursor."""

    def __init__(self, token: str, reason: str = "") -> None:
        super().__init__(token)
        self.token = token
        self.reason = reason

    def __str__(self) -> str:
        msg = f"Malformed cursor {self.token!r}"
        return f"{msg}: {self.reason}" if self.reason else msg
