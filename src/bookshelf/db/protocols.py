"""
Protocol definitions for the bookshelf database layer.

This module defines the data transfer objects shared by all backends
and the interface contracts the backends implement. Using Protocol
classes enables structural subtyping, so stores and backends don't need
to explicitly inherit from these classes.

There are two levels:

- BookStoreProtocol is the narrow interface over a concrete store
  (Datastore, SQL, in-memory). It deals in property mappings and in
  store-native cursor objects.
- BookRepositoryProtocol is what application code sees. It deals in
  Book objects and opaque string cursors.
"""

from __future__ import annotations

from typing import (
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)
from dataclasses import dataclass, field


# The entity kind (Datastore) or table name (SQL) for books
BOOK_KIND = "Book"

# Python attribute name -> stored property name.
# The stored names are shared with the other bookshelf samples.
BOOK_PROPERTIES: Mapping[str, str] = {
    "title": "title",
    "author": "author",
    "published_date": "publishedDate",
    "description": "description",
    "created_by": "createdBy",
    "created_by_id": "createdById",
    "image_url": "imageUrl",
}

PropertyDict = Dict[str, Any]


# =============================================================================
# Data Transfer Objects (shared across backends)
# =============================================================================


@dataclass
class Book:
    """A book on the shelf."""

    title: str
    author: str
    published_date: str = ""
    description: str = ""
    created_by: str = ""
    created_by_id: str = ""
    image_url: Optional[str] = None
    # Assigned by the store on creation, immutable afterwards
    id: Optional[int] = None


@dataclass
class BookPage:
    """One page of a book listing.

    The cursor, when present, resumes the listing after the last book
    on this page. It is only set when the page was full.
    """

    books: List[Book] = field(default_factory=list)
    cursor: Optional[str] = None

    def __len__(self) -> int:
        return len(self.books)


@dataclass
class QueryBatch:
    """Raw result of a single store query.

    entities holds (id, properties) pairs with properties keyed by
    Python attribute names. cursor_after is a store-native cursor
    pointing past the last entity, or None.
    """

    entities: List[Tuple[int, PropertyDict]]
    cursor_after: Optional[Any] = None


# =============================================================================
# Store Protocol
# =============================================================================


@runtime_checkable
class BookStoreProtocol(Protocol):
    """Narrow interface over a concrete book store."""

    def insert(self, properties: PropertyDict) -> int:
        """Store a new entity under an auto-generated key, returning its id."""
        ...

    def get(self, book_id: int) -> Optional[PropertyDict]:
        """Return the stored properties, or None if there is no such entity."""
        ...

    def update(self, book_id: int, properties: PropertyDict) -> None:
        """Overwrite an existing entity; raise BookNotFoundError if absent."""
        ...

    def delete(self, book_id: int) -> None:
        """Delete an entity. Deleting a missing entity is not an error."""
        ...

    def query(
        self,
        filters: Mapping[str, Any],
        order: str,
        limit: int,
        start_cursor: Optional[Any] = None,
    ) -> QueryBatch:
        """Run an equality-filtered query ordered ascending by one property."""
        ...

    def decode_cursor(self, token: str) -> Any:
        """Turn a URL-safe token into a store cursor (MalformedCursorError if invalid)."""
        ...

    def encode_cursor(self, cursor: Any) -> str:
        """Turn a store cursor into a URL-safe token."""
        ...


# =============================================================================
# Repository Protocol
# =============================================================================


@runtime_checkable
class BookRepositoryProtocol(Protocol):
    """Protocol for Book repository operations."""

    def create(self, book: Book) -> int:
        """Create a new book, returning the id assigned by the store."""
        ...

    def get(self, book_id: int) -> Book:
        """Fetch a book by id. Raises BookNotFoundError if absent."""
        ...

    def update(self, book: Book) -> None:
        """Overwrite every field of an existing book."""
        ...

    def delete(self, book_id: int) -> None:
        """Delete a book by id."""
        ...

    def list(self, cursor: Optional[str] = None) -> BookPage:
        """List books ordered by title, one page at a time."""
        ...

    def list_by_user(self, user_id: str, cursor: Optional[str] = None) -> BookPage:
        """List a user's books ordered by title, one page at a time."""
        ...


# =============================================================================
# Backend Protocol
# =============================================================================


@runtime_checkable
class DatabaseBackendProtocol(Protocol):
    """Main database backend protocol.

    A backend bundles a store with the repository built over it and
    exposes the lifecycle hooks used by the session manager.
    """

    @property
    def books(self) -> BookRepositoryProtocol:
        """Access the Book repository."""
        ...

    def commit(self) -> None:
        """Commit pending changes (no-op for stores that write immediately)."""
        ...

    def rollback(self) -> None:
        """Discard pending changes (no-op for stores that write immediately)."""
        ...

    def close(self) -> None:
        """Release resources held by the backend."""
        ...
