"""
The Book repository.

BookRepository translates between Book objects and the property
mappings of a book store, and implements the paging contract shared by
the two listing operations. It is backend-agnostic: every backend
constructs one over its own store.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import logging

from .errors import BookNotFoundError, MalformedCursorError
from .protocols import (
    Book,
    BookPage,
    BookStoreProtocol,
    PropertyDict,
)

# Number of books on a listing page
PAGE_SIZE = 10

_log = logging.getLogger(__name__)


def book_to_properties(book: Book) -> PropertyDict:
    """Return all seven stored fields of a book, defaults included"""
    return {
        "title": book.title,
        "author": book.author,
        "published_date": book.published_date or "",
        "description": book.description or "",
        "created_by": book.created_by or "",
        "created_by_id": book.created_by_id or "",
        "image_url": book.image_url,
    }


def properties_to_book(book_id: int, properties: Mapping[str, Any]) -> Book:
    """Create a Book from stored properties, filling in defaults.

    Absent owner fields read as empty strings, while an absent image
    URL stays None so that "no image" is distinguishable from "".
    """
    return Book(
        id=book_id,
        title=properties.get("title") or "",
        author=properties.get("author") or "",
        published_date=properties.get("published_date") or "",
        description=properties.get("description") or "",
        created_by=properties.get("created_by") or "",
        created_by_id=properties.get("created_by_id") or "",
        image_url=properties.get("image_url"),
    )


class BookRepository:
    """Implementation of BookRepositoryProtocol over any book store."""

    def __init__(self, store: BookStoreProtocol) -> None:
        self._store = store

    @property
    def store(self) -> BookStoreProtocol:
        return self._store

    def create(self, book: Book) -> int:
        """Create a new book, returning the id assigned by the store"""
        book_id = self._store.insert(book_to_properties(book))
        _log.debug(f"Created book {book_id}")
        return book_id

    def get(self, book_id: int) -> Book:
        """Fetch a book by id"""
        properties = self._store.get(book_id)
        if properties is None:
            raise BookNotFoundError(book_id)
        return properties_to_book(book_id, properties)

    def update(self, book: Book) -> None:
        """Overwrite all fields of an existing book.

        This is a full overwrite: fields left at their defaults in
        the given book replace whatever was stored before.
        """
        if book.id is None:
            raise ValueError("Cannot update a book that has no id")
        self._store.update(book.id, book_to_properties(book))
        _log.debug(f"Updated book {book.id}")

    def delete(self, book_id: int) -> None:
        """Delete a book; deleting a missing book is not an error"""
        self._store.delete(book_id)
        _log.debug(f"Deleted book {book_id}")

    def list(self, cursor: Optional[str] = None) -> BookPage:
        """List all books, ordered by title"""
        return self._list_page({}, cursor)

    def list_by_user(self, user_id: str, cursor: Optional[str] = None) -> BookPage:
        """List the books created by a user, ordered by title"""
        # On Datastore this needs the composite (createdById, title)
        # index from index.yaml, since we filter on one property and
        # order by another
        return self._list_page({"created_by_id": user_id}, cursor)

    def _list_page(self, filters: Dict[str, Any], token: Optional[str]) -> BookPage:
        """Fetch one page of books, starting after the given cursor token"""
        start_cursor = None
        if token and token.strip():
            try:
                start_cursor = self._store.decode_cursor(token)
            except MalformedCursorError as e:
                _log.warning(f"Rejected cursor token: {e}")
                raise
        try:
            batch = self._store.query(
                filters, order="title", limit=PAGE_SIZE, start_cursor=start_cursor
            )
        except MalformedCursorError as e:
            # The token decoded, but the store refused to resume from it
            _log.warning(f"Store rejected cursor token {token!r}: {e.reason}")
            raise MalformedCursorError(token or "", e.reason) from e
        books = [properties_to_book(i, p) for i, p in batch.entities]
        # A full page is taken to mean that there may be more books.
        # When the total is a multiple of PAGE_SIZE, the last page
        # therefore still carries a cursor, and following it yields
        # an empty page.
        if len(books) == PAGE_SIZE and batch.cursor_after is not None:
            return BookPage(books, self._store.encode_cursor(batch.cursor_after))
        return BookPage(books)
