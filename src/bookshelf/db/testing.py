"""
Testing utilities for database backends.

This module provides helpers shared by the backend test suites:
a factory for sample books and a walker that follows pagination
cursors to the end.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from dataclasses import dataclass, field

from .protocols import Book, BookPage


def make_book(n: int = 0, **overrides: Any) -> Book:
    """Create a sample book; n distinguishes titles and authors.

    Titles are zero-padded so that title order matches n.

    Example:
        book = make_book(3, created_by_id="user-1")
        # Book(title="Title 003", author="Author 3", ...)
    """
    values: dict[str, Any] = dict(
        title=f"Title {n:03d}",
        author=f"Author {n}",
        published_date=f"{1900 + n}-01-01",
        description=f"Description of book {n}",
        created_by="Test User",
        created_by_id="test-user",
        image_url=None,
    )
    values.update(overrides)
    return Book(**values)


@dataclass
class PageWalk:
    """The pages visited while following cursors."""

    pages: List[BookPage] = field(default_factory=list)

    @property
    def sizes(self) -> List[int]:
        """Number of books on each page, in order."""
        return [len(p.books) for p in self.pages]

    @property
    def books(self) -> List[Book]:
        """All books, in the order they were returned."""
        return [b for p in self.pages for b in p.books]

    @property
    def last(self) -> BookPage:
        return self.pages[-1]


def collect_pages(
    fetch: Callable[[Optional[str]], BookPage], max_pages: int = 100
) -> PageWalk:
    """Follow cursors from the first page until a page has none.

    Args:
        fetch: Function taking a cursor (None for the first page),
               e.g. backend.books.list.
        max_pages: Safety limit against cursors that never end.

    Example:
        walk = collect_pages(lambda c: db.books.list_by_user("u1", c))
        assert walk.sizes == [10, 3]
    """
    walk = PageWalk()
    cursor: Optional[str] = None
    while len(walk.pages) < max_pages:
        page = fetch(cursor)
        walk.pages.append(page)
        if page.cursor is None:
            return walk
        cursor = page.cursor
    raise AssertionError(f"Pagination did not end within {max_pages} pages")
