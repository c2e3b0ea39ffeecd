"""
Tests for BookRepository against a scripted store.

The scripted store records the calls it receives and returns canned
batches, so these tests pin down what the repository asks of a store
and how it interprets the answers, independently of any real backend.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from bookshelf.db.errors import MalformedCursorError, StoreUnavailableError
from bookshelf.db.protocols import Book, BookStoreProtocol, PropertyDict, QueryBatch
from bookshelf.db.repository import (
    PAGE_SIZE,
    BookRepository,
    book_to_properties,
    properties_to_book,
)


class ScriptedStore:
    """A BookStoreProtocol implementation with canned query results"""

    def __init__(self, batch: Optional[QueryBatch] = None) -> None:
        self.batch = batch or QueryBatch([])
        self.queries: List[Dict[str, Any]] = []
        self.inserted: List[PropertyDict] = []
        self.updated: List[Tuple[int, PropertyDict]] = []
        self.failure: Optional[Exception] = None

    def insert(self, properties: PropertyDict) -> int:
        self.inserted.append(properties)
        return 4242

    def get(self, book_id: int) -> Optional[PropertyDict]:
        if self.failure is not None:
            raise self.failure
        return None

    def update(self, book_id: int, properties: PropertyDict) -> None:
        self.updated.append((book_id, properties))

    def delete(self, book_id: int) -> None:
        pass

    def query(
        self,
        filters: Mapping[str, Any],
        order: str,
        limit: int,
        start_cursor: Optional[Any] = None,
    ) -> QueryBatch:
        self.queries.append(
            dict(filters=dict(filters), order=order, limit=limit, start=start_cursor)
        )
        return self.batch

    def decode_cursor(self, token: str) -> Any:
        if not token.startswith("tok:"):
            raise MalformedCursorError(token)
        return ("cursor", token[4:])

    def encode_cursor(self, cursor: Any) -> str:
        return f"tok:{cursor[1]}"


def _entities(count: int) -> List[Tuple[int, PropertyDict]]:
    return [(n, {"title": f"T{n:02d}", "author": "A"}) for n in range(count)]


class TestFieldMapping:
    def test_scripted_store_satisfies_protocol(self) -> None:
        assert isinstance(ScriptedStore(), BookStoreProtocol)

    def test_all_seven_fields_are_written(self) -> None:
        props = book_to_properties(Book(title="T", author="A", id=99))

        assert props == {
            "title": "T",
            "author": "A",
            "published_date": "",
            "description": "",
            "created_by": "",
            "created_by_id": "",
            "image_url": None,
        }

    def test_read_defaults(self) -> None:
        book = properties_to_book(3, {"title": "T", "author": "A"})

        assert book == Book(id=3, title="T", author="A")
        assert book.created_by == ""
        assert book.created_by_id == ""
        assert book.image_url is None

    def test_stored_none_reads_as_empty_string(self) -> None:
        book = properties_to_book(
            3, {"title": "T", "author": "A", "created_by": None, "image_url": ""}
        )

        assert book.created_by == ""
        # An empty image URL is kept, distinct from no image
        assert book.image_url == ""

    def test_create_returns_store_id(self) -> None:
        store = ScriptedStore()

        assert BookRepository(store).create(Book(title="T", author="A")) == 4242
        assert "id" not in store.inserted[0]

    def test_update_writes_full_entity(self) -> None:
        store = ScriptedStore()
        BookRepository(store).update(Book(title="T", author="A", id=7))

        (book_id, props), = store.updated
        assert book_id == 7
        assert set(props) == {
            "title",
            "author",
            "published_date",
            "description",
            "created_by",
            "created_by_id",
            "image_url",
        }


class TestPagingContract:
    def test_list_query_shape(self) -> None:
        store = ScriptedStore()
        BookRepository(store).list()

        assert store.queries == [
            dict(filters={}, order="title", limit=PAGE_SIZE, start=None)
        ]

    def test_list_by_user_query_shape(self) -> None:
        store = ScriptedStore()
        BookRepository(store).list_by_user("u-1", "tok:abc")

        assert store.queries == [
            dict(
                filters={"created_by_id": "u-1"},
                order="title",
                limit=PAGE_SIZE,
                start=("cursor", "abc"),
            )
        ]

    @pytest.mark.parametrize("token", [None, "", "  \t"])
    def test_blank_token_means_no_cursor(self, token: Optional[str]) -> None:
        store = ScriptedStore()
        BookRepository(store).list(token)

        assert store.queries[0]["start"] is None

    def test_full_page_with_cursor_emits_token(self) -> None:
        store = ScriptedStore(QueryBatch(_entities(PAGE_SIZE), ("cursor", "next")))

        page = BookRepository(store).list()

        assert len(page) == PAGE_SIZE
        assert page.cursor == "tok:next"
        assert [b.id for b in page.books] == list(range(PAGE_SIZE))

    def test_full_page_without_cursor_emits_none(self) -> None:
        store = ScriptedStore(QueryBatch(_entities(PAGE_SIZE), None))

        assert BookRepository(store).list().cursor is None

    def test_short_page_ignores_store_cursor(self) -> None:
        """Fewer than PAGE_SIZE books means the last page, whatever the store says."""
        store = ScriptedStore(QueryBatch(_entities(PAGE_SIZE - 1), ("cursor", "x")))

        page = BookRepository(store).list()

        assert len(page) == PAGE_SIZE - 1
        assert page.cursor is None

    def test_malformed_token_is_not_swallowed(self) -> None:
        store = ScriptedStore()

        with pytest.raises(MalformedCursorError):
            BookRepository(store).list("garbage")
        assert store.queries == []

    def test_cursor_refused_by_query_keeps_callers_token(self) -> None:
        class RefusingStore(ScriptedStore):
            def query(self, *args: Any, **kwargs: Any) -> QueryBatch:
                raise MalformedCursorError("tok:re-encoded", "cursor expired")

        with pytest.raises(MalformedCursorError) as excinfo:
            BookRepository(RefusingStore()).list("tok:abc")

        assert excinfo.value.token == "tok:abc"
        assert excinfo.value.reason == "cursor expired"

    def test_store_failure_propagates(self) -> None:
        store = ScriptedStore()
        store.failure = StoreUnavailableError("down")

        with pytest.raises(StoreUnavailableError):
            BookRepository(store).get(1)
