"""
In-memory book store.

Implements BookStoreProtocol over a plain dict, with the same ordering
and cursor semantics as the SQL store: results are sorted by the order
property and then by id, and a cursor is the position of the last
entity returned.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

import itertools
import threading

from ..cursors import Position, decode_position, encode_position
from ..errors import BookNotFoundError
from ..protocols import PropertyDict, QueryBatch


class MemoryBookStore:
    """Dict-backed implementation of BookStoreProtocol"""

    def __init__(self) -> None:
        self._entities: Dict[int, PropertyDict] = {}
        # Ids start at 1, as with auto-generated Datastore and SQL keys
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, properties: PropertyDict) -> int:
        with self._lock:
            book_id = next(self._ids)
            self._entities[book_id] = dict(properties)
        return book_id

    def get(self, book_id: int) -> Optional[PropertyDict]:
        with self._lock:
            properties = self._entities.get(book_id)
            return dict(properties) if properties is not None else None

    def update(self, book_id: int, properties: PropertyDict) -> None:
        with self._lock:
            if book_id not in self._entities:
                raise BookNotFoundError(book_id)
            self._entities[book_id] = dict(properties)

    def delete(self, book_id: int) -> None:
        with self._lock:
            self._entities.pop(book_id, None)

    def query(
        self,
        filters: Mapping[str, Any],
        order: str,
        limit: int,
        start_cursor: Optional[Position] = None,
    ) -> QueryBatch:
        with self._lock:
            matches: List[Tuple[int, PropertyDict]] = [
                (book_id, dict(properties))
                for book_id, properties in self._entities.items()
                if all(properties.get(k) == v for k, v in filters.items())
            ]

        def sort_key(item: Tuple[int, PropertyDict]) -> Position:
            return Position(item[1].get(order) or "", item[0])

        matches.sort(key=sort_key)
        if start_cursor is not None:
            matches = [m for m in matches if sort_key(m) > start_cursor]
        page = matches[:limit]
        cursor_after = sort_key(page[-1]) if page else None
        return QueryBatch(page, cursor_after)

    def decode_cursor(self, token: str) -> Position:
        return decode_position(token)

    def encode_cursor(self, cursor: Position) -> str:
        return encode_position(cursor)

    def clear(self) -> None:
        """Remove all entities"""
        with self._lock:
            self._entities.clear()

    def __len__(self) -> int:
        return len(self._entities)
