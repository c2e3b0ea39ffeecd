"""
SQL book store.

Implements BookStoreProtocol using SQLAlchemy ORM. Pagination is by
key set over (order column, id), with positions encoded as opaque
tokens by cursors.py.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

import logging
from contextlib import contextmanager

from sqlalchemy import and_, asc, or_, select
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session

from ..cursors import Position, decode_position, encode_position
from ..errors import BookNotFoundError, StoreUnavailableError
from ..protocols import BOOK_PROPERTIES, PropertyDict, QueryBatch
from .models import BookRow


_log = logging.getLogger(__name__)


@contextmanager
def _db(operation: str) -> Iterator[None]:
    """Translate connection-level failures into StoreUnavailableError.

    PoolTimeoutError is raised when no pooled connection frees up
    within pool_timeout seconds.
    """
    try:
        yield
    except (
        OperationalError,
        InterfaceError,
        DisconnectionError,
        PoolTimeoutError,
    ) as e:
        _log.error(f"SQL {operation} failed: {e}")
        raise StoreUnavailableError(f"SQL {operation} failed: {e}") from e


def _row_properties(row: BookRow) -> PropertyDict:
    return {attr: getattr(row, attr) for attr in BOOK_PROPERTIES}


def _column(name: str) -> Any:
    if name not in BOOK_PROPERTIES:
        raise AttributeError(f"BookRow has no property '{name}'")
    return getattr(BookRow, name)


class SQLBookStore:
    """SQLAlchemy implementation of BookStoreProtocol.

    Writes are flushed immediately but only committed by the session
    owner (see SQLBackend.commit()).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert(self, properties: PropertyDict) -> int:
        with _db("insert"):
            row = BookRow(**properties)
            self._session.add(row)
            self._session.flush()
        return row.id

    def get(self, book_id: int) -> Optional[PropertyDict]:
        with _db("get"):
            row = self._session.get(BookRow, book_id)
        return _row_properties(row) if row is not None else None

    def update(self, book_id: int, properties: PropertyDict) -> None:
        with _db("update"):
            row = self._session.get(BookRow, book_id)
            if row is None:
                raise BookNotFoundError(book_id)
            for attr, value in properties.items():
                setattr(row, attr, value)
            self._session.flush()

    def delete(self, book_id: int) -> None:
        with _db("delete"):
            row = self._session.get(BookRow, book_id)
            if row is not None:
                self._session.delete(row)
                self._session.flush()

    def query(
        self,
        filters: Mapping[str, Any],
        order: str,
        limit: int,
        start_cursor: Optional[Position] = None,
    ) -> QueryBatch:
        order_col = _column(order)
        stmt = select(BookRow)
        for name, value in filters.items():
            stmt = stmt.where(_column(name) == value)
        if start_cursor is not None:
            stmt = stmt.where(
                or_(
                    order_col > start_cursor.value,
                    and_(order_col == start_cursor.value, BookRow.id > start_cursor.id),
                )
            )
        stmt = stmt.order_by(asc(order_col), asc(BookRow.id)).limit(limit)
        with _db("query"):
            rows = self._session.scalars(stmt).all()
        cursor_after = None
        if rows:
            last = rows[-1]
            cursor_after = Position(getattr(last, order), last.id)
        return QueryBatch([(row.id, _row_properties(row)) for row in rows], cursor_after)

    def decode_cursor(self, token: str) -> Position:
        return decode_position(token)

    def encode_cursor(self, cursor: Position) -> str:
        return encode_position(cursor)
