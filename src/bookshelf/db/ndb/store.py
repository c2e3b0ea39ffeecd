"""
Google Cloud Datastore book store.

Implements BookStoreProtocol on top of google-cloud-ndb. Cursors are
native ndb.Cursor objects and tokens are their URL-safe encoding.
All operations must run inside an ndb context (see client.py).
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

import logging
from contextlib import contextmanager

from google.api_core.exceptions import GoogleAPIError, InvalidArgument
from google.cloud import ndb  # type: ignore

from ..errors import BookNotFoundError, MalformedCursorError, StoreUnavailableError
from ..protocols import PropertyDict, QueryBatch
from .models import BookModel


_log = logging.getLogger(__name__)


@contextmanager
def _rpc(operation: str) -> Iterator[None]:
    """Translate Datastore RPC failures into StoreUnavailableError.

    GoogleAPIError covers both failed calls and RetryError, which ndb
    raises once its retries of a transient failure are exhausted.
    """
    try:
        yield
    except GoogleAPIError as e:
        _log.error(f"Datastore {operation} failed: {e}")
        raise StoreUnavailableError(f"Datastore {operation} failed: {e}") from e


class NDBBookStore:
    """Datastore implementation of BookStoreProtocol"""

    def insert(self, properties: PropertyDict) -> int:
        with _rpc("insert"):
            key = BookModel(**properties).put()
        return key.id()

    def get(self, book_id: int) -> Optional[PropertyDict]:
        with _rpc("get"):
            model = BookModel.get_by_id(book_id)
        return model.to_dict() if model is not None else None

    def update(self, book_id: int, properties: PropertyDict) -> None:
        key = BookModel.make_key(book_id)

        def overwrite() -> None:
            # Datastore update semantics: the entity must already exist
            if key.get() is None:
                raise BookNotFoundError(book_id)
            BookModel(key=key, **properties).put()

        with _rpc("update"):
            ndb.transaction(overwrite)

    def delete(self, book_id: int) -> None:
        with _rpc("delete"):
            BookModel.make_key(book_id).delete()

    def query(
        self,
        filters: Mapping[str, Any],
        order: str,
        limit: int,
        start_cursor: Optional[ndb.Cursor] = None,
    ) -> QueryBatch:
        q = BookModel.query()
        for name, value in filters.items():
            q = q.filter(BookModel.prop(name) == value)
        q = q.order(BookModel.prop(order))
        with _rpc("query"):
            try:
                models, cursor, _ = q.fetch_page(limit, start_cursor=start_cursor)
            except InvalidArgument as e:
                if start_cursor is None:
                    raise
                # The service rejected the start cursor; the repository
                # reports it with the caller's token
                raise MalformedCursorError(
                    self.encode_cursor(start_cursor), e.message
                ) from e
        return QueryBatch([(m.key.id(), m.to_dict()) for m in models], cursor)

    def decode_cursor(self, token: str) -> ndb.Cursor:
        try:
            return ndb.Cursor(urlsafe=token)
        except (ValueError, TypeError) as e:
            raise MalformedCursorError(token, str(e)) from e

    def encode_cursor(self, cursor: ndb.Cursor) -> str:
        return cursor.urlsafe().decode("ascii")
