"""
Database layer for the bookshelf.

This package provides a backend-agnostic Book repository, supporting
Google Cloud Datastore (via ndb), SQL databases (via SQLAlchemy) and
an in-memory store.

Request-Scoped Sessions (Recommended):
    # In application startup:
    from bookshelf.db import init_session_manager
    init_session_manager("ndb")

    # In WSGI middleware:
    from bookshelf.db import db_wsgi_middleware
    app.wsgi_app = db_wsgi_middleware(app.wsgi_app)

    # In application code:
    from bookshelf.db import get_db
    page = get_db().books.list(cursor=request.args.get("cursor"))

Process-wide backend:
    from bookshelf.db import get_backend
    db = get_backend()
    book = db.books.get(book_id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .config import get_config
from .errors import (
    DatabaseError,
    BookNotFoundError,
    StoreUnavailableError,
    MalformedCursorError,
)
from .protocols import Book, BookPage
from .repository import PAGE_SIZE, BookRepository

# Import session management functions
from .session import (
    SessionManager,
    init_session_manager,
    get_session_manager,
    get_db,
    db_wsgi_middleware,
    request_context,
)

if TYPE_CHECKING:
    from .protocols import DatabaseBackendProtocol

# Cache the backend instance (for the get_backend() function)
_backend_instance: Optional["DatabaseBackendProtocol"] = None


def get_backend(force_new: bool = False) -> "DatabaseBackendProtocol":
    """Get the configured database backend.

    The backend is determined by the DATABASE_BACKEND environment variable:
    - "ndb" (default): Google Cloud Datastore
    - "sql": SQLAlchemy, connecting to DATABASE_URL
    - "memory": in-process store

    Args:
        force_new: If True, create a new instance even if one is cached.
    """
    global _backend_instance

    if _backend_instance is not None and not force_new:
        return _backend_instance

    backend_name = get_config().backend

    backend: DatabaseBackendProtocol
    if backend_name == "sql":
        from .sql import SQLBackend

        backend = SQLBackend()
    elif backend_name == "memory":
        from .memory import MemoryBackend

        backend = MemoryBackend()
    else:
        from .ndb import NDBBackend

        backend = NDBBackend()

    _backend_instance = backend
    return backend


def reset_backend() -> None:
    """Reset the cached backend instance.

    Useful for testing when you need to switch backends.
    """
    global _backend_instance
    if _backend_instance is not None:
        _backend_instance.close()
        _backend_instance = None


__all__ = [
    # Data and errors
    "Book",
    "BookPage",
    "BookRepository",
    "PAGE_SIZE",
    "DatabaseError",
    "BookNotFoundError",
    "StoreUnavailableError",
    "MalformedCursorError",
    # Session management (recommended)
    "SessionManager",
    "init_session_manager",
    "get_session_manager",
    "get_db",
    "db_wsgi_middleware",
    "request_context",
    # Process-wide backend
    "get_backend",
    "reset_backend",
]
