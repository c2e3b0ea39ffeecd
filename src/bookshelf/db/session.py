"""
Request-scoped database session management.

This module provides a unified interface for managing database sessions
across the ndb, SQL and in-memory backends. It handles:

- Backend selection via configuration
- Request-scoped backends with automatic cleanup
- Transaction boundaries aligned with the request lifecycle

For ndb and memory:
- Each write is immediately persisted
- commit()/rollback() are no-ops

For SQL:
- Writes are flushed to the database as they happen
- commit() at successful request completion, rollback() on exception
"""

from __future__ import annotations

import logging
from typing import Optional, Any, TYPE_CHECKING, Iterator
from contextlib import contextmanager
from threading import local

from .config import BACKENDS, get_config

if TYPE_CHECKING:
    from .memory import MemoryBookStore
    from .protocols import DatabaseBackendProtocol

# Thread-local storage for request-scoped backend instances
_thread_local = local()

# Logger for this module
_log = logging.getLogger(__name__)


class SessionManager:
    """Manages database sessions and backend lifecycle.

    Usage:
        # Initialize once at application startup
        session_manager = SessionManager("sql", database_url="...")

        # In WSGI middleware or request hooks
        with session_manager.request_context() as db:
            book = db.books.get(book_id)
            # On successful completion, changes are committed
            # On exception, changes are rolled back
    """

    def __init__(
        self,
        backend_type: Optional[str] = None,
        database_url: Optional[str] = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            backend_type: "ndb", "sql" or "memory". If not provided,
                          reads from DATABASE_BACKEND environment variable.
            database_url: SQLAlchemy connection URL. If not provided,
                          reads from DATABASE_URL environment variable.
        """
        config = get_config()
        self._backend_type = (backend_type or config.backend).lower()
        if self._backend_type not in BACKENDS:
            raise ValueError(f"Unknown database backend '{self._backend_type}'")
        self._database_url = database_url or config.database_url
        # Shared sessionmaker for SQL (created once, used by all requests)
        self._sql_session_factory: Optional[Any] = None
        # Shared store for the memory backend, so requests see each other's writes
        self._memory_store: Optional["MemoryBookStore"] = None

        if self._backend_type == "sql":
            if not self._database_url:
                raise ValueError(
                    "DATABASE_URL required for SQL backend. "
                    "Set via environment or database_url parameter."
                )
            self._init_sql_pool()
        elif self._backend_type == "memory":
            from .memory import MemoryBookStore

            self._memory_store = MemoryBookStore()

    @property
    def backend_type(self) -> str:
        """Get the configured backend type."""
        return self._backend_type

    def _init_sql_pool(self) -> None:
        """Create the shared SQLAlchemy engine and sessionmaker.

        Called once at startup. The engine manages a connection pool
        that is shared across all requests.
        """
        from .sql.connection import create_db_engine, create_session_factory

        engine = create_db_engine(self._database_url)
        self._sql_session_factory = create_session_factory(engine)

    def _create_backend(self) -> "DatabaseBackendProtocol":
        """Create a new backend instance for the current request."""
        if self._backend_type == "sql":
            from .sql import SQLBackend

            return SQLBackend(session_factory=self._sql_session_factory)
        if self._backend_type == "memory":
            from .memory import MemoryBackend

            return MemoryBackend(self._memory_store)

        from .ndb import NDBBackend

        return NDBBackend()

    def get_backend(self) -> "DatabaseBackendProtocol":
        """Get the request-scoped backend instance.

        Returns the backend instance for the current request/thread.
        Creates one if it doesn't exist.
        """
        backend: Optional["DatabaseBackendProtocol"] = getattr(
            _thread_local, "backend", None
        )
        if backend is None:
            backend = self._create_backend()
            _thread_local.backend = backend
        return backend

    def _cleanup_backend(self) -> None:
        """Clean up the request-scoped backend."""
        backend: Optional["DatabaseBackendProtocol"] = getattr(
            _thread_local, "backend", None
        )
        if backend is not None:
            try:
                backend.close()
            except Exception as e:
                _log.warning(f"Error closing backend: {e}")
            finally:
                _thread_local.backend = None

    @contextmanager
    def request_context(self) -> Iterator["DatabaseBackendProtocol"]:
        """Context manager for request-scoped database operations.

        1. Creates a backend for this request
        2. Yields the backend for use
        3. Commits on successful completion
        4. Rolls back on any exception
        5. Cleans up the backend
        """
        backend = self.get_backend()
        success = False
        try:
            yield backend
            success = True
        except Exception:
            try:
                backend.rollback()
            except Exception as e:
                _log.warning(f"Error during rollback: {e}")
            raise
        finally:
            try:
                if success:
                    try:
                        backend.commit()
                    except Exception as e:
                        _log.error(f"Error during commit: {e}")
                        backend.rollback()
                        raise
            finally:
                self._cleanup_backend()


# Global session manager instance (lazy initialized)
_session_manager: Optional[SessionManager] = None


def init_session_manager(
    backend_type: Optional[str] = None,
    database_url: Optional[str] = None,
) -> SessionManager:
    """Initialize the global session manager.

    Call this once at application startup, before handling any requests.
    If parameters are not provided, they are read from environment variables
    via DatabaseConfig.
    """
    global _session_manager
    _session_manager = SessionManager(
        backend_type=backend_type,
        database_url=database_url,
    )
    _log.info(
        f"Database session manager initialized with backend: "
        f"{_session_manager.backend_type}"
    )
    return _session_manager


def get_session_manager() -> SessionManager:
    """Get the global session manager.

    Raises:
        RuntimeError: If init_session_manager() hasn't been called.
    """
    if _session_manager is None:
        raise RuntimeError(
            "Session manager not initialized. "
            "Call init_session_manager() at application startup."
        )
    return _session_manager


def get_db() -> "DatabaseBackendProtocol":
    """Get the database backend for the current request.

    This is the primary entry point for application code.

    Example:
        from bookshelf.db import get_db

        def show_book(book_id: int) -> Book:
            return get_db().books.get(book_id)
    """
    return get_session_manager().get_backend()


def db_wsgi_middleware(wsgi_app: Any) -> Any:
    """WSGI middleware that wraps requests with database context.

    For ndb, it also establishes the ndb client context.
    """
    manager = get_session_manager()

    if manager.backend_type == "ndb":
        from .ndb.client import Client

        def middleware(environ: Any, start_response: Any) -> Any:
            with Client.get_context():
                with manager.request_context():
                    return wsgi_app(environ, start_response)

        return middleware

    def middleware(environ: Any, start_response: Any) -> Any:
        with manager.request_context():
            return wsgi_app(environ, start_response)

    return middleware


def request_context() -> Any:
    """Get a request context manager from the global session manager."""
    return get_session_manager().request_context()
