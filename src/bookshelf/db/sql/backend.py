"""
SQL Backend implementation.

This module provides the SQLBackend class that implements
DatabaseBackendProtocol using SQLAlchemy ORM. It works with any
SQLAlchemy URL; PostgreSQL (e.g. Cloud SQL) in production and
SQLite in tests.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..repository import BookRepository
from .connection import create_db_engine, create_session_factory
from .models import Base
from .store import SQLBookStore


class SQLBackend:
    """SQL implementation of DatabaseBackendProtocol.

    Usage:
        from bookshelf.db.sql import SQLBackend

        db = SQLBackend(database_url="postgresql://...")
        book_id = db.books.create(book)
        db.commit()

    When a session_factory is given (as the session manager does), the
    backend uses it and leaves the engine alone on close(). Otherwise
    it creates and owns an engine for database_url.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        session_factory: Optional["sessionmaker[Session]"] = None,
    ) -> None:
        self._engine: Optional[Engine] = None
        if session_factory is None:
            self._engine = create_db_engine(database_url)
            session_factory = create_session_factory(self._engine)

        self._session: Session = session_factory()
        self._books = BookRepository(SQLBookStore(self._session))

    @property
    def books(self) -> BookRepository:
        """Access the Book repository."""
        return self._books

    @property
    def session(self) -> Session:
        return self._session

    def commit(self) -> None:
        """Commit the current transaction."""
        self._session.commit()

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self._session.rollback()

    def close(self) -> None:
        """Close the session, and the engine if this backend created it."""
        self._session.close()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def create_tables(self) -> None:
        """Create the books table (and indexes) if they don't exist."""
        Base.metadata.create_all(self._session.get_bind())

    def drop_tables(self) -> None:
        """Drop the books table. Use with care."""
        Base.metadata.drop_all(self._session.get_bind())
