"""
SQLAlchemy ORM models for the SQL backend.

The books table mirrors the Datastore Book kind: the column names are
the stored property names, and the id is an autoincrement integer
like the auto-generated Datastore key ids.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..protocols import BOOK_PROPERTIES


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class BookRow(Base):
    """Book model - mirrors the Datastore Book kind."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(
        BOOK_PROPERTIES["title"], String(512), nullable=False
    )
    author: Mapped[str] = mapped_column(
        BOOK_PROPERTIES["author"], String(512), nullable=False
    )

    # These fields are never NULL - empty string is used instead
    published_date: Mapped[str] = mapped_column(
        BOOK_PROPERTIES["published_date"], String(128), nullable=False, default=""
    )
    description: Mapped[str] = mapped_column(
        BOOK_PROPERTIES["description"], Text, nullable=False, default=""
    )
    created_by: Mapped[str] = mapped_column(
        BOOK_PROPERTIES["created_by"], String(256), nullable=False, default=""
    )
    created_by_id: Mapped[str] = mapped_column(
        BOOK_PROPERTIES["created_by_id"], String(256), nullable=False, default=""
    )

    # NULL means no image, as opposed to an empty URL
    image_url: Mapped[Optional[str]] = mapped_column(
        BOOK_PROPERTIES["image_url"], String(2048), nullable=True
    )

    def __repr__(self) -> str:
        return f"<BookRow(id={self.id!r}, title={self.title!r})>"


# Listing orders by title, then id; listing by user filters first
Index("ix_books_title_id", BookRow.title, BookRow.id)
Index("ix_books_owner_title_id", BookRow.created_by_id, BookRow.title, BookRow.id)
