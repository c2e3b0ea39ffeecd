"""
SQL backend implementation using SQLAlchemy ORM.

This package provides the relational implementation of the book store,
the counterpart of the Cloud SQL DAO in the other bookshelf samples.
"""

from __future__ import annotations

from .backend import SQLBackend

__all__ = ["SQLBackend"]
