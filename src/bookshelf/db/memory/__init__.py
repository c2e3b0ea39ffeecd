"""
In-memory backend implementation.

This package provides a dict-backed store implementing the same
contract as the Datastore and SQL stores.
"""

from __future__ import annotations

from .backend import MemoryBackend
from .store import MemoryBookStore

__all__ = ["MemoryBackend", "MemoryBookStore"]
