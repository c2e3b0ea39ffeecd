"""
NDB (Google Cloud Datastore) backend implementation.

This package implements the book store over google-cloud-ndb.
"""

from __future__ import annotations

from .backend import NDBBackend

__all__ = ["NDBBackend"]
