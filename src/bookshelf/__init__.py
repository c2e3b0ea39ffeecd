"""
Bookshelf - a getting-started sample for storing books in
Google Cloud Datastore.

The data access layer lives in bookshelf.db.
"""

__version__ = "1.0.0"
