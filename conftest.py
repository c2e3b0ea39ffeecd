"""
Root pytest configuration.

This conftest.py is discovered by pytest and ensures the src/ directory
is on the Python path for all tests, so they also run from a plain
checkout without `pip install -e .`.
"""

from __future__ import annotations

import sys
import os

import pytest

# Add src/ to Python path so tests can import the bookshelf package
SRC_PATH = os.path.join(os.path.dirname(__file__), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add command-line options for backend selection."""
    parser.addoption(
        "--backend",
        action="store",
        default="all",
        choices=["memory", "sql", "ndb", "all"],
        help="Database backend to test: memory, sql, ndb or all",
    )
