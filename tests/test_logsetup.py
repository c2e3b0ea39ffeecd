"""
Tests for logging initialization.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, List

import pytest

from bookshelf import logsetup


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_local_logging_goes_to_stderr(restore_root_logger: logging.Logger) -> None:
    logsetup.init_logging(local=True, level="DEBUG")

    root = restore_root_logger
    assert root.level == logging.DEBUG
    streams = [getattr(h, "stream", None) for h in root.handlers]
    assert sys.stderr in streams


def test_cloud_logging_is_attached(
    monkeypatch: pytest.MonkeyPatch, restore_root_logger: logging.Logger
) -> None:
    import google.cloud.logging

    calls: List[Any] = []

    class FakeClient:
        def setup_logging(self, log_level: int) -> None:
            calls.append(log_level)

    monkeypatch.setattr(google.cloud.logging, "Client", FakeClient)

    logsetup.init_logging(local=False, level="WARNING")

    assert calls == [logging.WARNING]
