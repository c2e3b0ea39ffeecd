"""

    Logging setup

    Locally, log records go to stderr through a plain stream handler.
    On Google Cloud, the Cloud Logging client is attached to the root
    logger instead, so that records show up with their severity in the
    Logs Explorer.

"""

from __future__ import annotations

from typing import Any, cast

import logging
from logging.config import dictConfig

from .config import LOG_LEVEL, running_local


def init_logging(local: bool = running_local, level: str = LOG_LEVEL) -> None:
    """Configure the root logger; call once at application startup"""
    if local:
        dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "default": {
                        "format": "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "stream": "ext://sys.stderr",
                        "formatter": "default",
                    }
                },
                "root": {"level": level, "handlers": ["console"]},
            }
        )
        logging.info("Bookshelf running locally")
        return

    # Import the Google Cloud client library
    import google.cloud.logging

    # Instantiate a logging client
    logging_client = google.cloud.logging.Client()
    # Connects the logger to the root logging handler
    cast(Any, logging_client).setup_logging(log_level=logging.getLevelName(level))
