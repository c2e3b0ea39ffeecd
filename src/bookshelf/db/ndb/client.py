"""
The process-wide ndb client.

The Datastore client is created once, on first use, and shared by all
requests. Each request must run inside a context obtained from
Client.get_context(); the WSGI middleware in session.py does this.
"""

from __future__ import annotations

from typing import Any, ContextManager, Optional

import logging
import threading

import redis
from google.cloud import ndb  # type: ignore

from ..config import get_config


_log = logging.getLogger(__name__)


class Client:
    """Wrapper for the ndb client instance singleton"""

    _client: Optional[ndb.Client] = None
    _global_cache: Optional[Any] = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        pass

    @classmethod
    def get_client(cls) -> ndb.Client:
        """Return the ndb client instance singleton, creating it if needed"""
        with cls._lock:
            if cls._client is None:
                config = get_config()
                cls._client = ndb.Client(
                    project=config.project_id, namespace=config.namespace
                )
                if config.redis_host:
                    # Share entities across instances via Memorystore/Redis
                    cls._global_cache = ndb.RedisCache(
                        redis.Redis(
                            host=config.redis_host,
                            port=config.redis_port,
                            retry_on_timeout=True,
                        )
                    )
                    _log.info(
                        f"ndb global cache at {config.redis_host}:{config.redis_port}"
                    )
            return cls._client

    @classmethod
    def get_context(cls) -> ContextManager[ndb.Context]:
        """Return a new ndb context for the client singleton"""
        client = cls.get_client()
        return client.context(global_cache=cls._global_cache)


class Context:
    """Wrapper for ndb context operations"""

    def __init__(self) -> None:
        pass

    @staticmethod
    def disable_cache() -> None:
        """Disable the ndb in-context cache for this context"""
        ctx = ndb.get_context()
        ctx.set_cache_policy(False)
