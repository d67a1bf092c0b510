"""Remote document collections holding the durable task list.

This package provides:
- The RemoteCollection protocol and the StorageFailure error
- A SQLAlchemy adapter (SQLite by default, PostgreSQL via DATABASE_URL)
- A requests adapter for a hosted JSON document API
"""

from __future__ import annotations

from tasklist.config import TaskListConfig
from tasklist.remote.base import Record, RemoteCollection, StorageFailure


def build_collection(config: TaskListConfig) -> RemoteCollection:
    """Create the collection adapter selected by ``config.backend``."""
    if config.backend == "http":
        from tasklist.remote.http import HttpDocumentCollection

        return HttpDocumentCollection(
            base_url=config.api_url or "",
            token=config.api_token,
            verify_ssl=config.api_verify_ssl,
            timeout_seconds=config.api_timeout_seconds,
        )

    from tasklist.remote.sql import SqlDocumentCollection

    return SqlDocumentCollection(config.database_url)


__all__ = [
    "Record",
    "RemoteCollection",
    "StorageFailure",
    "build_collection",
]
