"""Document database engine and session management."""

from __future__ import annotations

from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker


# One engine per URL; Streamlit reruns must not open a new pool every time.
_ENGINES: Dict[str, Engine] = {}
_SESSIONMAKERS: Dict[str, sessionmaker] = {}


def get_engine(database_url: str) -> Engine:
    """Get or create the SQLAlchemy engine for ``database_url``."""
    engine = _ENGINES.get(database_url)
    if engine is not None:
        return engine

    # Streamlit serves each session from its own script thread.
    connect_args = {}
    if database_url.startswith("sqlite:"):
        connect_args = {"check_same_thread": False}

    engine = create_engine(
        database_url,
        future=True,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    _ENGINES[database_url] = engine
    _SESSIONMAKERS[database_url] = sessionmaker(
        bind=engine, autoflush=False, expire_on_commit=False, future=True
    )
    return engine


def get_sessionmaker(database_url: str) -> sessionmaker:
    if database_url not in _SESSIONMAKERS:
        get_engine(database_url)
    return _SESSIONMAKERS[database_url]


def dispose_engine(database_url: str) -> None:
    """Close the pool for ``database_url`` and forget it."""
    engine = _ENGINES.pop(database_url, None)
    _SESSIONMAKERS.pop(database_url, None)
    if engine is not None:
        engine.dispose()
