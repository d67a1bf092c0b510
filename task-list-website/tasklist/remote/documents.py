"""Document table used by the SQL collection adapter."""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _generate_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.utcnow()


class Document(Base):
    """One JSON document of a named collection."""

    __tablename__ = "documents"

    # ``seq`` keeps insertion order stable when created_at ties.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, unique=True, default=_generate_id)
    collection = Column(String(128), nullable=False, index=True)
    data = Column(Text, nullable=False, default="{}")  # JSON object

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_documents_collection_created", "collection", "created_at"),
    )

    def fields(self) -> Dict[str, Any]:
        try:
            val = json.loads(self.data or "{}")
        except Exception:
            return {}
        return val if isinstance(val, dict) else {}
