"""SQL-backed document collection (SQLite locally, PostgreSQL when hosted)."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from tasklist.remote.base import Record, StorageFailure
from tasklist.remote.db import get_engine, get_sessionmaker
from tasklist.remote.documents import Base, Document, _generate_id

logger = logging.getLogger(__name__)


class SqlDocumentCollection:
    """Remote collection storing each task as a JSON document row."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        try:
            Base.metadata.create_all(get_engine(database_url))
        except SQLAlchemyError as e:
            raise StorageFailure("connect", str(e), cause=e) from e
        logger.info("SqlDocumentCollection ready backend=%s", get_engine(database_url).url.get_backend_name())

    def _session(self):
        return get_sessionmaker(self.database_url)()

    def _find(self, s, collection: str, doc_id: str):
        q = select(Document).where(Document.collection == collection).where(Document.id == str(doc_id))
        return s.execute(q).scalars().first()

    def list_all(self, collection: str) -> List[Record]:
        try:
            with self._session() as s:
                q = (
                    select(Document)
                    .where(Document.collection == collection)
                    .order_by(Document.created_at.asc(), Document.seq.asc())
                )
                docs = s.execute(q).scalars().all()
                return [(d.id, d.fields()) for d in docs]
        except SQLAlchemyError as e:
            raise StorageFailure("list_all", str(e), cause=e) from e

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        doc_id = _generate_id()
        try:
            with self._session() as s:
                s.add(Document(id=doc_id, collection=collection, data=json.dumps(dict(fields))))
                s.commit()
        except SQLAlchemyError as e:
            raise StorageFailure("insert", str(e), cause=e) from e
        return doc_id

    def update_by_id(self, collection: str, doc_id: str, patch: Mapping[str, Any]) -> None:
        try:
            with self._session() as s:
                d = self._find(s, collection, doc_id)
                if d is None:
                    raise StorageFailure("update", "document not found", task_id=doc_id)
                data: Dict[str, Any] = d.fields()
                data.update(dict(patch))
                d.data = json.dumps(data)
                s.commit()
        except SQLAlchemyError as e:
            raise StorageFailure("update", str(e), task_id=doc_id, cause=e) from e

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        try:
            with self._session() as s:
                d = self._find(s, collection, doc_id)
                if d is None:
                    return
                s.delete(d)
                s.commit()
        except SQLAlchemyError as e:
            raise StorageFailure("delete", str(e), task_id=doc_id, cause=e) from e
