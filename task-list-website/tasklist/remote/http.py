from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from tasklist.remote.base import Record, StorageFailure

logger = logging.getLogger(__name__)


class HttpDocumentCollection:
    """Client for a hosted JSON document API.

    Routes (relative to ``base_url``):
    - GET    /{collection}        -> list of documents, or {"documents": [...]}
    - POST   /{collection}        -> {"id": "..."}
    - PATCH  /{collection}/{id}   -> merge fields into the document
    - DELETE /{collection}/{id}   -> 404 is treated as already deleted
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        verify_ssl: bool = True,
        timeout_seconds: int = 30,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.verify_ssl = bool(verify_ssl)
        self.timeout_seconds = int(timeout_seconds)

        self._session = requests.Session()

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _url(self, collection: str, doc_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/{collection}"
        if doc_id is not None:
            url = f"{url}/{doc_id}"
        return url

    def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        task_id: Optional[str] = None,
        allow_status: tuple = (),
    ) -> requests.Response:
        try:
            resp = self._session.request(
                method,
                url,
                json=json_body,
                headers=self._build_headers(),
                timeout=self.timeout_seconds,
                verify=self.verify_ssl,
            )
        except requests.RequestException as e:
            raise StorageFailure(operation, str(e), task_id=task_id, cause=e) from e

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if resp.status_code in allow_status:
            return resp
        if not resp.ok:
            text = (resp.text or "").strip()
            msg = f"HTTP {resp.status_code}"
            if text:
                msg = f"{msg}: {text[:200]}"
            raise StorageFailure(operation, msg, task_id=task_id)
        return resp

    @staticmethod
    def _json(resp: requests.Response, operation: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise StorageFailure(operation, "response was not JSON", cause=e) from e

    def list_all(self, collection: str) -> List[Record]:
        resp = self._request("list_all", "GET", self._url(collection))
        data = self._json(resp, "list_all")
        if isinstance(data, dict):
            data = data.get("documents", [])
        if not isinstance(data, list):
            raise StorageFailure("list_all", "expected a list of documents")

        records: List[Record] = []
        for doc in data:
            if not isinstance(doc, dict) or doc.get("id") is None:
                logger.warning("Skipping document without id in %s", collection)
                continue
            fields = {k: v for k, v in doc.items() if k != "id"}
            records.append((str(doc["id"]), fields))
        return records

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        resp = self._request("insert", "POST", self._url(collection), json_body=dict(fields))
        data = self._json(resp, "insert")
        doc_id = data.get("id") if isinstance(data, dict) else None
        if not doc_id:
            raise StorageFailure("insert", "response did not include an id")
        return str(doc_id)

    def update_by_id(self, collection: str, doc_id: str, patch: Mapping[str, Any]) -> None:
        self._request(
            "update", "PATCH", self._url(collection, doc_id), json_body=dict(patch), task_id=doc_id
        )

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        self._request(
            "delete", "DELETE", self._url(collection, doc_id), task_id=doc_id, allow_status=(404,)
        )
