from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple


Record = Tuple[str, Dict[str, Any]]


class StorageFailure(Exception):
    """A remote collection call did not complete.

    Wraps whatever the underlying client reported (network error, permission
    error, missing document). The original exception is kept on ``cause``
    and chained as ``__cause__`` by the adapters.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        task_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.message = message
        self.task_id = task_id
        self.cause = cause

    def __str__(self) -> str:
        where = f" {self.task_id}" if self.task_id else ""
        return f"{self.operation}{where} failed: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "task_id": self.task_id,
            "message": self.message,
            "error_type": type(self.cause).__name__ if self.cause else None,
        }


class RemoteCollection(Protocol):
    """Document store holding the durable set of tasks.

    Implementations raise StorageFailure for every failed call.
    """

    def list_all(self, collection: str) -> List[Record]: ...

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str: ...

    def update_by_id(self, collection: str, doc_id: str, patch: Mapping[str, Any]) -> None: ...

    def delete_by_id(self, collection: str, doc_id: str) -> None: ...
