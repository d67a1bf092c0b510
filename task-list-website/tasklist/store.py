"""In-memory task list mirroring a remote document collection.

Every mutation follows the same rule: issue the remote call first and apply
the equivalent change to the local list only after it succeeds. The list is
never re-fetched after a mutation; ``load_all`` is the only full refresh.

Operations return a StoreResult instead of raising, so the page can decide
how to show a StorageFailure. The most recent failure is also kept on
``last_error`` for the page's error banner.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, Set, TypeVar

from tasklist.config import DEFAULT_COLLECTION
from tasklist.models import EDITABLE_FIELDS, Task, validate_fields, validate_patch
from tasklist.remote.base import RemoteCollection, StorageFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StoreResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "StoreResult[T]":
        return cls(ok=False, error=error)

    @property
    def message(self) -> str:
        return str(self.error) if self.error else ""


class TaskStore:
    """Task list owned by one user session."""

    def __init__(self, collection: RemoteCollection, collection_name: str = DEFAULT_COLLECTION) -> None:
        self._collection = collection
        self.collection_name = collection_name
        self._tasks: List[Task] = []
        self._editing: Optional[Task] = None
        self._in_flight: Set[str] = set()
        # Bumped on every failure; lets a success tell whether a failure
        # happened while it was running.
        self._failures = 0
        self.loaded = False
        self.last_error: Optional[StorageFailure] = None

    # ---- read access ----

    @property
    def tasks(self) -> List[Task]:
        return [t.copy() for t in self._tasks]

    @property
    def editing(self) -> Optional[Task]:
        return self._editing.copy() if self._editing else None

    def get(self, task_id: str) -> Optional[Task]:
        for t in self._tasks:
            if t.id == task_id:
                return t.copy()
        return None

    def is_busy(self, task_id: Optional[str]) -> bool:
        return task_id is not None and task_id in self._in_flight

    def clear_error(self) -> None:
        self.last_error = None

    # ---- helpers ----

    def _failed(self, error: StorageFailure) -> StoreResult:
        logger.warning("Task store call failed: %s", error.to_dict())
        self._failures += 1
        self.last_error = error
        return StoreResult.failure(error)

    def _succeeded(self, started_at: int, value: Any = None) -> StoreResult:
        """Clear ``last_error`` unless another call failed since ``started_at``."""
        if self._failures == started_at:
            self.last_error = None
        return StoreResult.success(value)

    @contextmanager
    def _claim(self, operation: str, task_id: str) -> Iterator[None]:
        if task_id in self._in_flight:
            raise StorageFailure(operation, "another change to this task is still in progress", task_id=task_id)
        self._in_flight.add(task_id)
        try:
            yield
        finally:
            self._in_flight.discard(task_id)

    # ---- operations ----

    def load_all(self) -> StoreResult[List[Task]]:
        """Replace the local list with every document of the collection."""
        started_at = self._failures
        try:
            records = self._collection.list_all(self.collection_name)
        except StorageFailure as e:
            return self._failed(e)

        self._tasks = [Task.from_record(doc_id, fields) for doc_id, fields in records]
        self.loaded = True
        logger.info("Loaded %d task(s) from %s", len(self._tasks), self.collection_name)
        return self._succeeded(started_at, self.tasks)

    def create(self, name: str, priority: str, due_date: str) -> StoreResult[Task]:
        fields = validate_fields(name, priority, due_date)
        started_at = self._failures
        try:
            doc_id = self._collection.insert(self.collection_name, fields)
        except StorageFailure as e:
            return self._failed(e)

        task = Task.from_record(doc_id, fields)
        self._tasks.append(task)
        logger.debug("Created task %s", doc_id)
        return self._succeeded(started_at, task.copy())

    def remove(self, task_id: str) -> StoreResult[None]:
        started_at = self._failures
        try:
            with self._claim("delete", task_id):
                self._collection.delete_by_id(self.collection_name, task_id)
        except StorageFailure as e:
            return self._failed(e)

        self._tasks = [t for t in self._tasks if t.id != task_id]
        if self._editing is not None and self._editing.id == task_id:
            self._editing = None
        logger.debug("Removed task %s", task_id)
        return self._succeeded(started_at)

    def update(self, task_id: str, patch: Mapping[str, Any]) -> StoreResult[None]:
        clean = validate_patch(patch)
        started_at = self._failures
        try:
            with self._claim("update", task_id):
                self._collection.update_by_id(self.collection_name, task_id, clean)
        except StorageFailure as e:
            return self._failed(e)

        self._tasks = [t.merged(clean) if t.id == task_id else t for t in self._tasks]
        logger.debug("Updated task %s fields=%s", task_id, sorted(clean))
        return self._succeeded(started_at)

    def toggle_done(self, task_id: str) -> StoreResult[None]:
        current = self.get(task_id)
        if current is None:
            return self._failed(StorageFailure("update", "task is not in the list", task_id=task_id))
        return self.update(task_id, {"done": not current.done})

    # ---- two-step edit ----

    def begin_edit(self, task: Task) -> None:
        """Stage a copy of ``task``; any earlier staged edit is dropped."""
        self._editing = task.copy()

    def cancel_edit(self) -> None:
        self._editing = None

    def commit_edit(self, **changes: Any) -> StoreResult[None]:
        """Write the staged task (with ``changes`` applied) back to the collection.

        The staged value is kept when the update fails so the form can retry.
        """
        if self._editing is None:
            raise RuntimeError("commit_edit called with no edit in progress")

        staged = self._editing.merged(validate_patch(changes)) if changes else self._editing
        self._editing = staged
        fields: Dict[str, Any] = {k: getattr(staged, k) for k in EDITABLE_FIELDS}
        result = self.update(staged.id, fields)
        if result.ok:
            self._editing = None
        return result
