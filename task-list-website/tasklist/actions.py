"""Handlers behind the page's form and row buttons.

Kept free of Streamlit calls so they can be driven directly from tests.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Union

from tasklist.store import StoreResult, TaskStore


def format_due_date(value: Union[date, datetime, str, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def form_mode(store: TaskStore) -> str:
    """Return 'edit' while a task is staged, otherwise 'create'."""
    return "edit" if store.editing is not None else "create"


def submit_task_form(store: TaskStore, *, name: str, priority: str, due_date: Any) -> StoreResult:
    """Create a task, or commit the staged edit with the submitted values."""
    due = format_due_date(due_date)
    try:
        if form_mode(store) == "edit":
            return store.commit_edit(name=name, priority=priority, due_date=due)
        return store.create(name, priority, due)
    except ValueError as e:
        return StoreResult.failure(e)


def start_edit(store: TaskStore, task_id: str) -> bool:
    task = store.get(task_id)
    if task is None:
        return False
    store.begin_edit(task)
    return True


def delete_task(store: TaskStore, task_id: str) -> StoreResult:
    return store.remove(task_id)


def toggle_task(store: TaskStore, task_id: str) -> StoreResult:
    return store.toggle_done(task_id)
