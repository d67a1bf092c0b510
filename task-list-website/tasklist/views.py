"""Derived views of the task list, recomputed on every render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from tasklist.models import Task


def _priority_rank(task: Task) -> int:
    # Only "High" is ranked ahead; "Medium" shares the "Low" bucket.
    return 0 if task.priority == "High" else 1


def sort_by_priority(tasks: Iterable[Task]) -> List[Task]:
    """High-priority tasks first; everything else keeps its relative order."""
    return sorted(tasks, key=_priority_rank)


def partition_by_completion(tasks: Iterable[Task]) -> Tuple[List[Task], List[Task]]:
    """Split into (completed, incomplete), each in input order."""
    completed: List[Task] = []
    incomplete: List[Task] = []
    for t in tasks:
        (completed if t.done else incomplete).append(t)
    return completed, incomplete


@dataclass(frozen=True)
class TaskListView:
    ordered: List[Task]
    completed: List[Task]
    incomplete: List[Task]

    @property
    def total(self) -> int:
        return len(self.ordered)

    @property
    def progress(self) -> float:
        if not self.ordered:
            return 0.0
        return len(self.completed) / len(self.ordered)


def task_list_view(tasks: Iterable[Task]) -> TaskListView:
    ordered = sort_by_priority(tasks)
    completed, incomplete = partition_by_completion(ordered)
    return TaskListView(ordered=ordered, completed=completed, incomplete=incomplete)
