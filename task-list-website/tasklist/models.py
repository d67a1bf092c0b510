"""Task model shared by the store, the views and the page."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional


PRIORITIES = ("High", "Medium", "Low")
DEFAULT_PRIORITY = "Medium"

# Fields a caller may change after creation; ``id`` belongs to the collection.
EDITABLE_FIELDS = ("name", "priority", "done", "due_date")


@dataclass
class Task:
    id: Optional[str]
    name: str
    priority: str = DEFAULT_PRIORITY
    done: bool = False
    due_date: str = ""

    @classmethod
    def from_record(cls, doc_id: str, fields: Mapping[str, Any]) -> "Task":
        """Build a Task from a stored document, filling gaps with defaults."""
        return cls(
            id=str(doc_id),
            name=str(fields.get("name") or ""),
            priority=str(fields.get("priority") or "Low"),
            done=fields.get("done") is True,
            due_date=str(fields.get("due_date") or ""),
        )

    def to_fields(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "priority": self.priority,
            "done": self.done,
            "due_date": self.due_date,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, **self.to_fields()}

    def merged(self, patch: Mapping[str, Any]) -> "Task":
        """Return a copy with ``patch`` shallow-merged over this task."""
        return replace(self, **dict(patch))

    def copy(self) -> "Task":
        return replace(self)


def validate_patch(patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Check a partial task and return it as a plain dict.

    Raises ValueError for unknown keys, an attempt to change ``id``, or a
    field value that would produce an invalid Task.
    """
    unknown = [k for k in patch if k not in EDITABLE_FIELDS]
    if unknown:
        raise ValueError(f"cannot patch field(s): {', '.join(sorted(unknown))}")

    clean: Dict[str, Any] = {}
    if "name" in patch:
        name = str(patch["name"] or "").strip()
        if not name:
            raise ValueError("name is required")
        clean["name"] = name
    if "priority" in patch:
        priority = patch["priority"]
        if priority not in PRIORITIES:
            raise ValueError(f"priority must be one of {', '.join(PRIORITIES)}")
        clean["priority"] = priority
    if "done" in patch:
        if not isinstance(patch["done"], bool):
            raise ValueError("done must be a bool")
        clean["done"] = patch["done"]
    if "due_date" in patch:
        clean["due_date"] = str(patch["due_date"] or "")
    return clean


def validate_fields(name: str, priority: str, due_date: str) -> Dict[str, Any]:
    """Validate the fields of a new task and return its document."""
    fields = validate_patch({"name": name, "priority": priority, "due_date": due_date})
    fields["done"] = False
    return fields
