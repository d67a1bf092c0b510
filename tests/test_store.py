from __future__ import annotations

import pytest

from tasklist.models import Task
from tasklist.remote.base import StorageFailure
from tasklist.store import TaskStore

from fakes import FakeCollection


def _local(store: TaskStore):
    return [t.to_dict() for t in store.tasks]


def test_end_to_end_create_update_remove(store: TaskStore, collection: FakeCollection):
    assert store.tasks == []

    created = store.create("Buy milk", "High", "2024-01-01")
    assert created.ok
    task_id = created.value.id
    assert _local(store) == [
        {"id": task_id, "name": "Buy milk", "priority": "High", "done": False, "due_date": "2024-01-01"}
    ]

    assert store.update(task_id, {"done": True}).ok
    assert _local(store)[0]["done"] is True

    assert store.remove(task_id).ok
    assert store.tasks == []
    assert collection.snapshot() == []


def test_local_list_tracks_remote_after_each_operation(store: TaskStore, collection: FakeCollection):
    a = store.create("A", "Low", "2024-02-01").value
    assert _local(store) == collection.snapshot()
    b = store.create("B", "High", "2024-02-02").value
    assert _local(store) == collection.snapshot()
    store.update(a.id, {"name": "A2", "priority": "Medium"})
    assert _local(store) == collection.snapshot()
    store.remove(b.id)
    assert _local(store) == collection.snapshot()
    store.create("C", "Low", "")
    assert _local(store) == collection.snapshot()


def test_create_then_remove_restores_previous_state(store: TaskStore):
    store.create("Keep", "Low", "2024-03-01")
    before = _local(store)
    new_id = store.create("Temp", "High", "2024-03-02").value.id
    store.remove(new_id)
    assert _local(store) == before


def test_create_waits_for_remote_id(store: TaskStore, collection: FakeCollection):
    task = store.create("Write report", "Medium", "2024-05-05").value
    assert task.id == "doc-1"
    assert task.done is False
    assert collection.calls[-1] == ("insert", None)


def test_update_done_flips_only_done(store: TaskStore):
    t = store.create("Call mum", "Medium", "2024-04-04").value
    store.update(t.id, {"done": True})
    after = store.get(t.id)
    assert after.done is True
    assert (after.name, after.priority, after.due_date) == ("Call mum", "Medium", "2024-04-04")


def test_remove_unknown_id_is_noop(store: TaskStore):
    store.create("Only", "Low", "2024-01-02")
    before = _local(store)
    result = store.remove("missing-id")
    assert result.ok
    assert _local(store) == before


def test_load_all_replaces_collection(collection: FakeCollection):
    collection.insert("tasks", {"name": "Remote", "priority": "High", "done": True, "due_date": "2024-06-01"})
    s = TaskStore(collection)
    s._tasks = [Task(id="stale", name="stale")]
    result = s.load_all()
    assert result.ok
    assert [t.id for t in s.tasks] == ["doc-1"]
    assert s.loaded is True


def test_load_failure_keeps_previous_list(store: TaskStore, collection: FakeCollection):
    store.create("Kept", "Low", "")
    collection.fail_next("list_all", "network unreachable")
    result = store.load_all()
    assert not result.ok
    assert isinstance(result.error, StorageFailure)
    assert [t.name for t in store.tasks] == ["Kept"]
    assert store.last_error is result.error


def test_failed_insert_does_not_append(store: TaskStore, collection: FakeCollection):
    collection.fail_next("insert")
    result = store.create("Nope", "High", "2024-01-01")
    assert not result.ok
    assert result.error.operation == "insert"
    assert store.tasks == []


def test_failed_update_leaves_local_task(store: TaskStore, collection: FakeCollection):
    t = store.create("Stable", "Low", "").value
    collection.fail_next("update")
    assert not store.update(t.id, {"done": True}).ok
    assert store.get(t.id).done is False


def test_failed_delete_keeps_task(store: TaskStore, collection: FakeCollection):
    t = store.create("Sticky", "Low", "").value
    collection.fail_next("delete")
    assert not store.remove(t.id).ok
    assert store.get(t.id) is not None


def test_success_clears_last_error(store: TaskStore, collection: FakeCollection):
    collection.fail_next("insert")
    store.create("x", "Low", "")
    assert store.last_error is not None
    store.create("y", "Low", "")
    assert store.last_error is None


def test_update_merges_only_given_fields(store: TaskStore):
    t = store.create("Old", "Low", "2024-01-01").value
    store.update(t.id, {"name": "New"})
    after = store.get(t.id)
    assert after.name == "New"
    assert after.priority == "Low"
    assert after.due_date == "2024-01-01"


def test_update_rejects_id_and_unknown_fields(store: TaskStore, collection: FakeCollection):
    t = store.create("T", "Low", "").value
    with pytest.raises(ValueError):
        store.update(t.id, {"id": "other"})
    with pytest.raises(ValueError):
        store.update(t.id, {"colour": "red"})
    assert collection.calls[-1] == ("insert", None)


def test_create_validates_before_remote_call(store: TaskStore, collection: FakeCollection):
    with pytest.raises(ValueError):
        store.create("   ", "High", "")
    with pytest.raises(ValueError):
        store.create("Name", "Urgent", "")
    assert [c for c in collection.calls if c[0] == "insert"] == []


def test_toggle_done(store: TaskStore):
    t = store.create("Toggle", "Low", "").value
    store.toggle_done(t.id)
    assert store.get(t.id).done is True
    store.toggle_done(t.id)
    assert store.get(t.id).done is False


def test_toggle_unknown_task_fails(store: TaskStore):
    result = store.toggle_done("ghost")
    assert not result.ok
    assert result.error.task_id == "ghost"


def test_tasks_are_copies(store: TaskStore):
    t = store.create("Original", "Low", "").value
    store.tasks[0].name = "changed"
    t.name = "also changed"
    assert store.get(t.id).name == "Original"


# ---- two-step edit ----

def test_begin_and_commit_edit(store: TaskStore):
    t = store.create("Draft", "Low", "2024-01-01").value
    store.begin_edit(t)
    assert store.editing.id == t.id
    result = store.commit_edit(name="Final", priority="High")
    assert result.ok
    assert store.editing is None
    after = store.get(t.id)
    assert (after.name, after.priority, after.due_date, after.done) == ("Final", "High", "2024-01-01", False)


def test_new_edit_replaces_staged_one(store: TaskStore, collection: FakeCollection):
    a = store.create("A", "Low", "").value
    b = store.create("B", "Low", "").value
    store.begin_edit(a)
    store.begin_edit(b)
    store.commit_edit(name="B2")
    assert store.get(a.id).name == "A"
    assert store.get(b.id).name == "B2"
    assert ("update", a.id) not in collection.calls


def test_commit_without_edit_raises(store: TaskStore):
    with pytest.raises(RuntimeError):
        store.commit_edit()


def test_failed_commit_keeps_staged_value(store: TaskStore, collection: FakeCollection):
    t = store.create("Draft", "Low", "").value
    store.begin_edit(t)
    collection.fail_next("update")
    assert not store.commit_edit(name="Retry me").ok
    assert store.editing.name == "Retry me"
    assert store.get(t.id).name == "Draft"
    assert store.commit_edit().ok
    assert store.get(t.id).name == "Retry me"


def test_cancel_edit(store: TaskStore):
    t = store.create("X", "Low", "").value
    store.begin_edit(t)
    store.cancel_edit()
    assert store.editing is None


def test_removing_edited_task_clears_edit(store: TaskStore):
    t = store.create("X", "Low", "").value
    store.begin_edit(t)
    store.remove(t.id)
    assert store.editing is None


# ---- in-flight guard ----

class _ReentrantCollection(FakeCollection):
    """Issues a second change to the same task while the first is running."""

    def __init__(self) -> None:
        super().__init__()
        self.store = None
        self.nested = None

    def update_by_id(self, collection, doc_id, patch):
        if self.nested is None:
            assert self.store.is_busy(doc_id)
            self.nested = self.store.update(doc_id, {"name": "second"})
        super().update_by_id(collection, doc_id, patch)


def test_overlapping_change_on_same_task_is_refused():
    coll = _ReentrantCollection()
    s = TaskStore(coll)
    coll.store = s
    t = s.create("First", "Low", "").value

    result = s.update(t.id, {"done": True})

    assert result.ok
    assert not coll.nested.ok
    assert "in progress" in coll.nested.message
    assert s.get(t.id).name == "First"
    assert s.get(t.id).done is True
    assert not s.is_busy(t.id)
    assert s.last_error is coll.nested.error


def test_failure_is_logged_with_its_details(store: TaskStore, collection: FakeCollection, caplog):
    collection.fail_next("insert", "quota exceeded")
    with caplog.at_level("WARNING", logger="tasklist.store"):
        store.create("Over quota", "Low", "")
    [record] = [r for r in caplog.records if r.name == "tasklist.store"]
    assert record.levelname == "WARNING"
    assert "'operation': 'insert'" in record.getMessage()
    assert "quota exceeded" in record.getMessage()
