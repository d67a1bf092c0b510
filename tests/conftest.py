from __future__ import annotations

import pytest

from tasklist.config import reset_config
from tasklist.store import TaskStore

from fakes import FakeCollection


@pytest.fixture()
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture()
def store(collection: FakeCollection) -> TaskStore:
    """A loaded store over an empty fake collection."""
    s = TaskStore(collection)
    assert s.load_all().ok
    return s


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    for name in (
        "TASKLIST_BACKEND",
        "TASKLIST_DATABASE_URL",
        "DATABASE_URL",
        "TASKLIST_COLLECTION",
        "TASKLIST_API_URL",
        "TASKLIST_API_TOKEN",
        "TASKLIST_API_VERIFY_SSL",
        "TASKLIST_API_TIMEOUT",
        "TASKLIST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
