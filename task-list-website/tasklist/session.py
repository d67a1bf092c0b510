from __future__ import annotations

import logging
from typing import Callable, MutableMapping, Optional

from tasklist.config import get_config
from tasklist.remote import build_collection
from tasklist.store import TaskStore

logger = logging.getLogger(__name__)

STORE_KEY = "task_store"
DARK_MODE_KEY = "dark_mode"
FLASH_KEY = "flash_message"


def _default_store() -> TaskStore:
    config = get_config()
    return TaskStore(build_collection(config), collection_name=config.collection)


def get_store(session_state: MutableMapping, factory: Optional[Callable[[], TaskStore]] = None) -> TaskStore:
    """Return the session's store, creating and loading it on first use."""
    store = session_state.get(STORE_KEY)
    if store is None:
        store = (factory or _default_store)()
        session_state[STORE_KEY] = store
        logger.info("New task list session (collection=%s)", store.collection_name)
        store.load_all()
    return store


def end_session(session_state: MutableMapping) -> None:
    session_state.pop(STORE_KEY, None)


def is_dark_mode(session_state: MutableMapping) -> bool:
    return bool(session_state.get(DARK_MODE_KEY, False))


def set_dark_mode(session_state: MutableMapping, enabled: bool) -> None:
    session_state[DARK_MODE_KEY] = bool(enabled)
