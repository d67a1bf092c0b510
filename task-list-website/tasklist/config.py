"""Task list runtime configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tasklist.config_utils import env_bool, env_choice, env_first, env_int, env_log_level, env_optional_str, env_str


BACKENDS = ("sql", "http")
DEFAULT_COLLECTION = "tasks"


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def default_database_url() -> str:
    data_dir = _repo_root() / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(data_dir / 'tasks.db').as_posix()}"


@dataclass(frozen=True)
class TaskListConfig:
    """Configuration for the task list page and its document store.

    Backend selection:
    - TASKLIST_BACKEND: sql|http (default: sql)

    SQL backend:
    - TASKLIST_DATABASE_URL: task-list specific DB URL
    - DATABASE_URL: shared DB URL
    - If neither is set, defaults to local SQLite at data/tasks.db

    HTTP backend:
    - TASKLIST_API_URL: base URL of the hosted document API (required)
    - TASKLIST_API_TOKEN: optional bearer token
    - TASKLIST_API_VERIFY_SSL (default: true)
    - TASKLIST_API_TIMEOUT seconds (default: 30)

    Common:
    - TASKLIST_COLLECTION: collection holding the tasks (default: tasks)
    - TASKLIST_LOG_LEVEL: console log level (default: INFO)
    - TASKLIST_LOG_DIR: directory for the debug log file
    """

    backend: str
    collection: str

    database_url: str

    api_url: Optional[str]
    api_token: Optional[str]
    api_verify_ssl: bool
    api_timeout_seconds: int

    log_level: int
    log_dir: str

    @classmethod
    def from_env(cls) -> "TaskListConfig":
        backend = env_choice("TASKLIST_BACKEND", BACKENDS, "sql")

        api_url = env_optional_str("TASKLIST_API_URL")
        if backend == "http" and not api_url:
            raise ValueError("TASKLIST_API_URL is required when TASKLIST_BACKEND=http")

        database_url = env_first(["TASKLIST_DATABASE_URL", "DATABASE_URL"])
        if not database_url and backend == "sql":
            database_url = default_database_url()

        return cls(
            backend=backend,
            collection=env_str("TASKLIST_COLLECTION", DEFAULT_COLLECTION),
            database_url=database_url or "",
            api_url=api_url.rstrip("/") if api_url else None,
            api_token=env_optional_str("TASKLIST_API_TOKEN"),
            api_verify_ssl=env_bool("TASKLIST_API_VERIFY_SSL", True),
            api_timeout_seconds=env_int("TASKLIST_API_TIMEOUT", 30, minimum=1),
            log_level=env_log_level("TASKLIST_LOG_LEVEL"),
            log_dir=env_str("TASKLIST_LOG_DIR", ".local/tasklist"),
        )


_config: Optional[TaskListConfig] = None


def get_config() -> TaskListConfig:
    """Get the task list configuration (cached)."""
    global _config
    if _config is None:
        _config = TaskListConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
