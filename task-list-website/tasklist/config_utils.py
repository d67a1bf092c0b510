"""Small readers for TASKLIST_* environment variables.

Unset and blank values fall back to the default; values that cannot be
parsed fall back too, except where a fixed set of choices is given, in which
case a bad value is a configuration error.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, Sequence

_TRUE = frozenset({"1", "true", "yes", "y", "on"})
_FALSE = frozenset({"0", "false", "no", "n", "off"})


def _raw(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip() or None


def env_str(name: str, default: str) -> str:
    return _raw(name) or default


def env_optional_str(name: str) -> Optional[str]:
    return _raw(name)


def env_first(names: Iterable[str]) -> Optional[str]:
    """Return the first set value among several variable names."""
    for name in names:
        value = _raw(name)
        if value:
            return value
    return None


def env_choice(name: str, choices: Sequence[str], default: str) -> str:
    """Read a lower-cased value that must be one of ``choices``."""
    value = (_raw(name) or default).lower()
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}; got {value!r}")
    return value


def env_bool(name: str, default: bool) -> bool:
    raw = _raw(name)
    if raw is None:
        return default
    raw = raw.lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = _raw(name)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    if minimum is not None and value < minimum:
        return minimum
    return value


def env_log_level(name: str, default: int = logging.INFO) -> int:
    """Read a level name (``DEBUG``) or number (``10``); unknown names give ``default``."""
    raw = _raw(name)
    if raw is None:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default
