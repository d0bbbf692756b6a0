"""A per-run key/value cache shared by the conditions of one execution."""

from __future__ import annotations

import threading
from typing import Any


class Cache:
    """Thread-safe key/value store; writes are ignored while disabled."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` if the cache is enabled."""
        if not self.enabled:
            return
        with self._lock:
            self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        with self._lock:
            return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data