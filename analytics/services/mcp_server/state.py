"""Shared state management for MCP server.

FastMCP's Context is per-request, so the work pattern cache and the most
recent dataset live here to persist across tool calls. Generating twice for
the same employee ids therefore yields the same synthetic employees.
"""

import threading
from typing import Any

from time_registration_audit.synthetic.models import EmployeeWorkPattern

PATTERN_CACHE_KEY = "work_patterns"
LATEST_DATASET_KEY = "latest_dataset"


class SharedState:
    """Thread-safe shared state storage for MCP tools.

    Uses threading.RLock for thread-safe access to shared data.
    Implements basic size-based eviction to prevent unbounded memory growth;
    the pattern cache and the latest dataset are only evicted when every key
    in the store is protected.
    """

    MAX_ITEMS = 100

    PROTECTED_KEYS = frozenset({PATTERN_CACHE_KEY, LATEST_DATASET_KEY})

    def __init__(self):
        self._store: dict[str, Any] = {}
        self._lock = threading.RLock()

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if len(self._store) >= self.MAX_ITEMS and key not in self._store:
                evictable = [k for k in self._store if k not in self.PROTECTED_KEYS]
                victim = evictable[0] if evictable else next(iter(self._store))
                del self._store[victim]
            self._store[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._store.get(key, default)

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def keys(self) -> list[str]:
        """Snapshot of the stored keys."""
        with self._lock:
            return list(self._store.keys())

    def pattern_cache(self) -> dict[str, EmployeeWorkPattern]:
        """Copy of the cached work patterns keyed by employee id."""
        with self._lock:
            return dict(self._store.get(PATTERN_CACHE_KEY, {}))

    def replace_pattern_cache(self, cache: dict[str, EmployeeWorkPattern]) -> None:
        self.set(PATTERN_CACHE_KEY, dict(cache))


_shared_state = SharedState()


def get_shared_state() -> SharedState:
    """Get the global shared state instance."""
    return _shared_state
