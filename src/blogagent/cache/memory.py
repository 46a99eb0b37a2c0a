"""In-memory TTL cache backend."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable


class InMemoryCacheBackend:
    """Thread-safe TTL dict.

    Expired entries are dropped lazily on read and by :meth:`cleanup_expired`.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expire_at = entry
            if self._clock() >= expire_at:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        expire_at = self._clock() + ttl_seconds
        with self._lock:
            self._data[key] = (value, expire_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self, prefix: str) -> list[str]:
        self.cleanup_expired()
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))

    def cleanup_expired(self) -> int:
        """Remove expired items and return count of removed items."""

        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expire_at) in self._data.items() if now >= expire_at]
            for key in expired:
                del self._data[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
