"""Key-value cache backend protocol."""

from __future__ import annotations

from typing import Any, Protocol


class CacheBackend(Protocol):
    """Minimal TTL key-value store.

    Values are JSON-compatible python objects (dicts, lists, scalars).
    """

    def get(self, key: str) -> Any | None:
        """Return the stored value or None when missing/expired."""

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value with a time-to-live."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""

    def keys(self, prefix: str) -> list[str]:
        """List live keys starting with ``prefix``."""
