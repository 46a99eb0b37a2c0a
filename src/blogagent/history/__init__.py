"""User history stores."""

from __future__ import annotations

from blogagent.history.store import HistoryDocument, HistoryStore, InMemoryHistoryStore, JsonlHistoryStore

__all__ = ["HistoryDocument", "HistoryStore", "InMemoryHistoryStore", "JsonlHistoryStore"]
