"""User document history.

The style profiler only needs a user's most recent documents. Two implementations are
provided: an in-memory store for tests/embedding and an append-only JSONL store, one file per
user, that can be swapped for a DB-backed implementation later.
"""

from __future__ import annotations

import hashlib
import json
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from blogagent.logging import get_logger
from blogagent.models.blocks import Block

logger = get_logger(__name__)


class HistoryDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: list[Block] = Field(default_factory=list)
    title: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HistoryStore(Protocol):
    """Source of a user's recent documents, most-recent-first."""

    def fetch_recent_documents(self, user_id: str, limit: int) -> list[HistoryDocument]:
        """Return up to ``limit`` documents, newest first."""


class InMemoryHistoryStore:
    """Process-local history store."""

    def __init__(self) -> None:
        self._docs: dict[str, list[HistoryDocument]] = {}
        self._lock = threading.Lock()

    def add(self, user_id: str, content: Sequence[Block | dict[str, Any]], *, title: str | None = None) -> HistoryDocument:
        doc = HistoryDocument(content=list(content), title=title)
        with self._lock:
            self._docs.setdefault(user_id, []).append(doc)
        return doc

    def fetch_recent_documents(self, user_id: str, limit: int) -> list[HistoryDocument]:
        with self._lock:
            docs = list(self._docs.get(user_id, []))
        return list(reversed(docs))[: max(0, limit)]


@dataclass(frozen=True)
class JsonlHistoryPaths:
    """Filesystem layout for a history store."""

    root: Path

    def user_file(self, user_id: str) -> Path:
        # User ids are opaque; hash them so they are always safe file names.
        digest = hashlib.sha1(user_id.encode("utf-8")).hexdigest()[:16]
        return self.root / f"{digest}.jsonl"


class JsonlHistoryStore:
    """Append-only JSONL history, one file per user."""

    def __init__(self, root_dir: Path) -> None:
        self._paths = JsonlHistoryPaths(root=root_dir)
        self._paths.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def add(self, user_id: str, content: Sequence[Block | dict[str, Any]], *, title: str | None = None) -> HistoryDocument:
        doc = HistoryDocument(content=list(content), title=title)
        line = json.dumps(doc.model_dump(mode="json"), ensure_ascii=False)
        with self._lock:
            with self._paths.user_file(user_id).open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        return doc

    def fetch_recent_documents(self, user_id: str, limit: int) -> list[HistoryDocument]:
        path = self._paths.user_file(user_id)
        if not path.exists():
            return []

        docs: list[HistoryDocument] = []
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                docs.append(HistoryDocument.model_validate_json(line))
            except ValidationError:
                logger.warning("Skipping unreadable history line in %s", path)
                continue

        docs.reverse()
        return docs[: max(0, limit)]
