"""Best-effort cache for document structure and writing style.

Every backend failure is logged and turned into a miss (reads) or a no-op (writes): the
pipeline must produce the same response with a broken cache as with none at all.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Sequence

from pydantic import ValidationError

from blogagent.cache.memory import InMemoryCacheBackend
from blogagent.cache.protocol import CacheBackend
from blogagent.config import Settings
from blogagent.errors import CacheError
from blogagent.logging import get_logger, log_exception
from blogagent.models.blocks import Block, coerce_blocks
from blogagent.models.document import DocumentStructure
from blogagent.models.style import WritingStyleProfile

logger = get_logger(__name__)


def content_hash(blocks: Sequence[Block | dict[str, Any]]) -> str:
    """First 8 hex chars of md5 over the canonical JSON form of ``blocks``."""

    payload = [b.to_editor() for b in coerce_blocks(blocks)]
    canonical = json.dumps(payload, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()[:8]


class BlogAICache:
    """Typed facade over a :class:`CacheBackend`.

    ``backend=None`` disables caching entirely; every read is a miss.
    """

    def __init__(
        self,
        backend: CacheBackend | None,
        *,
        prefix: str = "blog_ai",
        doc_structure_ttl_s: int = 300,
        writing_style_ttl_s: int = 86400,
    ) -> None:
        self._backend = backend
        self.prefix = prefix
        self.doc_structure_ttl_s = doc_structure_ttl_s
        self.writing_style_ttl_s = writing_style_ttl_s

    @classmethod
    def from_settings(cls, settings: Settings, backend: CacheBackend | None) -> "BlogAICache":
        return cls(
            backend,
            prefix=settings.cache_key_prefix,
            doc_structure_ttl_s=settings.doc_structure_ttl_s,
            writing_style_ttl_s=settings.writing_style_ttl_s,
        )

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    # Keys

    def doc_structure_key(self, post_id: str, blocks: Sequence[Block | dict[str, Any]]) -> str:
        return f"{self.prefix}:doc_structure:{post_id}:{content_hash(blocks)}"

    def writing_style_key(self, user_id: str) -> str:
        return f"{self.prefix}:writing_style:{user_id}"

    # Document structure

    def get_document_structure(
        self, post_id: str, blocks: Sequence[Block | dict[str, Any]]
    ) -> DocumentStructure | None:
        raw = self._get(self.doc_structure_key(post_id, blocks))
        if raw is None:
            return None
        try:
            return DocumentStructure.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable cached document structure for post %s", post_id)
            return None

    def set_document_structure(
        self, post_id: str, blocks: Sequence[Block | dict[str, Any]], structure: DocumentStructure
    ) -> None:
        self._set(
            self.doc_structure_key(post_id, blocks),
            structure.model_dump(mode="json"),
            self.doc_structure_ttl_s,
        )

    # Writing style

    def get_writing_style(self, user_id: str) -> WritingStyleProfile | None:
        raw = self._get(self.writing_style_key(user_id))
        if raw is None:
            return None
        try:
            return WritingStyleProfile.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable cached writing style for user %s", user_id)
            return None

    def set_writing_style(self, user_id: str, profile: WritingStyleProfile) -> None:
        self._set(self.writing_style_key(user_id), profile.model_dump(mode="json"), self.writing_style_ttl_s)

    def clear_user_cache(self, user_id: str) -> None:
        if self._backend is None:
            return
        try:
            self._backend.delete(self.writing_style_key(user_id))
        except Exception as e:
            self._log_failure("delete", e, user_id=user_id)

    def get_cache_stats(self) -> dict[str, Any]:
        """Diagnostics only: key counts by kind."""

        stats: dict[str, Any] = {"enabled": self.enabled, "total_keys": 0, "doc_structure_keys": 0, "writing_style_keys": 0}
        if self._backend is None:
            return stats
        try:
            keys = self._backend.keys(f"{self.prefix}:")
        except Exception as e:
            self._log_failure("keys", e)
            stats["error"] = str(e)
            return stats

        stats["total_keys"] = len(keys)
        stats["doc_structure_keys"] = sum(1 for k in keys if k.startswith(f"{self.prefix}:doc_structure:"))
        stats["writing_style_keys"] = sum(1 for k in keys if k.startswith(f"{self.prefix}:writing_style:"))
        return stats

    # Backend access

    def _get(self, key: str) -> Any | None:
        if self._backend is None:
            return None
        try:
            return self._backend.get(key)
        except Exception as e:
            self._log_failure("get", e, key=key)
            return None

    def _set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if self._backend is None:
            return
        try:
            self._backend.set(key, value, ttl_seconds)
        except Exception as e:
            self._log_failure("set", e, key=key)

    @staticmethod
    def _log_failure(op: str, exc: Exception, **context: Any) -> None:
        # Must be called from inside an ``except`` block so the traceback is attached.
        err = CacheError(f"cache {op} failed: {exc}")
        log_exception(logger, str(err), op=op, **context)


def build_cache_backend(settings: Settings) -> CacheBackend:
    """Redis when enabled in settings, else a process-local in-memory backend."""

    if settings.redis_enabled:
        from blogagent.cache.redis_backend import RedisCacheBackend

        logger.info("Using redis cache backend at %s", settings.redis_url)
        return RedisCacheBackend(redis_url=settings.redis_url)
    return InMemoryCacheBackend()
