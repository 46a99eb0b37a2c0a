"""Cache layer: typed service plus pluggable backends."""

from __future__ import annotations

from blogagent.cache.memory import InMemoryCacheBackend
from blogagent.cache.protocol import CacheBackend
from blogagent.cache.service import BlogAICache, build_cache_backend, content_hash

__all__ = ["BlogAICache", "CacheBackend", "InMemoryCacheBackend", "build_cache_backend", "content_hash"]
