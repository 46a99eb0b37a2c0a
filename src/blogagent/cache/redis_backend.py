"""Redis-based cache backend.

Enables sharing analysis/style results across multiple API instances. Values are stored as
JSON strings with ``SETEX`` so redis handles expiry.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import redis


@dataclass
class RedisCacheBackend:
    """JSON values in plain redis string keys."""

    redis_url: str
    client: redis.Redis | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = redis.Redis.from_url(self.redis_url, decode_responses=True)

    def get(self, key: str) -> Any | None:
        raw = self.client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        line = json.dumps(value, ensure_ascii=False)
        self.client.setex(key, ttl_seconds, line)

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def keys(self, prefix: str) -> list[str]:
        # SCAN instead of KEYS so large keyspaces do not block the server.
        return sorted(self.client.scan_iter(match=f"{prefix}*"))
