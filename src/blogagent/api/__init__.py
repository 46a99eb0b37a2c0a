from __future__ import annotations

from blogagent.api.app import create_app

__all__ = ["create_app"]
