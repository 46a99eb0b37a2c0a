"""ID utilities."""

from __future__ import annotations

import time
import uuid


def _random_suffix(length: int = 9) -> str:
    return uuid.uuid4().hex[:length]


def new_conversation_id() -> str:
    """Mint a conversation id, e.g. ``conv_1718000000000_3f9a1c2be``.

    The uuid4 suffix keeps ids unique even for calls within the same millisecond.
    """

    return f"conv_{int(time.time() * 1000)}_{_random_suffix()}"


def new_message_id() -> str:
    return f"msg_{int(time.time() * 1000)}_{_random_suffix()}"
