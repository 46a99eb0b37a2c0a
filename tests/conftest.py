"""Shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from blogagent.models.blocks import Block, heading, paragraph


@pytest.fixture
def mars_blocks() -> list[Block]:
    return [
        heading(1, "Mars"),
        heading(2, "History"),
        paragraph("Humans have been sending probes to Mars since the 1960s."),
        heading(2, "Future"),
        paragraph("SpaceX plans to send Starship to Mars."),
    ]


@pytest.fixture
def mars_raw_blocks() -> list[dict[str, Any]]:
    return [
        {"type": "heading", "props": {"level": 1}, "content": [{"type": "text", "text": "Mars", "styles": {}}]},
        {"type": "heading", "props": {"level": 2}, "content": [{"type": "text", "text": "History", "styles": {}}]},
        {
            "type": "paragraph",
            "content": [{"type": "text", "text": "Humans have been sending probes to Mars since the 1960s.", "styles": {}}],
        },
        {"type": "heading", "props": {"level": 2}, "content": "Future"},
        {"type": "paragraph", "content": ["SpaceX plans to send ", {"type": "text", "text": "Starship"}, " to Mars."]},
    ]
