"""Markdown-flavored generated content -> editor blocks.

Generated content uses ``##``/``###`` headings and blank-line separated paragraphs; the
editor works in blocks. Only the subset the generator is asked to produce is supported.
"""

from __future__ import annotations

import re

from blogagent.models.blocks import Block, PlainText, heading, paragraph

_HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<text>.+?)\s*#*\s*$")
_BULLET_RE = re.compile(r"^[-*+]\s+(?P<text>.+)$")
_NUMBERED_RE = re.compile(r"^\d+[.)]\s+(?P<text>.+)$")


def markdown_to_blocks(markdown: str) -> list[Block]:
    """Convert markdown text to a list of blocks."""

    blocks: list[Block] = []
    buf: list[str] = []

    def flush() -> None:
        if buf:
            text = " ".join(line.strip() for line in buf).strip()
            if text:
                blocks.append(paragraph(text))
            buf.clear()

    for raw_line in (markdown or "").splitlines():
        line = raw_line.strip()
        if not line:
            flush()
            continue

        m = _HEADING_RE.match(line)
        if m:
            flush()
            blocks.append(heading(len(m.group("hashes")), m.group("text").strip()))
            continue

        m = _BULLET_RE.match(line)
        if m:
            flush()
            blocks.append(Block(type="bulletListItem", content=PlainText(text=m.group("text").strip())))
            continue

        m = _NUMBERED_RE.match(line)
        if m:
            flush()
            blocks.append(Block(type="numberedListItem", content=PlainText(text=m.group("text").strip())))
            continue

        buf.append(line)

    flush()
    return blocks


def starts_with_heading(markdown: str) -> bool:
    return (markdown or "").lstrip().startswith("#")
