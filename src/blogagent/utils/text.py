"""Plain-text helpers shared by the analyzer, profiler and scoring tools."""

from __future__ import annotations

import re
from typing import Iterable

from blogagent.models.blocks import Block

_WS_RE = re.compile(r"\s+")
_CJK_RE = re.compile(r"[\u4e00-\u9fa5]")
# Latin-only terminators; used for document stats.
_SENTENCE_RE = re.compile(r"[.!?]+")
# Bilingual terminators; used for style and readability.
_SENTENCE_BILINGUAL_RE = re.compile(r"[。！？.!?]+")


def blocks_to_text(blocks: Iterable[Block]) -> str:
    return " ".join(b.text for b in blocks)


def words(text: str) -> list[str]:
    return [w for w in _WS_RE.split(text) if w]


def count_words(text: str) -> int:
    return len(words(text))


def count_block_words(blocks: Iterable[Block]) -> int:
    return count_words(blocks_to_text(blocks))


def split_sentences(text: str, *, bilingual: bool = False) -> list[str]:
    pattern = _SENTENCE_BILINGUAL_RE if bilingual else _SENTENCE_RE
    return [s.strip() for s in pattern.split(text) if s.strip()]


def normalize_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def contains_cjk(text: str) -> bool:
    return bool(_CJK_RE.search(text or ""))


def is_chinese(text: str) -> bool:
    """Output language is picked per request from the instruction alone."""

    return contains_cjk(text)


def blocks_to_markdown(blocks: Iterable[Block]) -> str:
    """Render headings as ``#`` lines and other text blocks as paragraphs."""

    parts: list[str] = []
    for b in blocks:
        text = b.text.strip()
        if not text:
            continue
        level = b.heading_level
        if level is not None:
            parts.append("#" * level + " " + text)
        else:
            parts.append(text)
    return "\n\n".join(parts)
