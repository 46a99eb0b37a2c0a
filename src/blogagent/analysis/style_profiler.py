"""Writing style profiler.

Derives a :class:`WritingStyleProfile` from a user's most recent documents. Any problem with
the history store (missing, empty, raising) degrades to :data:`DEFAULT_WRITING_STYLE`.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Sequence

from blogagent.history.store import HistoryDocument, HistoryStore
from blogagent.logging import get_logger, log_exception
from blogagent.models.style import DEFAULT_WRITING_STYLE, WritingStyleProfile
from blogagent.utils.text import blocks_to_text, split_sentences

logger = get_logger(__name__)

FORMAL_INDICATORS = (
    "因此", "然而", "此外", "综上所述", "鉴于", "基于", "根据", "显示", "表明",
    "therefore", "however", "moreover", "furthermore", "consequently", "in conclusion",
)
INFORMAL_INDICATORS = (
    "哈哈", "嘿", "哇", "呀", "啊", "吧", "呢",
    "lol", "hey", "wow", "gonna", "kinda", "awesome",
)
EXAMPLE_INDICATORS = ("例如", "比如", "举例", "例子", "如：", "如下", "for example", "for instance", "such as", "e.g.")

_CJK_PHRASE_RE = re.compile(r"[一-龥]{2,3}")
_TECH_RE = re.compile(r"[A-Za-z0-9]+")
_LATIN_WORD_RE = re.compile(r"[a-z]{3,}")

LIST_BLOCK_TYPES = {"bulletListItem", "numberedListItem", "checkListItem"}


class StyleProfiler:
    """Builds a writing style fingerprint from history."""

    def __init__(self, history_store: HistoryStore | None, *, limit: int = 10) -> None:
        self._store = history_store
        self._limit = limit

    def profile(self, user_id: str) -> WritingStyleProfile:
        if self._store is None:
            return DEFAULT_WRITING_STYLE

        try:
            docs = self._store.fetch_recent_documents(user_id, self._limit)
        except Exception:
            log_exception(logger, "History store failed; using default writing style", user_id=user_id)
            return DEFAULT_WRITING_STYLE

        if not docs:
            logger.info("No documents found for user, using default style")
            return DEFAULT_WRITING_STYLE

        return self.profile_documents(docs)

    def profile_documents(self, docs: Sequence[HistoryDocument]) -> WritingStyleProfile:
        all_text = " ".join(blocks_to_text(d.content) for d in docs).strip()
        if not all_text:
            return DEFAULT_WRITING_STYLE

        sentences = split_sentences(all_text, bilingual=True)
        return WritingStyleProfile(
            average_sentence_length=average_sentence_length(sentences),
            formality_level=detect_formality(all_text),
            preferred_structure=detect_structure_pattern(docs),
            common_phrases=extract_common_phrases(all_text),
            technical_term_density=technical_term_density(all_text),
            uses_examples=detect_example_usage(all_text),
        )


def average_sentence_length(sentences: Sequence[str]) -> int:
    """Mean sentence length in characters; 20 when there are no sentences."""

    if not sentences:
        return 20
    return round(sum(len(s) for s in sentences) / len(sentences))


def _count_occurrences(text: str, needles: Sequence[str]) -> int:
    lower = text.lower()
    return sum(lower.count(n) for n in needles)


def detect_formality(text: str) -> int:
    """0-10 formality from formal vs informal marker frequency; 5 when no markers."""

    formal = _count_occurrences(text, FORMAL_INDICATORS)
    informal = _count_occurrences(text, INFORMAL_INDICATORS)
    total = formal + informal
    if total == 0:
        return 5
    return round(formal / total * 10)


def extract_common_phrases(text: str, top_n: int = 5) -> list[str]:
    """Most frequent 2-3 character CJK runs, falling back to repeated English bigrams."""

    cjk = _CJK_PHRASE_RE.findall(text)
    if cjk:
        return [p for p, _ in Counter(cjk).most_common(top_n)]

    tokens = _LATIN_WORD_RE.findall(text.lower())
    bigrams = Counter(f"{a} {b}" for a, b in zip(tokens, tokens[1:]))
    return [p for p, n in bigrams.most_common(top_n) if n > 1]


def technical_term_density(text: str) -> int:
    """Percentage of characters inside alphanumeric runs."""

    if not text:
        return 0
    tech_chars = sum(len(m) for m in _TECH_RE.findall(text))
    return round(tech_chars / len(text) * 100)


def detect_example_usage(text: str) -> bool:
    lower = text.lower()
    return any(ind in lower for ind in EXAMPLE_INDICATORS)


def detect_structure_pattern(docs: Sequence[HistoryDocument]) -> str:
    has_lists = any(b.type in LIST_BLOCK_TYPES for d in docs for b in d.content)
    has_headings = any(b.is_heading for d in docs for b in d.content)

    if has_lists and has_headings:
        return "structured"
    if has_lists:
        return "list-heavy"
    if has_headings:
        return "heading-heavy"
    return "paragraph-focused"
