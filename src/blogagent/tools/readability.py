"""可读性分析 (readability heuristics).

Sentence length is measured in characters so that the same thresholds work for Chinese and
English text.
"""

from __future__ import annotations

import json
import re
from typing import Any

from blogagent.models.blocks import coerce_blocks
from blogagent.models.review import ReadabilityAnalysis, ReadabilityGrade
from blogagent.utils.text import blocks_to_text, contains_cjk, split_sentences

_COMPLEX_RE = re.compile(r"[A-Za-z0-9]+")
_HEADING_MARK_RE = re.compile(r"^#{1,6}\s*", re.MULTILINE)


def extract_text(content: str) -> str:
    """Plain text from markdown, or from a JSON array of editor blocks."""

    stripped = (content or "").strip()
    if stripped.startswith("["):
        try:
            parsed: Any = json.loads(stripped)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return blocks_to_text(coerce_blocks(parsed))
    return _HEADING_MARK_RE.sub("", content or "")


def average_sentence_length(text: str) -> int:
    sentences = split_sentences(text, bilingual=True)
    if not sentences:
        return 0
    return round(sum(len(s) for s in sentences) / len(sentences))


def complex_word_percentage(text: str) -> int:
    """Share of characters inside ``[A-Za-z0-9]+`` runs (jargon/code proxy)."""

    if not text:
        return 0
    complex_chars = sum(len(m) for m in _COMPLEX_RE.findall(text))
    return round(complex_chars / len(text) * 100)


def grade_for(avg_len: int) -> ReadabilityGrade:
    if avg_len < 20:
        return "easy"
    if avg_len < 30:
        return "medium"
    return "hard"


def analyze_readability(content: str) -> ReadabilityAnalysis:
    text = extract_text(content)
    avg_len = average_sentence_length(text)
    complex_pct = complex_word_percentage(text)
    chinese = contains_cjk(text)

    suggestions: list[str] = []
    if avg_len > 35:
        suggestions.append("部分句子过长，建议分段" if chinese else "Some sentences are long; consider splitting them")
    if complex_pct > 20:
        suggestions.append(
            "专业术语较多，建议添加注释" if chinese else "Many technical terms; consider adding explanations"
        )

    score = 10
    if avg_len > 30:
        score -= 2
    if avg_len > 40:
        score -= 2
    if complex_pct > 20:
        score -= 2
    if complex_pct > 30:
        score -= 2

    return ReadabilityAnalysis(
        average_sentence_length=avg_len,
        grade=grade_for(avg_len),
        complex_word_percentage=complex_pct,
        suggestions=suggestions,
        overall_score=max(1, score),
    )
