"""Perception stage.

Classifies what the user wants (intent), where in the document (scope and target sections)
and a few extracted entities. Rule-based and bilingual (Chinese/English); no LLM call.

Rules are ordered tables so that precedence is data, not control flow: the first rule that
fires wins.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from blogagent.analysis.document_analyzer import DocumentAnalyzer
from blogagent.logging import get_logger
from blogagent.models.blocks import Block
from blogagent.models.document import DocumentStructure
from blogagent.models.perception import (
    EntityActionType,
    ExtractedEntities,
    IntentType,
    ParagraphAnalysis,
    PerceptionResult,
    ScopeType,
)

logger = get_logger(__name__)


INTENT_RULES: list[tuple[IntentType, tuple[str, ...]]] = [
    ("modify_content", ("修改", "改", "调整", "modify", "change", "edit")),
    ("add_content", ("添加", "加", "增加", "扩充", "补充", "add", "expand", "append")),
    ("delete_content", ("删除", "删", "移除", "delete", "remove")),
    ("improve_quality", ("优化", "提升", "改进", "完善", "improve", "enhance", "better")),
    ("factcheck", ("核查", "检查", "验证", "check", "verify", "factcheck", "fact-check")),
    ("ask_question", ("建议", "怎么", "如何", "suggest", "how", "what", "?", "？")),
]
DEFAULT_INTENT: IntentType = "modify_content"

ACTION_TYPE_RULES: list[tuple[EntityActionType, tuple[str, ...]]] = [
    ("expand", ("扩充", "扩展", "expand")),
    ("rewrite", ("重写", "改写", "rewrite")),
    ("correct", ("纠正", "更正", "correct")),
]

FULL_ARTICLE_PHRASES = (
    "整个文章", "整篇文章", "全文", "整体", "所有段落",
    "whole article", "entire article", "all paragraphs", "all sections", "full article",
)
DEICTIC_PHRASES = ("这一段", "这段", "该段落", "这一节", "this paragraph", "this section")

_CN_DIGITS = {"一": 1, "二": 2, "两": 2, "三": 3, "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9, "十": 10}
_EN_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

# "这一段"/"该一段" are deictic, not counts.
_CN_COUNT_RE = re.compile(r"(?<![这该那])(前|后)?\s*([一二两三四五六七八九十\d]+)\s*(个)?\s*(段落|段|章节)")
_EN_COUNT_RE = re.compile(
    r"\b(?:first\s+|last\s+)?(one|two|three|four|five|six|seven|eight|nine|ten|\d+)\s+(?:paragraphs?|sections?)\b"
)
_CONJUNCTION_SPLIT_RE = re.compile(r"和|与|以及|、|,|，|\band\b")
_KEYWORD_SPLIT_RE = re.compile(r"[\s,，。、]+")
_WORD_SPLIT_RE = re.compile(r"\s+")

SUBHEADING_WORD_THRESHOLD = 300


def parse_number(token: str) -> int:
    """Parse digits, English number words and simple Chinese numerals (一..九十九)."""

    token = token.strip().lower()
    if token.isdigit():
        return int(token)
    if token in _EN_NUMBERS:
        return _EN_NUMBERS[token]
    if token in _CN_DIGITS:
        return _CN_DIGITS[token]
    if "十" in token:
        tens_s, _, ones_s = token.partition("十")
        tens = _CN_DIGITS.get(tens_s, 1) if tens_s else 1
        ones = _CN_DIGITS.get(ones_s, 0) if ones_s else 0
        return tens * 10 + ones
    return 1


def match_section_titles(text: str, structure: DocumentStructure) -> list[str]:
    """Fuzzy-match level-2 section titles mentioned in ``text``."""

    msg = text.lower().strip()
    if not msg:
        return []
    msg_words = [w for w in _WORD_SPLIT_RE.split(msg) if len(w) > 2]
    matches: list[str] = []

    for section in structure.level2_sections():
        title = section.title or ""
        lower_title = title.lower().strip()
        if not lower_title:
            continue

        if lower_title in msg:
            matches.append(title)
            continue
        if len(msg) > 2 and msg in lower_title:
            matches.append(title)
            continue

        title_words = [w for w in _WORD_SPLIT_RE.split(lower_title) if len(w) > 2]
        if not title_words or not msg_words:
            continue
        hits = sum(1 for tw in title_words if any(mw in tw or tw in mw for mw in msg_words))
        threshold = max(1, min(2, math.ceil(len(title_words) * 0.5)))
        if hits >= threshold:
            matches.append(title)

    return matches


@dataclass(frozen=True)
class ScopeDecision:
    scope: ScopeType
    confidence: float
    titles: list[str] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)


ScopeRule = Callable[[str, DocumentStructure], Optional[ScopeDecision]]


def _full_article_rule(msg: str, structure: DocumentStructure) -> ScopeDecision | None:
    if any(p in msg for p in FULL_ARTICLE_PHRASES):
        return ScopeDecision("full_article", 1.0, titles=["全部"])
    return None


def _count_rule(msg: str, structure: DocumentStructure) -> ScopeDecision | None:
    m = _CN_COUNT_RE.search(msg)
    token = m.group(2) if m else None
    if token is None:
        m = _EN_COUNT_RE.search(msg)
        token = m.group(1) if m else None
    if token is None:
        return None
    count = parse_number(token)
    n = min(count, len(structure.level2_sections()))
    return ScopeDecision("multiple_paragraphs", 0.9, indices=list(range(n)))


def _conjunction_rule(msg: str, structure: DocumentStructure) -> ScopeDecision | None:
    parts = _CONJUNCTION_SPLIT_RE.split(msg)
    if len(parts) < 2:
        return None
    matches: list[str] = []
    for part in parts:
        for title in match_section_titles(part, structure):
            if title not in matches:
                matches.append(title)
    if len(matches) > 1:
        return ScopeDecision("multiple_paragraphs", 0.85, titles=matches)
    return None


def _deictic_rule(msg: str, structure: DocumentStructure) -> ScopeDecision | None:
    if any(p in msg for p in DEICTIC_PHRASES):
        return ScopeDecision("single_paragraph", 0.9)
    return None


def _title_match_rule(msg: str, structure: DocumentStructure) -> ScopeDecision | None:
    matches = match_section_titles(msg, structure)
    if len(matches) == 1:
        return ScopeDecision("single_paragraph", 0.8, titles=matches)
    if len(matches) > 1:
        return ScopeDecision("multiple_paragraphs", 0.7, titles=matches)
    return None


SCOPE_RULES: list[ScopeRule] = [
    _full_article_rule,
    _count_rule,
    _conjunction_rule,
    _deictic_rule,
    _title_match_rule,
]


class PerceptionAgent:
    """Rule-based intent/scope detection over an analyzed document."""

    def __init__(self, analyzer: DocumentAnalyzer | None = None) -> None:
        self._analyzer = analyzer or DocumentAnalyzer()

    def perceive(self, instruction: str, blocks: Sequence[Block | dict]) -> PerceptionResult:
        structure = self._analyzer.analyze(blocks)
        decision = self.detect_scope(instruction, structure)

        result = PerceptionResult(
            intent=self.classify_intent(instruction),
            confidence=decision.confidence,
            document_structure=structure,
            extracted_entities=self.extract_entities(instruction, structure),
            paragraph_analysis=ParagraphAnalysis(
                scope=decision.scope,
                target_paragraph_titles=decision.titles,
                target_paragraph_indices=decision.indices,
                needs_subheadings=self.should_add_subheadings(decision, structure),
            ),
        )
        logger.info(
            "Perception: intent=%s scope=%s targets=%s",
            result.intent,
            decision.scope,
            decision.titles or decision.indices,
        )
        return result

    @staticmethod
    def classify_intent(instruction: str) -> IntentType:
        msg = instruction.lower()
        for intent, keywords in INTENT_RULES:
            if any(kw in msg for kw in keywords):
                return intent
        return DEFAULT_INTENT

    @staticmethod
    def detect_scope(instruction: str, structure: DocumentStructure) -> ScopeDecision:
        msg = instruction.lower()
        for rule in SCOPE_RULES:
            decision = rule(msg, structure)
            if decision is not None:
                return decision
        return ScopeDecision("unknown", 0.5)

    @staticmethod
    def extract_entities(instruction: str, structure: DocumentStructure) -> ExtractedEntities:
        msg = instruction.lower()

        action_type: EntityActionType | None = None
        for candidate, keywords in ACTION_TYPE_RULES:
            if any(kw in msg for kw in keywords):
                action_type = candidate
                break

        keywords = [w for w in _KEYWORD_SPLIT_RE.split(instruction) if len(w) > 1][:5]
        matched = match_section_titles(msg, structure)
        return ExtractedEntities(
            target_section=matched[0] if matched else None,
            keywords=keywords,
            action_type=action_type,
        )

    @staticmethod
    def should_add_subheadings(decision: ScopeDecision, structure: DocumentStructure) -> bool:
        if decision.scope != "single_paragraph" or not decision.titles:
            return False
        section = structure.find_section(decision.titles[0], level=2)
        if section is None:
            return False
        return not section.has_subheading(3) and section.word_count > SUBHEADING_WORD_THRESHOLD
