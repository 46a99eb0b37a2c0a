"""Tests for intent and scope detection."""

from __future__ import annotations

import pytest

from blogagent.agents.perception import PerceptionAgent, match_section_titles, parse_number
from blogagent.analysis.document_analyzer import analyze_document
from blogagent.models.blocks import heading, paragraph


def test_single_section_by_title(mars_blocks) -> None:
    """Test the canonical 'expand a named section' instruction."""
    result = PerceptionAgent().perceive("Expand the History section", mars_blocks)

    assert result.intent == "add_content"
    assert result.confidence == pytest.approx(0.8)
    assert result.paragraph_analysis.scope == "single_paragraph"
    assert result.paragraph_analysis.target_paragraph_titles == ["History"]
    assert result.extracted_entities.action_type == "expand"
    assert result.extracted_entities.target_section == "History"
    assert result.document_structure.stats.total_headings == 3


@pytest.mark.parametrize(
    ("instruction", "intent"),
    [
        ("Delete the Future section", "delete_content"),
        ("Add a paragraph about the natural conditions of Mars", "add_content"),
        ("Improve the whole article", "improve_quality"),
        ("修改第一段的措辞", "modify_content"),
        ("请帮我核查这些数据", "factcheck"),
        ("Make it shine", "modify_content"),
    ],
)
def test_intent_classification(instruction: str, intent: str) -> None:
    """Test keyword-table intent classification in both languages."""
    assert PerceptionAgent.classify_intent(instruction) == intent


def test_full_article_scope(mars_blocks) -> None:
    """Test whole-document phrasing."""
    result = PerceptionAgent().perceive("Improve the whole article", mars_blocks)

    assert result.paragraph_analysis.scope == "full_article"
    assert result.paragraph_analysis.target_paragraph_titles == ["全部"]
    assert result.confidence == pytest.approx(1.0)


def test_count_scope_is_capped_by_section_count(mars_blocks) -> None:
    """Test 'first three sections' against a two-section document."""
    structure = analyze_document(mars_blocks)
    decision = PerceptionAgent.detect_scope("Rewrite the first three sections", structure)

    assert decision.scope == "multiple_paragraphs"
    assert decision.indices == [0, 1]
    assert decision.confidence == pytest.approx(0.9)


def test_chinese_count_scope(mars_blocks) -> None:
    """Test Chinese numerals in count phrases."""
    structure = analyze_document(mars_blocks)
    decision = PerceptionAgent.detect_scope("扩充前两段", structure)

    assert decision.scope == "multiple_paragraphs"
    assert decision.indices == [0, 1]


def test_conjunction_scope(mars_blocks) -> None:
    """Test two titles joined by a conjunction."""
    structure = analyze_document(mars_blocks)
    decision = PerceptionAgent.detect_scope("Update History and Future", structure)

    assert decision.scope == "multiple_paragraphs"
    assert decision.titles == ["History", "Future"]
    assert decision.confidence == pytest.approx(0.85)


@pytest.mark.parametrize("instruction", ["Please rewrite this section", "改写这一段"])
def test_deictic_scope(mars_blocks, instruction: str) -> None:
    """Test 'this section' style references, including 这一段 which is not a count."""
    structure = analyze_document(mars_blocks)
    decision = PerceptionAgent.detect_scope(instruction, structure)

    assert decision.scope == "single_paragraph"
    assert decision.confidence == pytest.approx(0.9)
    assert decision.titles == []


def test_unknown_scope(mars_blocks) -> None:
    """Test an instruction that names nothing in the document."""
    result = PerceptionAgent().perceive("Make it shine", mars_blocks)

    assert result.paragraph_analysis.scope == "unknown"
    assert result.confidence == pytest.approx(0.5)
    assert result.extracted_entities.target_section is None


def test_fuzzy_title_match_threshold() -> None:
    """Test that long titles need at least two overlapping words."""
    structure = analyze_document([heading(2, "Early Mars Exploration Missions"), paragraph("text")])

    assert match_section_titles("tell me about exploration", structure) == []
    assert match_section_titles("exploration missions please", structure) == [
        "Early Mars Exploration Missions"
    ]


def test_needs_subheadings_for_long_section() -> None:
    """Test the subheading hint for a long section without H3s."""
    long_text = " ".join(["word"] * 320)
    blocks = [heading(1, "Mars"), heading(2, "History"), paragraph(long_text), heading(2, "Future")]

    result = PerceptionAgent().perceive("Expand the History section", blocks)

    assert result.paragraph_analysis.needs_subheadings is True

    short = PerceptionAgent().perceive("Expand the Future section", blocks)
    assert short.paragraph_analysis.needs_subheadings is False


@pytest.mark.parametrize(
    ("token", "value"),
    [("3", 3), ("three", 3), ("两", 2), ("十", 10), ("十二", 12), ("二十", 20), ("二十三", 23)],
)
def test_parse_number(token: str, value: int) -> None:
    """Test digit, English and Chinese numeral parsing."""
    assert parse_number(token) == value


def test_empty_document_has_unknown_scope() -> None:
    """Test perception over an empty document."""
    result = PerceptionAgent().perceive("Expand the History section", [])

    assert result.paragraph_analysis.scope == "unknown"
    assert result.document_structure.sections == []
