"""Tests for SEO, readability, quality, diff and suggestion tools."""

from __future__ import annotations

import json

import pytest

from blogagent.agents.perception import PerceptionAgent
from blogagent.models.blocks import heading, paragraph
from blogagent.models.generation import ChangesSummary, GenerationResult, Modification
from blogagent.models.planning import ActionPlan, PlanningResult
from blogagent.tools import (
    analyze_readability,
    apply_modifications,
    calculate_diff,
    check_seo,
    generate_suggestions,
    score_quality,
)
from blogagent.tools.readability import extract_text
from blogagent.utils.markdown import markdown_to_blocks


# SEO

def test_seo_well_structured_content() -> None:
    """Test scoring for an optimal title and several headings."""
    content = "## Mars today\n\nMars is red.\n\n### Rovers\n\nMars rovers.\n\n### Orbiters\n\nText"
    seo = check_seo(content, "Mars Exploration: The Next Frontier For Humanity")

    assert seo.title.optimal is True
    assert seo.title.suggestion is None
    assert seo.headings.has_h2 is True
    assert seo.headings.count == 3
    assert seo.keywords.keyword == "Mars"
    assert seo.overall_score == 9


def test_seo_short_title_without_headings() -> None:
    """Test suggestions for a short title and missing H2."""
    seo = check_seo("plain text", "Mars")

    assert seo.title.length == 4
    assert seo.title.suggestion is not None
    assert seo.headings.has_h2 is False
    assert seo.headings.suggestion is not None
    assert seo.keywords.density == 0
    assert seo.overall_score == 2


def test_seo_empty_title_and_json_headings() -> None:
    """Test block-JSON heading detection and an empty title."""
    content = json.dumps([{"type": "heading", "props": {"level": 2}, "content": "A"}])
    seo = check_seo(content, "")

    assert seo.headings.has_h2 is True
    assert seo.keywords.keyword is None
    assert seo.overall_score == 3


# Readability

def test_readability_english_short_sentences() -> None:
    """Test that Latin alphanumerics count as complex characters."""
    result = analyze_readability("Short one. Another short.")

    assert result.average_sentence_length == 11
    assert result.grade == "easy"
    assert result.complex_word_percentage == 80
    assert result.overall_score == 6
    assert result.suggestions == ["Many technical terms; consider adding explanations"]


def test_readability_chinese() -> None:
    """Test plain Chinese prose."""
    result = analyze_readability("## 火星\n\n火星是太阳系的第四颗行星。它的表面呈红色。")

    assert result.grade == "easy"
    assert result.complex_word_percentage == 0
    assert result.overall_score == 10
    assert result.suggestions == []


def test_readability_long_sentences_floor() -> None:
    """Test deductions for long, dense sentences and the score floor."""
    result = analyze_readability("a" * 45 + ".")

    assert result.grade == "hard"
    assert result.overall_score == 2
    assert len(result.suggestions) == 2


def test_extract_text_from_block_json() -> None:
    """Test that a JSON block array is read as editor blocks."""
    content = json.dumps([{"type": "paragraph", "content": "Hello."}, {"type": "paragraph", "content": "World."}])

    assert extract_text(content) == "Hello. World."
    assert extract_text("## Title\n\nBody.") == "Title\n\nBody."


# Quality

@pytest.mark.parametrize(("words", "completeness", "overall", "flagged"), [(150, 5.0, 4.0, True), (600, 10.0, 8.0, False)])
def test_quality_completeness(words: int, completeness: float, overall: float, flagged: bool) -> None:
    """Test completeness against the planned word budget."""
    generation = GenerationResult(changes_summary=ChangesSummary(words_added=words))
    planning = PlanningResult(action_plan=ActionPlan(estimated_words=300))

    quality = score_quality(generation, planning)

    assert quality.completeness == pytest.approx(completeness)
    assert quality.overall_score == pytest.approx(overall)
    assert bool(quality.issues) is flagged


def test_quality_counts_words_when_summary_is_empty() -> None:
    """Test the fallback word count and a zero word budget."""
    generation = GenerationResult(modifications=[Modification(type="append", content="one two three four")])

    assert score_quality(generation, PlanningResult(action_plan=ActionPlan(estimated_words=4))).completeness == 10
    assert score_quality(generation, PlanningResult(action_plan=ActionPlan(estimated_words=0))).completeness == 10


# Diff and preview

def test_append_to_section(mars_blocks) -> None:
    """Test appending markdown at the end of a section."""
    mod = Modification(type="append", target="History", content="## More\n\nExtra words here.")

    preview = apply_modifications(mars_blocks, [mod])
    diff = calculate_diff(mars_blocks, [mod])

    assert len(mars_blocks) == 5
    assert [b.text for b in preview] == [
        "Mars",
        "History",
        "Humans have been sending probes to Mars since the 1960s.",
        "More",
        "Extra words here.",
        "Future",
        "SpaceX plans to send Starship to Mars.",
    ]
    assert diff.stats.blocks_added == 2
    assert diff.stats.words_added == 5
    assert [c.block_index for c in diff.changes] == [3, 4]


def test_replace_paragraph_keeps_heading(mars_blocks) -> None:
    """Test replacing a section body while keeping its heading."""
    mod = Modification(type="replace_paragraph", paragraph_index=1, content="New text for history.")

    preview = apply_modifications(mars_blocks, [mod])
    diff = calculate_diff(mars_blocks, [mod])

    assert [b.text for b in preview][:4] == ["Mars", "History", "New text for history.", "Future"]
    assert len(preview) == 5
    assert diff.stats.blocks_modified == 1
    assert diff.stats.words_deleted == 10
    assert diff.stats.words_added == 4


def test_delete_section(mars_blocks) -> None:
    """Test deleting a whole section including its heading."""
    mod = Modification(type="delete", target="Future")

    preview = apply_modifications(mars_blocks, [mod])
    diff = calculate_diff(mars_blocks, [mod])

    assert [b.text for b in preview] == ["Mars", "History", "Humans have been sending probes to Mars since the 1960s."]
    assert diff.stats.blocks_deleted == 2
    assert diff.stats.words_deleted == 8


def test_unanchored_append_goes_to_end_and_title_changes(mars_blocks) -> None:
    """Test end-of-document append and title updates."""
    mods = [
        Modification(type="append", content="Closing thoughts."),
        Modification(type="update_title", title="Mars, Past and Future"),
    ]

    preview = apply_modifications(mars_blocks, mods)
    diff = calculate_diff(mars_blocks, mods)

    assert preview[-1].text == "Closing thoughts."
    assert diff.changes[0].block_index == -1
    assert diff.changes[0].new_content == "Mars, Past and Future"
    assert diff.stats.blocks_added == 1


def test_multiple_edits_use_original_anchors(mars_blocks) -> None:
    """Test that edits resolve against the original document."""
    mods = [
        Modification(type="append", target="History", content="History addendum."),
        Modification(type="delete", target="Future"),
    ]

    preview = apply_modifications(mars_blocks, mods)

    assert [b.text for b in preview] == [
        "Mars",
        "History",
        "Humans have been sending probes to Mars since the 1960s.",
        "History addendum.",
    ]


def test_markdown_to_blocks() -> None:
    """Test the markdown subset used for generated content."""
    blocks = markdown_to_blocks("## A\n\npara line1\nline2\n\n- item\n1. num")

    assert [(b.type, b.text) for b in blocks] == [
        ("heading", "A"),
        ("paragraph", "para line1 line2"),
        ("bulletListItem", "item"),
        ("numberedListItem", "num"),
    ]
    assert blocks[0].heading_level == 2


# Suggestions

def test_suggestions_from_planning_structure_and_long_paragraphs() -> None:
    """Test the three suggestion sources and their order."""
    blocks = [heading(1, "Mars"), heading(2, "History"), paragraph(" ".join(["word"] * 320)), heading(2, "Future")]
    perception = PerceptionAgent().perceive("Expand the History section", blocks)
    planning = PlanningResult(suggestions=["Add recent mission data"])

    suggestions = generate_suggestions(perception, planning, instruction="Expand the History section")

    assert [s.type for s in suggestions] == ["content", "structure", "style"]
    assert suggestions[0].description == "Add recent mission data"
    assert suggestions[2].priority == "high"
    assert "Paragraph 3" in suggestions[2].description


def test_no_suggestions_for_short_document(mars_blocks) -> None:
    """Test a short document with no planner suggestions."""
    perception = PerceptionAgent().perceive("Expand the History section", mars_blocks)

    assert generate_suggestions(perception, PlanningResult()) == []
