"""Tests for the document analyzer."""

from __future__ import annotations

import pytest

from blogagent.analysis.document_analyzer import DocumentAnalyzer, analyze_document
from blogagent.errors import AnalysisError
from blogagent.models.blocks import Block, heading, paragraph


def test_outline_sections_and_stats(mars_blocks) -> None:
    """Test outline nesting, section ranges and stats for a small document."""
    structure = analyze_document(mars_blocks)

    assert len(structure.outline) == 1
    root = structure.outline[0]
    assert root.title == "Mars"
    assert [c.title for c in root.children] == ["History", "Future"]
    assert [c.block_index for c in root.children] == [1, 3]

    assert [s.title for s in structure.sections] == ["Mars", "History", "Future"]
    history = structure.sections[1]
    assert (history.start_index, history.end_index) == (1, 3)
    assert history.word_count == 10
    assert structure.sections[2].end_index == len(mars_blocks)

    stats = structure.stats
    assert stats.total_words == 20
    assert stats.total_headings == 3
    assert stats.total_paragraphs == 2
    assert stats.reading_time_minutes == 1
    assert stats.average_sentence_length == 10


def test_raw_editor_blocks_match_typed_blocks(mars_blocks, mars_raw_blocks) -> None:
    """Test that raw editor payloads (runs, plain strings, mixed) analyze identically."""
    typed = analyze_document(mars_blocks)
    raw = analyze_document(mars_raw_blocks)

    assert [s.title for s in raw.sections] == [s.title for s in typed.sections]
    assert raw.stats == typed.stats


def test_empty_document() -> None:
    """Test that an empty block list yields an empty structure."""
    structure = analyze_document([])

    assert structure.outline == []
    assert structure.sections == []
    assert structure.stats.total_words == 0
    assert structure.stats.reading_time_minutes == 0
    assert structure.stats.average_sentence_length == 0


def test_headingless_document_is_one_section() -> None:
    """Test that a document without headings is a single untitled section."""
    structure = analyze_document([paragraph("a b"), paragraph("c")])

    assert structure.outline == []
    assert len(structure.sections) == 1
    section = structure.sections[0]
    assert section.heading is None
    assert (section.start_index, section.end_index) == (0, 2)
    assert section.word_count == 3


def test_blocks_before_first_heading_form_lead_section() -> None:
    """Test that leading blocks are kept in a headingless lead section."""
    structure = analyze_document([paragraph("Intro text"), heading(2, "A"), paragraph("x")])

    assert structure.sections[0].id == "section-0"
    assert structure.sections[0].heading is None
    assert structure.sections[0].end_index == 1
    assert structure.sections[1].title == "A"
    assert structure.sections[1].start_index == 1


def test_skipped_levels_nest_under_nearest_enclosing_heading() -> None:
    """Test H1 -> H3 -> H2 nesting."""
    outline = DocumentAnalyzer.generate_outline([heading(1, "A"), heading(3, "B"), heading(2, "C")])

    assert len(outline) == 1
    assert [c.title for c in outline[0].children] == ["B", "C"]


def test_heading_without_level_defaults_to_level_one() -> None:
    """Test that a heading missing props.level is treated as H1."""
    structure = analyze_document([{"type": "heading", "content": "Title"}])

    assert structure.outline[0].level == 1
    assert structure.outline[0].title == "Title"


def test_malformed_block_keeps_indices_aligned() -> None:
    """Test that a non-mapping item becomes an empty block instead of shifting indices."""
    structure = analyze_document([heading(2, "A"), 42, paragraph("x y")])

    assert len(structure.sections) == 1
    section = structure.sections[0]
    assert section.end_index == 3
    assert [b.type for b in section.content] == ["unknown", "paragraph"]
    assert section.word_count == 2


def test_analysis_is_deterministic(mars_blocks) -> None:
    """Test that analyzing the same blocks twice gives equal structures."""
    assert analyze_document(mars_blocks) == analyze_document(list(mars_blocks))


def test_from_raw_rejects_unusable_items() -> None:
    """Test that malformed raw blocks raise AnalysisError."""
    assert Block.from_raw({"type": "heading", "props": {"level": 2}, "content": "Moons"}).text == "Moons"

    with pytest.raises(AnalysisError):
        Block.from_raw(42)
    with pytest.raises(AnalysisError):
        Block.from_raw({"type": "paragraph", "children": "oops"})


def test_six_heading_levels_form_one_chain() -> None:
    """Test that H1 through H6 nest into a single chain six deep."""
    structure = analyze_document([heading(level, f"Level {level}") for level in range(1, 7)])

    assert len(structure.outline) == 1
    node = structure.outline[0]
    depth = 1
    while node.children:
        assert len(node.children) == 1
        node = node.children[0]
        depth += 1

    assert depth == 6
    assert node.level == 6
    assert node.title == "Level 6"


def test_reading_time_rounds_up() -> None:
    """Test that a 400-word paragraph reads in two minutes."""
    stats = analyze_document([paragraph(" ".join(["word"] * 400))]).stats

    assert stats.total_words == 400
    assert stats.reading_time_minutes == 2


def test_section_words_plus_heading_words_equal_total() -> None:
    """Test that sections and headings partition the document's words."""
    blocks = [
        paragraph("An intro before any heading."),
        heading(1, "Mars Exploration"),
        paragraph("Why we go."),
        heading(2, "Rovers"),
        paragraph("Curiosity landed in 2012."),
        heading(3, "Spirit and Opportunity"),
        paragraph("Twin rovers explored for years."),
        heading(3, "Perseverance"),
        paragraph("It carries a helicopter."),
        heading(2, "Orbiters"),
        paragraph("Many orbiters map the surface."),
    ]

    structure = analyze_document(blocks)
    section_words = sum(s.word_count for s in structure.sections)
    heading_words = sum(len(b.text.split()) for b in blocks if b.is_heading)

    assert structure.sections[0].heading is None
    assert [s.word_count for s in structure.sections] == [5, 3, 4, 5, 4, 5]
    assert heading_words == 8
    assert section_words + heading_words == structure.stats.total_words == 34
