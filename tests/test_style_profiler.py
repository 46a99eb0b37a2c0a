"""Tests for writing style profiling and history stores."""

from __future__ import annotations

from pathlib import Path

from blogagent.analysis.style_profiler import (
    StyleProfiler,
    detect_formality,
    extract_common_phrases,
    technical_term_density,
)
from blogagent.history.store import InMemoryHistoryStore, JsonlHistoryStore
from blogagent.models.blocks import Block, PlainText, heading, paragraph
from blogagent.models.style import DEFAULT_WRITING_STYLE


class RaisingHistoryStore:
    def fetch_recent_documents(self, user_id: str, limit: int) -> list:
        raise OSError("history unavailable")


def test_missing_or_empty_history_gives_default_style() -> None:
    """Test default style for no store, empty history and a failing store."""
    assert StyleProfiler(None).profile("u1") == DEFAULT_WRITING_STYLE
    assert StyleProfiler(InMemoryHistoryStore()).profile("u1") == DEFAULT_WRITING_STYLE
    assert StyleProfiler(RaisingHistoryStore()).profile("u1") == DEFAULT_WRITING_STYLE


def test_formal_chinese_history() -> None:
    """Test profiling formal Chinese text with examples and mixed structure."""
    store = InMemoryHistoryStore()
    store.add(
        "u1",
        [
            heading(2, "火星研究"),
            paragraph("因此，我们需要研究火星。然而，火星环境恶劣。例如，温度很低。"),
            Block(type="bulletListItem", content=PlainText(text="温度")),
        ],
    )

    profile = StyleProfiler(store).profile("u1")

    assert profile.formality_level == 10
    assert profile.formality_label == "Formal"
    assert profile.uses_examples is True
    assert profile.preferred_structure == "structured"
    assert 0 < len(profile.common_phrases) <= 5


def test_casual_english_history() -> None:
    """Test profiling casual English paragraphs."""
    store = InMemoryHistoryStore()
    store.add("u1", [paragraph("hey wow this is awesome lol")])

    profile = StyleProfiler(store).profile("u1")

    assert profile.formality_level == 0
    assert profile.formality_label == "Casual"
    assert profile.preferred_structure == "paragraph-focused"
    assert profile.uses_examples is False


def test_formality_without_markers_is_neutral() -> None:
    """Test that text without formality markers scores 5."""
    assert detect_formality("The rover landed in the crater.") == 5


def test_common_phrases_fall_back_to_repeated_english_bigrams() -> None:
    """Test English bigram extraction only keeps repeated pairs."""
    phrases = extract_common_phrases("red planet facts. red planet missions. blue moon")

    assert phrases == ["red planet"]


def test_technical_term_density() -> None:
    """Test the alphanumeric character share."""
    assert technical_term_density("") == 0
    assert technical_term_density("火星") == 0
    assert technical_term_density("GPU") == 100


def test_in_memory_store_returns_newest_first() -> None:
    """Test ordering and limit of the in-memory store."""
    store = InMemoryHistoryStore()
    store.add("u1", [paragraph("first")], title="one")
    store.add("u1", [paragraph("second")], title="two")
    store.add("u2", [paragraph("other")], title="other")

    docs = store.fetch_recent_documents("u1", 1)
    assert [d.title for d in docs] == ["two"]
    assert [d.title for d in store.fetch_recent_documents("u1", 10)] == ["two", "one"]


def test_jsonl_store_round_trip(tmp_path: Path) -> None:
    """Test that the JSONL store persists documents per user."""
    store = JsonlHistoryStore(tmp_path / "history")
    store.add("user@example.com", [heading(2, "A"), paragraph("first body")], title="one")
    store.add("user@example.com", [paragraph("second body")], title="two")

    reopened = JsonlHistoryStore(tmp_path / "history")
    docs = reopened.fetch_recent_documents("user@example.com", 10)

    assert [d.title for d in docs] == ["two", "one"]
    assert docs[1].content[1].text == "first body"
    assert reopened.fetch_recent_documents("someone-else", 10) == []


def test_jsonl_store_skips_unreadable_lines(tmp_path: Path) -> None:
    """Test that a corrupt line does not hide the rest of the history."""
    store = JsonlHistoryStore(tmp_path)
    store.add("u1", [paragraph("kept")], title="kept")
    path = next(tmp_path.glob("*.jsonl"))
    with path.open("a", encoding="utf-8") as f:
        f.write('{"content": "not a list"}\n')

    docs = store.fetch_recent_documents("u1", 10)

    assert [d.title for d in docs] == ["kept"]
