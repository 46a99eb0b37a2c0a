"""Tests for the planning stage."""

from __future__ import annotations

import asyncio
import json

import pytest
from fakes import ScriptedLLM, failing_llm

from blogagent.agents.perception import PerceptionAgent
from blogagent.agents.planner import PlanningAgent
from blogagent.errors import PlanningParseError
from blogagent.prompts import FALLBACK_CLARIFICATION_QUESTION, PLANNER_SYSTEM_PROMPT


def _perceive(instruction: str, blocks):
    return PerceptionAgent().perceive(instruction, blocks)


def test_plan_parsed_from_model_json(mars_blocks) -> None:
    """Test that a fenced JSON plan is parsed and validated."""
    plan_json = {
        "thought_process": "Rewrite the history section with more dates.",
        "target_location": {"section_index": 1, "section_title": "History", "block_range": [1, 2]},
        "action_plan": {"type": "rewrite", "estimated_words": 250, "estimated_reading_time_increase": 1.2},
        "needs_search": True,
        "search_queries": ["mars probe history"],
        "clarification_needed": False,
        "suggestions": ["Add a timeline"],
    }
    llm = ScriptedLLM(f"Sure!\n```json\n{json.dumps(plan_json)}\n```")
    instruction = "Rewrite the History section"

    plan = PlanningAgent(llm).plan_sync(_perceive(instruction, mars_blocks), instruction)

    assert plan.action_plan.type == "rewrite"
    assert plan.action_plan.estimated_words == 250
    assert plan.target_location.section_title == "History"
    assert plan.target_location.block_range == (1, 2)
    assert plan.needs_search is True
    assert plan.search_queries == ["mars probe history"]
    assert plan.suggestions == ["Add a timeline"]

    system, user = llm.calls[0]
    assert system == PLANNER_SYSTEM_PROMPT
    assert "[1] History" in user
    assert instruction in user


def test_plan_async_matches_sync(mars_blocks) -> None:
    """Test the async entry point."""
    reply = '{"action_plan": {"type": "expand"}, "target_location": null}'
    instruction = "Expand the History section"
    perception = _perceive(instruction, mars_blocks)

    plan = asyncio.run(PlanningAgent(ScriptedLLM(reply)).plan(perception, instruction))

    assert plan.action_plan.type == "expand"
    assert plan.target_location.section_index is None


@pytest.mark.parametrize(
    "llm",
    [
        failing_llm,
        ScriptedLLM(""),
        ScriptedLLM("I am not sure what to do here."),
        ScriptedLLM('{"action_plan": {"type": "explode"}}'),
    ],
    ids=["llm-error", "empty", "garbage", "invalid-action"],
)
def test_fallback_plan_on_unusable_response(mars_blocks, llm) -> None:
    """Test that every planning failure mode yields the rule-based plan."""
    instruction = "Expand the History section"

    plan = PlanningAgent(llm).plan_sync(_perceive(instruction, mars_blocks), instruction)

    assert plan.action_plan.type == "expand"
    assert plan.action_plan.estimated_words == 300
    assert plan.action_plan.estimated_reading_time_increase == pytest.approx(1.5)
    assert plan.target_location.section_index == 1
    assert plan.target_location.section_title == "History"
    assert plan.needs_search is False
    assert plan.clarification_needed is False
    assert "Fallback plan activated" in plan.thought_process


def test_fallback_insert_needs_search_without_clarification(mars_blocks) -> None:
    """Test that new content is searched for and needs no anchor."""
    instruction = "Add a paragraph about the natural conditions of Mars"

    plan = PlanningAgent(failing_llm).plan_sync(_perceive(instruction, mars_blocks), instruction)

    assert plan.action_plan.type == "insert"
    assert plan.needs_search is True
    assert plan.search_queries == [instruction]
    assert plan.clarification_needed is False


def test_fallback_delete_and_rewrite(mars_blocks) -> None:
    """Test delete and rewrite action selection."""
    planner = PlanningAgent(failing_llm)

    delete = planner.plan_sync(_perceive("Delete the Future section", mars_blocks), "Delete the Future section")
    assert delete.action_plan.type == "delete"
    assert delete.target_location.section_index == 2

    rewrite = planner.plan_sync(_perceive("Rewrite the History section", mars_blocks), "Rewrite the History section")
    assert rewrite.action_plan.type == "rewrite"
    assert rewrite.needs_search is False


def test_fallback_search_cue(mars_blocks) -> None:
    """Test that recency words request a search."""
    instruction = "Expand the Future section with the latest plans"

    plan = PlanningAgent(failing_llm).plan_sync(_perceive(instruction, mars_blocks), instruction)

    assert plan.action_plan.type == "expand"
    assert plan.needs_search is True


def test_fallback_asks_for_clarification_without_target(mars_blocks) -> None:
    """Test the clarification question when nothing can be located."""
    plan = PlanningAgent(failing_llm).plan_sync(_perceive("Make it shine", mars_blocks), "Make it shine")

    assert plan.clarification_needed is True
    assert plan.clarification_questions == [FALLBACK_CLARIFICATION_QUESTION]


def test_fallback_full_article_needs_no_clarification(mars_blocks) -> None:
    """Test whole-article edits proceed without a section anchor."""
    instruction = "Improve the whole article"

    plan = PlanningAgent(failing_llm).plan_sync(_perceive(instruction, mars_blocks), instruction)

    assert plan.target_location.section_index is None
    assert plan.clarification_needed is False


def test_parse_response_coerces_lists() -> None:
    """Test lenient list fields in model output."""
    plan = PlanningAgent.parse_response(
        '{"search_queries": "mars climate", "clarification_questions": null, "suggestions": ["a", "", 3]}'
    )

    assert plan.search_queries == ["mars climate"]
    assert plan.clarification_questions == []
    assert plan.suggestions == ["a", "3"]


def test_parse_response_rejects_non_json() -> None:
    """Test that unparseable output raises PlanningParseError."""
    with pytest.raises(PlanningParseError):
        PlanningAgent.parse_response("plan: expand it")
