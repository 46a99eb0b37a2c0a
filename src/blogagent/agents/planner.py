"""Planning stage.

Turns a perception result into a concrete :class:`PlanningResult`: where to edit, which
action, how many words, and whether external search is needed. One LLM call with a strict
JSON contract; any failure (LLM error, empty output, unparseable or invalid JSON) switches to a
deterministic rule-based plan so planning itself never fails.
"""

from __future__ import annotations

from pydantic import ValidationError

from blogagent.agents.base import BaseAgent
from blogagent.errors import LLMError, PlanningParseError
from blogagent.llm.client import LLMCaller
from blogagent.logging import get_logger
from blogagent.models.perception import PerceptionResult
from blogagent.models.planning import ActionPlan, ActionType, PlanningResult, TargetLocation
from blogagent.prompts import FALLBACK_CLARIFICATION_QUESTION, PLANNER_SYSTEM_PROMPT
from blogagent.utils.json_extract import extract_json_object

logger = get_logger(__name__)

SEARCH_CUES = ("search", "latest", "recent", "current", "最新", "搜索", "近期")
REWRITE_CUES = ("rewrite", "重写", "改写")

FALLBACK_ESTIMATED_WORDS = 300
FALLBACK_READING_TIME_INCREASE = 1.5


class PlanningAgent(BaseAgent):
    """LLM planner with a rule-based fallback."""

    def __init__(self, llm: LLMCaller) -> None:
        super().__init__(llm)

    def plan_sync(self, perception: PerceptionResult, instruction: str) -> PlanningResult:
        """Run planning synchronously."""

        prompt = self.build_user_prompt(perception, instruction)
        try:
            raw = self.call_llm(PLANNER_SYSTEM_PROMPT, prompt)
        except LLMError as e:
            logger.warning("Planning LLM call failed, using fallback plan: %s", e)
            return self.fallback_plan(perception, instruction)
        return self._parse_or_fallback(raw, perception, instruction)

    async def plan(self, perception: PerceptionResult, instruction: str) -> PlanningResult:
        """Async variant of :meth:`plan_sync`; the blocking LLM call runs in a thread."""

        prompt = self.build_user_prompt(perception, instruction)
        try:
            raw = await self.call_llm_async(PLANNER_SYSTEM_PROMPT, prompt)
        except LLMError as e:
            logger.warning("Planning LLM call failed, using fallback plan: %s", e)
            return self.fallback_plan(perception, instruction)
        return self._parse_or_fallback(raw, perception, instruction)

    def _parse_or_fallback(self, raw: str, perception: PerceptionResult, instruction: str) -> PlanningResult:
        if not raw or not raw.strip():
            logger.warning("Empty response from LLM, falling back to rule-based planning")
            return self.fallback_plan(perception, instruction)
        try:
            return self.parse_response(raw)
        except PlanningParseError as e:
            logger.warning("Planning response unusable, falling back to rule-based planning: %s", e)
            return self.fallback_plan(perception, instruction)

    @staticmethod
    def build_user_prompt(perception: PerceptionResult, instruction: str) -> str:
        structure = perception.document_structure
        analysis = perception.paragraph_analysis
        entities = perception.extracted_entities

        lines: list[str] = ["**Document Structure:**", "", "Outline:"]
        outline_lines: list[str] = []
        for node in structure.outline:
            if node.level > 2:
                continue
            outline_lines.append(f"{'  ' * (node.level - 1)}- {node.title} (H{node.level})")
            outline_lines.extend(f"  - {c.title} (H2)" for c in node.children if c.level == 2)
        lines.extend(outline_lines or ["<no headings>"])
        lines.append("")

        lines.append("H2 Paragraphs:")
        h2 = structure.level2_sections()
        if not h2:
            lines.append("<none>")
        for section in h2:
            index = structure.sections.index(section)
            has_h3 = "has" if section.has_subheading(3) else "no"
            lines.append(f"[{index}] {section.title} ({section.word_count} words, {has_h3} H3 subheadings)")
        lines.append("")

        stats = structure.stats
        lines.extend(
            [
                "**Document Stats:**",
                f"- Total words: {stats.total_words}",
                f"- Reading time: {stats.reading_time_minutes} minutes",
                f"- Number of H2 paragraphs: {len(h2)}",
                "",
                f'**User Instruction:** "{instruction}"',
                "",
                f"**Detected Intent:** {perception.intent}",
                f"**Detected Scope:** {analysis.scope}",
            ]
        )
        if analysis.target_paragraph_titles:
            lines.append(f"**Target Paragraphs:** {', '.join(analysis.target_paragraph_titles)}")
        if analysis.target_paragraph_indices:
            lines.append(f"**Target H2 Positions:** {', '.join(str(i + 1) for i in analysis.target_paragraph_indices)}")
        if entities.action_type:
            lines.append(f"**Action Type:** {entities.action_type}")
        lines.append("")
        lines.append("Please generate a detailed execution plan in JSON format.")
        return "\n".join(lines)

    @staticmethod
    def parse_response(raw: str) -> PlanningResult:
        """Extract and validate a plan.

        Raises:
            PlanningParseError: No JSON object could be recovered, or it failed validation.
        """

        data = extract_json_object(raw)
        if data is None:
            raise PlanningParseError("no JSON object found in planning response")
        # Explicit nulls mean "use the default" for the nested objects.
        for key in ("target_location", "action_plan"):
            if data.get(key) is None:
                data.pop(key, None)
        try:
            return PlanningResult.model_validate(data)
        except ValidationError as e:
            raise PlanningParseError(f"invalid planning result: {e.error_count()} errors") from e

    @staticmethod
    def fallback_plan(perception: PerceptionResult, instruction: str) -> PlanningResult:
        structure = perception.document_structure
        analysis = perception.paragraph_analysis
        msg = instruction.lower()

        section_index: int | None = None
        section_title: str | None = None
        for title in analysis.target_paragraph_titles:
            section = structure.find_section(title, level=2)
            if section is not None:
                section_index = structure.sections.index(section)
                section_title = title
                break

        action: ActionType
        if perception.intent == "delete_content":
            action = "delete"
        elif any(cue in msg for cue in REWRITE_CUES):
            action = "rewrite"
        elif perception.extracted_entities.action_type == "expand":
            action = "expand"
        elif perception.intent == "add_content":
            action = "insert"
        else:
            action = "expand"

        needs_search = action == "insert" or any(cue in msg for cue in SEARCH_CUES)
        # New content needs no anchor; everything else does unless the whole article is in scope.
        needs_clarification = action != "insert" and section_index is None and analysis.scope != "full_article"

        return PlanningResult(
            thought_process=f'Based on the user\'s request "{instruction}", I will {action} content. Fallback plan activated.',
            target_location=TargetLocation(section_index=section_index, section_title=section_title),
            action_plan=ActionPlan(
                type=action,
                estimated_words=FALLBACK_ESTIMATED_WORDS,
                estimated_reading_time_increase=FALLBACK_READING_TIME_INCREASE,
            ),
            needs_search=needs_search,
            search_queries=[instruction] if needs_search else [],
            clarification_needed=needs_clarification,
            clarification_questions=[FALLBACK_CLARIFICATION_QUESTION] if needs_clarification else [],
        )
