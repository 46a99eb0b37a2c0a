"""Generation stage.

内容生成采用三级策略，按顺序尝试：

1. ``structured``: 要求模型输出 JSON（modifications / explanation / changes_summary）。
2. ``plain_text``: 直接要求 Markdown 正文，结果过短时用最简提示词重试一次。
3. ``safety_net``: 不调用模型；有检索资料就整理资料，否则返回可配置的致歉模板。

Each strategy is a plain function ``GenerationAttempt -> GenerationResult`` that raises
:class:`GenerationTierFailure` to hand over to the next one. The safety net cannot fail, so
:meth:`ContentGenerator.generate` always returns a result with at least one modification.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from pydantic import ValidationError

from blogagent.agents.base import BaseAgent
from blogagent.agents.retrieval import FALLBACK_SUMMARY_RESULTS, fallback_summary
from blogagent.analysis.document_analyzer import analyze_document
from blogagent.config import DEFAULT_SAFETY_NET_TEMPLATE
from blogagent.errors import GenerationTierFailure
from blogagent.llm.client import LLMCaller
from blogagent.logging import get_logger
from blogagent.models.blocks import Block, coerce_blocks
from blogagent.models.document import DocumentStructure, Section
from blogagent.models.generation import ChangesSummary, GenerationResult, GenerationTier, Modification, ModificationType
from blogagent.models.planning import PlanningResult
from blogagent.models.search import SearchContext
from blogagent.models.style import WritingStyleProfile
from blogagent.prompts import NO_RESULTS_SUMMARY, SEARCH_UNAVAILABLE_SUMMARY
from blogagent.prompts.generator import (
    GENERATOR_SYSTEM_PROMPT,
    LANGUAGE_RULE_EN,
    LANGUAGE_RULE_ZH,
    MINIMAL_PROMPT_EN,
    MINIMAL_PROMPT_ZH,
    PLAIN_TEXT_SYSTEM_PROMPT_EN,
    PLAIN_TEXT_SYSTEM_PROMPT_ZH,
    STYLE_GUIDANCE_TEMPLATE,
)
from blogagent.utils.json_extract import extract_json_object, strip_code_fences
from blogagent.utils.markdown import starts_with_heading
from blogagent.utils.text import blocks_to_markdown, count_words, is_chinese

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200

_ABOUT_PATTERNS = (
    re.compile(r"关于(.+?)的"),
    re.compile(r"\babout\s+(.+?)(?:[.,;!?。，！？]|$)", re.IGNORECASE),
    re.compile(r"\bregarding\s+(.+?)(?:[.,;!?。，！？]|$)", re.IGNORECASE),
)
_CONNECTOR_TERMS_ZH = ("请", "帮我", "添加", "增加", "扩充", "补充", "写", "一段", "一个", "段落", "章节", "部分", "内容", "关于")
_CONNECTOR_TERMS_EN = (
    "please", "add", "append", "insert", "expand", "write", "create", "a", "an", "the", "new",
    "some", "more", "paragraph", "section", "content", "to", "on", "of", "for", "about", "into",
)
_LEADING_ARTICLE_RE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
_TRAILING_PUNCT_RE = re.compile(r"[\s.,;:!?。，；：！？\"'「」]+$")


@dataclass(frozen=True)
class GenerationAttempt:
    """Everything a strategy needs for one request."""

    planning: PlanningResult
    search_context: SearchContext | None
    blocks: list[Block]
    structure: DocumentStructure
    instruction: str
    style: WritingStyleProfile | None
    chinese: bool

    @property
    def target_section(self) -> Section | None:
        loc = self.planning.target_location
        sections = self.structure.sections
        if loc.section_title:
            for s in sections:
                if s.title == loc.section_title:
                    return s
        if loc.section_index is not None and 0 <= loc.section_index < len(sections):
            return sections[loc.section_index]
        return None

    @property
    def target_section_index(self) -> int | None:
        section = self.target_section
        return self.structure.sections.index(section) if section is not None else None

    def target_text(self) -> str:
        block_range = self.planning.target_location.block_range
        if block_range is not None:
            start, end = block_range
            return blocks_to_markdown(self.blocks[max(0, start) : end + 1]) or "N/A"
        section = self.target_section
        if section is not None:
            text = blocks_to_markdown(self.blocks[section.start_index : section.end_index])
            return text or f"Section: {section.title}"
        return "N/A"


Strategy = Callable[[GenerationAttempt], GenerationResult]


def changes_for(content: str) -> ChangesSummary:
    words = count_words(content)
    return ChangesSummary(words_added=words, reading_time_increased=round(words / WORDS_PER_MINUTE, 1))


def synthesize_title(instruction: str, fallback: str) -> str:
    """Short section title from an instruction ("...about X" -> "X")."""

    text = instruction.strip()
    for pattern in _ABOUT_PATTERNS:
        m = pattern.search(text)
        if m and m.group(1).strip():
            return _tidy_title(m.group(1))

    stripped = text
    for term in _CONNECTOR_TERMS_ZH:
        stripped = stripped.replace(term, " ")
    kept = [w for w in stripped.split() if w.lower() not in _CONNECTOR_TERMS_EN]
    candidate = " ".join(kept)
    return _tidy_title(candidate) or fallback


def _tidy_title(raw: str) -> str:
    title = _LEADING_ARTICLE_RE.sub("", raw.strip())
    title = _TRAILING_PUNCT_RE.sub("", title).strip()
    if title and title[0].isascii():
        title = title[0].upper() + title[1:]
    return title


def clean_plain_text(raw: str) -> str:
    """Strip code fences and unwrap a JSON payload if the model produced one anyway."""

    text = strip_code_fences(raw or "")
    if text.startswith("{"):
        data = extract_json_object(text)
        if data is not None:
            content = data.get("content")
            if not isinstance(content, str):
                mods = data.get("modifications")
                if isinstance(mods, list) and mods and isinstance(mods[0], dict):
                    content = mods[0].get("content")
            if isinstance(content, str):
                text = content.strip()
    return text.strip()


def build_style_guidance(style: WritingStyleProfile | None) -> str:
    if style is None:
        return ""
    extra: list[str] = []
    if style.common_phrases:
        extra.append(f"- Common Phrases: {', '.join(style.common_phrases[:3])}")
    if style.uses_examples:
        extra.append("- Frequently uses examples and illustrations")
    return STYLE_GUIDANCE_TEMPLATE.format(
        average_sentence_length=style.average_sentence_length,
        formality_level=style.formality_level,
        formality_label=style.formality_label,
        preferred_structure=style.preferred_structure,
        extra_lines="\n".join(extra) + ("\n" if extra else ""),
    )


def _search_block(ctx: SearchContext | None) -> list[str]:
    if ctx is None:
        return []
    lines = ["", "**Reference Materials from Search:**", '"""', ctx.summary, ""]
    if ctx.sources:
        lines.append("Sources:")
        lines.extend(f"[{i}] {s.title} - {s.url}" for i, s in enumerate(ctx.sources, start=1))
    lines.append('"""')
    return lines


class ContentGenerator(BaseAgent):
    """Three-tier content generation."""

    def __init__(
        self,
        llm: LLMCaller,
        *,
        min_content_chars: int = 20,
        min_summary_chars: int = 50,
        safety_net_template: str = DEFAULT_SAFETY_NET_TEMPLATE,
    ) -> None:
        super().__init__(llm)
        self.min_content_chars = min_content_chars
        self.min_summary_chars = min_summary_chars
        self.safety_net_template = safety_net_template
        self.strategies: list[tuple[GenerationTier, Strategy]] = [
            ("structured", self.structured),
            ("plain_text", self.plain_text),
        ]

    async def generate(
        self,
        planning: PlanningResult,
        search_context: SearchContext | None,
        blocks: Sequence[Block | dict[str, Any]],
        instruction: str,
        style: WritingStyleProfile | None = None,
    ) -> GenerationResult:
        """Async entry point; tiers run in a worker thread since every LLM call blocks."""

        return await asyncio.to_thread(self.generate_sync, planning, search_context, blocks, instruction, style)

    def generate_sync(
        self,
        planning: PlanningResult,
        search_context: SearchContext | None,
        blocks: Sequence[Block | dict[str, Any]],
        instruction: str,
        style: WritingStyleProfile | None = None,
    ) -> GenerationResult:
        normalized = coerce_blocks(blocks)
        attempt = GenerationAttempt(
            planning=planning,
            search_context=search_context,
            blocks=normalized,
            structure=analyze_document(normalized),
            instruction=instruction,
            style=style,
            chinese=is_chinese(instruction),
        )

        for tier, strategy in self.strategies:
            try:
                result = strategy(attempt)
            except GenerationTierFailure as e:
                logger.warning("Generation tier %s failed: %s", e.tier, e.reason)
                continue
            logger.info("Generation succeeded via %s tier (%d modifications)", tier, len(result.modifications))
            return result

        return self.safety_net(attempt)

    # Tier 1

    def structured(self, attempt: GenerationAttempt) -> GenerationResult:
        system = GENERATOR_SYSTEM_PROMPT.format(
            style_guidance=build_style_guidance(attempt.style),
            language_rule=LANGUAGE_RULE_ZH if attempt.chinese else LANGUAGE_RULE_EN,
        )
        raw = self._call("structured", system, self.build_structured_prompt(attempt))

        data = extract_json_object(raw)
        if data is None:
            raise GenerationTierFailure("structured", "no JSON object in response")

        raw_mods = data.get("modifications")
        if not isinstance(raw_mods, list):
            raise GenerationTierFailure("structured", "missing modifications list")

        modifications: list[Modification] = []
        for item in raw_mods:
            if not isinstance(item, dict):
                continue
            try:
                modifications.append(Modification.model_validate(item))
            except ValidationError as e:
                logger.debug("Dropping invalid modification from model output: %s", e)

        produces_content = attempt.planning.action_plan.type != "delete"
        if not modifications:
            raise GenerationTierFailure("structured", "no valid modifications")
        if produces_content and not any((m.content or "").strip() for m in modifications):
            raise GenerationTierFailure("structured", "modifications carry no content")

        modifications = [self._anchor(m, attempt) for m in modifications]
        content = "\n\n".join(m.content for m in modifications if m.content)

        summary = changes_for(content)
        raw_summary = data.get("changes_summary")
        if isinstance(raw_summary, dict):
            try:
                given = ChangesSummary.model_validate(raw_summary)
            except ValidationError:
                given = None
            if given is not None and given.words_added > 0:
                summary = given

        explanation = data.get("explanation")
        return GenerationResult(
            modifications=modifications,
            explanation=explanation if isinstance(explanation, str) and explanation.strip() else "Content generated",
            changes_summary=summary,
            tier="structured",
        )

    @staticmethod
    def build_structured_prompt(attempt: GenerationAttempt) -> str:
        planning = attempt.planning
        lines = [
            f"**Task:** {planning.action_plan.type}",
            "",
            "**Target Paragraph Original Content:**",
            '"""',
            attempt.target_text(),
            '"""',
            "",
            f'**User Requirement:** "{attempt.instruction}"',
        ]
        if planning.target_location.section_title:
            lines.append(f"**Target Section:** {planning.target_location.section_title}")
        if planning.suggestions:
            lines.extend(["", "**Planning Suggestions:**", *planning.suggestions])
        lines.extend(_search_block(attempt.search_context))
        lines.extend(
            [
                "",
                f"**Target word count:** ~{planning.action_plan.estimated_words} words",
            ]
        )
        if attempt.style is not None:
            lines.append(
                f"**Style Matching:** avg sentence length {attempt.style.average_sentence_length} chars, "
                f"formality {attempt.style.formality_level}/10"
            )
        lines.extend(["", "Please generate the content in JSON format as specified in the system prompt."])
        return "\n".join(lines)

    # Tier 2

    def plain_text(self, attempt: GenerationAttempt) -> GenerationResult:
        system = PLAIN_TEXT_SYSTEM_PROMPT_ZH if attempt.chinese else PLAIN_TEXT_SYSTEM_PROMPT_EN
        content = clean_plain_text(self._call("plain_text", system, self.build_plain_prompt(attempt)))

        if len(content) < self.min_content_chars:
            logger.info("Plain-text output too short (%d chars), retrying with minimal prompt", len(content))
            template = MINIMAL_PROMPT_ZH if attempt.chinese else MINIMAL_PROMPT_EN
            minimal = template.format(words=attempt.planning.action_plan.estimated_words, instruction=attempt.instruction)
            content = clean_plain_text(self._call("plain_text", system, minimal))

        if len(content) < self.min_content_chars:
            raise GenerationTierFailure("plain_text", f"content too short ({len(content)} chars)")

        title = self._title(attempt)
        if not starts_with_heading(content):
            content = f"## {title}\n\n{content}"

        return GenerationResult(
            modifications=[self._modification(attempt, content)],
            explanation=(f"已为「{title}」生成内容" if attempt.chinese else f'Generated content for "{title}"'),
            changes_summary=changes_for(content),
            tier="plain_text",
        )

    @staticmethod
    def build_plain_prompt(attempt: GenerationAttempt) -> str:
        planning = attempt.planning
        lines = [
            f'User request: "{attempt.instruction}"',
            f"Action: {planning.action_plan.type}",
            f"Target length: about {planning.action_plan.estimated_words} words",
            "",
            "Existing content of the target section:",
            '"""',
            attempt.target_text(),
            '"""',
        ]
        lines.extend(_search_block(attempt.search_context))
        return "\n".join(lines)

    # Tier 3

    def safety_net(self, attempt: GenerationAttempt) -> GenerationResult:
        """Always succeeds. Uses search material when there is any, else the apology template."""

        title = self._title(attempt)
        material = self._search_material(attempt.search_context)

        if material:
            heading = "参考来源：" if attempt.chinese else "Sources:"
            lines = [f"## {title}", "", material]
            sources = attempt.search_context.sources if attempt.search_context else []
            if sources:
                lines.extend(["", heading])
                lines.extend(f"- [{i}] {s.title} - {s.url}" for i, s in enumerate(sources, start=1))
            content = "\n".join(lines)
            explanation = (
                "模型暂时不可用，已根据检索资料整理内容" if attempt.chinese else "The model was unavailable; content was compiled from search results"
            )
        else:
            content = self.safety_net_template.replace("{section}", title)
            explanation = "模型暂时不可用" if attempt.chinese else "The model was unavailable; a placeholder was inserted"

        logger.warning("Generation fell back to safety net (search material: %s)", bool(material))
        return GenerationResult(
            modifications=[self._modification(attempt, content, allow_replace=False)],
            explanation=explanation,
            changes_summary=changes_for(content),
            tier="safety_net",
        )

    def _search_material(self, ctx: SearchContext | None) -> str:
        if ctx is None:
            return ""
        summary = ctx.summary.strip()
        if len(summary) >= self.min_summary_chars and summary not in (SEARCH_UNAVAILABLE_SUMMARY, NO_RESULTS_SUMMARY):
            return summary
        if ctx.raw_results:
            snippets = fallback_summary(ctx.raw_results, min_chars=self.min_summary_chars)
            if snippets:
                return snippets
            # Snippets too short to quote; cite the results themselves.
            return "\n".join(f"- {r.title}: {r.url}" for r in ctx.raw_results[:FALLBACK_SUMMARY_RESULTS])
        return ""

    # Helpers

    def _call(self, tier: GenerationTier, system: str, user: str) -> str:
        try:
            return self.call_llm(system, user)
        except Exception as e:
            # Any collaborator failure only ends this tier.
            raise GenerationTierFailure(tier, f"LLM call failed: {e}") from e

    @staticmethod
    def _title(attempt: GenerationAttempt) -> str:
        fallback = attempt.planning.target_location.section_title or ("新段落" if attempt.chinese else "New Section")
        return synthesize_title(attempt.instruction, fallback)

    @staticmethod
    def _modification(attempt: GenerationAttempt, content: str, *, allow_replace: bool = True) -> Modification:
        section = attempt.target_section
        mod_type: ModificationType = "append"
        if allow_replace and section is not None and attempt.planning.action_plan.type in ("rewrite", "correct"):
            mod_type = "replace_paragraph"
        return Modification(
            type=mod_type,
            content=content,
            target=section.title if section is not None else None,
            paragraph_index=attempt.target_section_index,
        )

    @staticmethod
    def _anchor(mod: Modification, attempt: GenerationAttempt) -> Modification:
        """Fill in the planned target for modifications the model left unanchored."""

        if mod.target is not None or mod.paragraph_index is not None or mod.block_range is not None:
            return mod
        section = attempt.target_section
        if section is None or mod.type not in ("append", "replace", "replace_paragraph", "delete"):
            return mod
        return mod.model_copy(update={"target": section.title, "paragraph_index": attempt.target_section_index})
