from __future__ import annotations

from blogagent.prompts.generator import GENERATOR_SYSTEM_PROMPT, PLAIN_TEXT_SYSTEM_PROMPT_EN, PLAIN_TEXT_SYSTEM_PROMPT_ZH
from blogagent.prompts.planner import FALLBACK_CLARIFICATION_QUESTION, PLANNER_SYSTEM_PROMPT
from blogagent.prompts.retrieval import NO_RESULTS_SUMMARY, SEARCH_UNAVAILABLE_SUMMARY, SUMMARIZER_SYSTEM_PROMPT

__all__ = [
    "PLANNER_SYSTEM_PROMPT",
    "FALLBACK_CLARIFICATION_QUESTION",
    "GENERATOR_SYSTEM_PROMPT",
    "PLAIN_TEXT_SYSTEM_PROMPT_EN",
    "PLAIN_TEXT_SYSTEM_PROMPT_ZH",
    "SUMMARIZER_SYSTEM_PROMPT",
    "NO_RESULTS_SUMMARY",
    "SEARCH_UNAVAILABLE_SUMMARY",
]
