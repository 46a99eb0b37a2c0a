"""Web search and validation/scoring tools."""

from __future__ import annotations

from blogagent.tools.diff import apply_modifications, calculate_diff
from blogagent.tools.quality import score_quality
from blogagent.tools.readability import analyze_readability
from blogagent.tools.seo import check_seo
from blogagent.tools.suggestions import generate_suggestions

__all__ = [
    "analyze_readability",
    "apply_modifications",
    "calculate_diff",
    "check_seo",
    "generate_suggestions",
    "score_quality",
]
