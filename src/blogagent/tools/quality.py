"""Completeness-based quality score.

Deliberately coarse: it measures how much of the planned word budget was produced, not
whether the content is correct.
"""

from __future__ import annotations

from blogagent.models.generation import GenerationResult
from blogagent.models.planning import PlanningResult
from blogagent.models.review import QualityMetrics
from blogagent.utils.text import count_words

COMPLETENESS_WEIGHT = 0.8
ISSUE_THRESHOLD = 7.0


def generated_word_count(generation: GenerationResult) -> int:
    if generation.changes_summary.words_added > 0:
        return generation.changes_summary.words_added
    return count_words(generation.generated_text())


def score_quality(generation: GenerationResult, planning: PlanningResult) -> QualityMetrics:
    words = generated_word_count(generation)
    target = planning.action_plan.estimated_words

    completeness = 10.0 if target <= 0 else min(10.0, words / target * 10)
    overall = completeness * COMPLETENESS_WEIGHT
    below = overall < ISSUE_THRESHOLD

    return QualityMetrics(
        completeness=round(completeness, 2),
        overall_score=round(overall, 2),
        issues=["Content may be too brief"] if below else [],
        suggestions_for_improvement=["Consider adding more details"] if below else [],
    )
