"""Follow-up suggestions attached to a modification preview."""

from __future__ import annotations

from blogagent.models.document import DocumentStructure
from blogagent.models.perception import PerceptionResult
from blogagent.models.planning import PlanningResult
from blogagent.models.review import Suggestion
from blogagent.utils.text import count_words, is_chinese

LONG_PARAGRAPH_WORDS = 200
MAX_LONG_PARAGRAPH_SUGGESTIONS = 3


def generate_suggestions(
    perception: PerceptionResult,
    planning: PlanningResult,
    structure: DocumentStructure | None = None,
    *,
    instruction: str = "",
) -> list[Suggestion]:
    structure = structure or perception.document_structure
    chinese = is_chinese(instruction)
    suggestions: list[Suggestion] = []

    if planning.suggestions:
        first = planning.suggestions[0]
        suggestions.append(
            Suggestion(type="content", priority="medium", title="Content Enhancement", description=first, action=first)
        )

    analysis = perception.paragraph_analysis
    if analysis.needs_subheadings and analysis.target_paragraph_titles:
        title = analysis.target_paragraph_titles[0]
        suggestions.append(
            Suggestion(
                type="structure",
                priority="medium",
                title="添加小标题" if chinese else "Add subheadings",
                description=(
                    f"「{title}」内容较长，可以拆分为几个三级小标题"
                    if chinese
                    else f'"{title}" is long; consider splitting it with H3 subheadings'
                ),
                action=f"为「{title}」添加小标题" if chinese else f'Add subheadings to the "{title}" section',
            )
        )

    long_found = 0
    for section in structure.sections:
        for offset, block in enumerate(section.content):
            if block.type != "paragraph":
                continue
            n = count_words(block.text)
            if n <= LONG_PARAGRAPH_WORDS:
                continue
            index = section.start_index + offset + (1 if section.heading is not None else 0)
            suggestions.append(
                Suggestion(
                    type="style",
                    priority="high",
                    title="Long paragraph",
                    description=f"Paragraph {index + 1} is too long ({n} words). Consider breaking it into smaller paragraphs.",
                    action="Split this paragraph into 2-3 shorter paragraphs",
                )
            )
            long_found += 1
            if long_found >= MAX_LONG_PARAGRAPH_SUGGESTIONS:
                return suggestions

    return suggestions
