"""Perception stage models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from blogagent.models.document import DocumentStructure


IntentType = Literal[
    "modify_content",
    "add_content",
    "delete_content",
    "improve_quality",
    "factcheck",
    "ask_question",
]

ScopeType = Literal["single_paragraph", "multiple_paragraphs", "full_article", "unknown"]

EntityActionType = Literal["expand", "rewrite", "correct"]


class ExtractedEntities(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_section: str | None = None
    keywords: list[str] = Field(default_factory=list)
    action_type: EntityActionType | None = None


class ParagraphAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    scope: ScopeType = "unknown"
    target_paragraph_titles: list[str] = Field(default_factory=list)
    target_paragraph_indices: list[int] = Field(default_factory=list)
    needs_subheadings: bool = False


class PerceptionResult(BaseModel):
    """What the user wants and where in the document."""

    model_config = ConfigDict(frozen=True)

    intent: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    document_structure: DocumentStructure
    extracted_entities: ExtractedEntities = Field(default_factory=ExtractedEntities)
    paragraph_analysis: ParagraphAnalysis = Field(default_factory=ParagraphAnalysis)
