"""Validation, scoring and diff models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class QualityMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    factual_accuracy: float = 8.0
    relevance: float = 8.0
    readability: float = 8.0
    coherence: float = 8.0
    completeness: float = 0.0
    overall_score: float = 0.0
    issues: list[str] = Field(default_factory=list)
    suggestions_for_improvement: list[str] = Field(default_factory=list)


class TitleCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: int
    optimal: bool
    suggestion: str | None = None


class HeadingCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_h2: bool
    count: int
    suggestion: str | None = None


class KeywordCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str | None = None
    density: float = 0.0
    suggestions: list[str] = Field(default_factory=list)


class SEOAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: TitleCheck
    headings: HeadingCheck
    keywords: KeywordCheck
    overall_score: int = Field(ge=0, le=10)


ReadabilityGrade = Literal["easy", "medium", "hard"]


class ReadabilityAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    average_sentence_length: int
    grade: ReadabilityGrade
    complex_word_percentage: int
    suggestions: list[str] = Field(default_factory=list)
    overall_score: int = Field(ge=1, le=10)


class ToolInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    seo: SEOAnalysis
    readability: ReadabilityAnalysis
    overall_score: int


class Change(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["add", "modify", "delete"]
    block_index: int
    old_content: str | None = None
    new_content: str | None = None


class DiffStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    blocks_added: int = 0
    blocks_modified: int = 0
    blocks_deleted: int = 0
    words_added: int = 0
    words_deleted: int = 0


class DiffResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    changes: list[Change] = Field(default_factory=list)
    stats: DiffStats = Field(default_factory=DiffStats)


SuggestionType = Literal["structure", "content", "style", "seo"]
SuggestionPriority = Literal["high", "medium", "low"]


class Suggestion(BaseModel):
    """A follow-up the user can trigger with one click."""

    model_config = ConfigDict(frozen=True)

    type: SuggestionType
    priority: SuggestionPriority
    title: str
    description: str
    action: str
