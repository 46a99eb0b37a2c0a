"""Planning stage models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


ActionType = Literal["expand", "rewrite", "insert", "delete", "correct"]


def coerce_block_range(v: object) -> tuple[int, int] | None:
    """Accept ``[start, end]`` pairs from model output; anything else becomes ``None``."""

    if isinstance(v, (list, tuple)) and len(v) == 2:
        try:
            return int(v[0]), int(v[1])
        except (TypeError, ValueError):
            return None
    return None


def _optional_int(v: object) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


class TargetLocation(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    section_index: int | None = None
    section_title: str | None = None
    paragraph_index: int | None = None
    block_range: tuple[int, int] | None = None

    @field_validator("block_range", mode="before")
    @classmethod
    def _range(cls, v: object) -> tuple[int, int] | None:
        return coerce_block_range(v)

    @field_validator("section_index", "paragraph_index", mode="before")
    @classmethod
    def _index(cls, v: object) -> int | None:
        return _optional_int(v)


class ActionPlan(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: ActionType = "expand"
    estimated_words: int = Field(default=200, ge=0)
    estimated_reading_time_increase: float = Field(default=1.0, ge=0.0)


class PlanningResult(BaseModel):
    """A concrete action: location, type, word budget and search need."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    thought_process: str = "Planning generated"
    target_location: TargetLocation = Field(default_factory=TargetLocation)
    action_plan: ActionPlan = Field(default_factory=ActionPlan)
    needs_search: bool = False
    search_queries: list[str] = Field(default_factory=list)
    clarification_needed: bool = False
    clarification_questions: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("search_queries", "clarification_questions", "suggestions", mode="before")
    @classmethod
    def _string_list(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, list):
            return [str(x).strip() for x in v if isinstance(x, (str, int, float)) and str(x).strip()]
        return v
