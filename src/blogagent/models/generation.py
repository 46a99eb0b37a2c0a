"""Generation stage models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogagent.models.planning import coerce_block_range


ModificationType = Literal[
    "append",
    "insert",
    "replace",
    "replace_paragraph",
    "delete",
    "update_title",
    "add_section",
]

GenerationTier = Literal["structured", "plain_text", "safety_net"]


class ModificationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    word_count: int | None = None
    sources_used: list[int | str] = Field(default_factory=list)


class Modification(BaseModel):
    """One atomic, typed edit returned to the caller for preview/application."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: ModificationType
    content: str | None = None
    target: str | None = None
    title: str | None = None
    position: int | None = None
    paragraph_index: int | None = None
    block_range: tuple[int, int] | None = None
    metadata: ModificationMetadata = Field(default_factory=ModificationMetadata)

    @field_validator("block_range", mode="before")
    @classmethod
    def _range(cls, v: object) -> tuple[int, int] | None:
        return coerce_block_range(v)


class ChangesSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    words_added: int = 0
    reading_time_increased: float = 0.0


class GenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    modifications: list[Modification] = Field(default_factory=list)
    explanation: str = "Content generated"
    changes_summary: ChangesSummary = Field(default_factory=ChangesSummary)
    tier: GenerationTier = "structured"

    def generated_text(self) -> str:
        return "\n\n".join(m.content for m in self.modifications if m.content)
