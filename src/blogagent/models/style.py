"""Writing style profile model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WritingStyleProfile(BaseModel):
    """Per-user writing fingerprint used to steer generation tone."""

    model_config = ConfigDict(frozen=True)

    average_sentence_length: int = 25
    formality_level: int = Field(default=5, ge=0, le=10)
    preferred_structure: str = "paragraph-focused"
    common_phrases: list[str] = Field(default_factory=list)
    technical_term_density: int = 10
    uses_examples: bool = False

    @property
    def formality_label(self) -> str:
        if self.formality_level > 7:
            return "Formal"
        if self.formality_level > 4:
            return "Neutral"
        return "Casual"


DEFAULT_WRITING_STYLE = WritingStyleProfile()
