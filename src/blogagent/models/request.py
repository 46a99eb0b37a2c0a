"""Pipeline entry-point request and response payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogagent.models.blocks import Block, coerce_blocks
from blogagent.models.generation import Modification
from blogagent.models.review import DiffResult, QualityMetrics, Suggestion, ToolInsights


class AgentRequest(BaseModel):
    """What the surrounding application sends for one edit instruction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    post_id: str = Field(alias="postId")
    current_content: list[Block] = Field(default_factory=list, alias="currentContent")
    current_title: str = Field(default="", alias="currentTitle")
    user_id: str = Field(alias="userId")
    conversation_id: str | None = Field(default=None, alias="conversationId")

    @field_validator("current_content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> Any:
        # Unusable items become empty blocks; a non-array payload still fails validation.
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return coerce_blocks(value)
        return value


ReplyType = Literal["text", "modification_preview", "clarification", "suggestion"]


class Reply(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ReplyType
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class ModificationPreview(BaseModel):
    model_config = ConfigDict(frozen=True)

    modifications: list[Modification] = Field(default_factory=list)
    explanation: str
    quality_score: float = Field(ge=0.0, le=1.0)
    preview_blocks: list[dict[str, Any]] = Field(default_factory=list)
    diff: DiffResult = Field(default_factory=DiffResult)
    tool_insights: ToolInsights | None = None
    quality: QualityMetrics | None = None


class AgentResponse(BaseModel):
    """Either a modification preview, a clarification request, or an error reply."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    message_id: str
    reply: Reply
    modification_preview: ModificationPreview | None = None
    suggestions: list[Suggestion] = Field(default_factory=list)
    debug: dict[str, Any] | None = None

    @property
    def is_error(self) -> bool:
        return self.reply.type == "text" and self.modification_preview is None
