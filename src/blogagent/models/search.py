"""Search-related models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """A single web search result item."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str
    content: str = ""
    score: float | None = None


class SourceRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class SearchContext(BaseModel):
    """Per-request retrieval output. Never cached."""

    model_config = ConfigDict(frozen=True)

    raw_results: list[SearchResult] = Field(default_factory=list)
    summary: str = ""
    sources: list[SourceRef] = Field(default_factory=list)
