"""Pydantic models used across the project."""

from __future__ import annotations

from blogagent.models.blocks import Block, BlockContent, Empty, InlineRun, PlainText, Runs
from blogagent.models.document import DocumentStats, DocumentStructure, OutlineNode, Section
from blogagent.models.generation import GenerationResult, Modification
from blogagent.models.perception import PerceptionResult
from blogagent.models.planning import PlanningResult
from blogagent.models.request import AgentRequest, AgentResponse
from blogagent.models.search import SearchContext, SearchResult
from blogagent.models.style import WritingStyleProfile

__all__ = [
    "AgentRequest",
    "AgentResponse",
    "Block",
    "BlockContent",
    "DocumentStats",
    "DocumentStructure",
    "Empty",
    "GenerationResult",
    "InlineRun",
    "Modification",
    "OutlineNode",
    "PerceptionResult",
    "PlainText",
    "PlanningResult",
    "Runs",
    "SearchContext",
    "SearchResult",
    "Section",
    "WritingStyleProfile",
]
