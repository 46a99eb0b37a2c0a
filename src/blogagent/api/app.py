"""FastAPI app exposing the edit pipeline."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field, field_validator

from blogagent.analysis.document_analyzer import analyze_document
from blogagent.config import Settings, load_settings
from blogagent.logging import configure_logging, get_logger
from blogagent.models.blocks import Block, coerce_blocks
from blogagent.models.document import DocumentStructure
from blogagent.models.request import AgentRequest, AgentResponse
from blogagent.orchestrator.pipeline import AgentOrchestrator


class AnalyzeRequest(BaseModel):
    """Analyze request."""

    blocks: list[Block] = Field(default_factory=list)

    @field_validator("blocks", mode="before")
    @classmethod
    def _coerce_blocks(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return coerce_blocks(value)
        return value


def create_app(*, orchestrator: AgentOrchestrator | None = None, settings: Settings | None = None) -> FastAPI:
    """Create FastAPI app.

    The orchestrator is built from settings on first use unless one is injected, so the app
    starts (and ``/health`` answers) without LLM credentials.
    """

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    app = FastAPI(title="blogagent", version="0.1.0")
    holder: dict[str, AgentOrchestrator] = {}
    if orchestrator is not None:
        holder["orchestrator"] = orchestrator

    def get_orchestrator() -> AgentOrchestrator:
        if "orchestrator" not in holder:
            holder["orchestrator"] = AgentOrchestrator.from_settings(settings)
        return holder["orchestrator"]

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/edit")
    async def edit(req: AgentRequest) -> AgentResponse:
        logger.info("API edit requested (post=%s, blocks=%d)", req.post_id, len(req.current_content))
        return await get_orchestrator().execute(req)

    @app.post("/analyze")
    def analyze(req: AnalyzeRequest) -> DocumentStructure:
        return analyze_document(req.blocks)

    @app.get("/cache/stats")
    def cache_stats() -> dict[str, Any]:
        return get_orchestrator().cache.get_cache_stats()

    return app
