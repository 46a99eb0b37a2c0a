"""Agent orchestrator.

Sequences the stages for one edit request:

    start -> cache_and_perception -> planning -> [clarification_requested]
          -> retrieval? -> generation -> validation -> delivered

Two fan-out points run with ``asyncio.gather``: (cache lookups | perception) before planning,
and (quality | SEO | readability) before response assembly. Blocking collaborators are
offloaded with ``asyncio.to_thread``, which also carries the logging context into the worker.

Each stage owns its degraded mode. Anything that still escapes is reported as an error reply;
the orchestrator never retries.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from blogagent.agents.generator import ContentGenerator
from blogagent.agents.perception import PerceptionAgent
from blogagent.agents.planner import PlanningAgent
from blogagent.agents.retrieval import RetrievalAgent
from blogagent.analysis.style_profiler import StyleProfiler
from blogagent.cache.service import BlogAICache, build_cache_backend
from blogagent.config import Settings
from blogagent.errors import FatalPipelineError
from blogagent.history.store import HistoryStore, JsonlHistoryStore
from blogagent.llm.client import LLMCaller, LLMClient
from blogagent.logging import get_logger, log_exception, run_context, set_stage
from blogagent.models.generation import GenerationResult
from blogagent.models.perception import PerceptionResult
from blogagent.models.planning import PlanningResult
from blogagent.models.request import AgentRequest, AgentResponse, ModificationPreview, Reply
from blogagent.models.review import ToolInsights
from blogagent.models.search import SearchContext
from blogagent.models.style import WritingStyleProfile
from blogagent.orchestrator.state import TERMINAL_STATES, PipelineState, RunState
from blogagent.tools.diff import apply_modifications, calculate_diff
from blogagent.tools.quality import score_quality
from blogagent.tools.readability import analyze_readability
from blogagent.tools.seo import check_seo
from blogagent.tools.suggestions import generate_suggestions
from blogagent.tools.web_search import WebSearchProvider, get_search_provider
from blogagent.utils.ids import new_conversation_id, new_message_id

logger = get_logger(__name__)

ERROR_REPLY_TEMPLATE = (
    "I encountered an error while processing your request: {message}. "
    "Please try again or rephrase your request."
)


class AgentOrchestrator:
    """Entry point: one :class:`AgentRequest` in, one :class:`AgentResponse` out."""

    def __init__(
        self,
        llm: LLMCaller,
        *,
        cache: BlogAICache | None = None,
        search_provider: WebSearchProvider | None = None,
        history_store: HistoryStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or Settings()
        s = self._settings
        self._cache = cache if cache is not None else BlogAICache(None)
        self._perception = PerceptionAgent()
        self._planner = PlanningAgent(llm)
        self._retrieval = RetrievalAgent(
            search_provider,
            llm,
            max_queries=s.retrieval_max_queries,
            results_per_query=s.retrieval_results_per_query,
            max_results=s.retrieval_max_results,
            min_summary_chars=s.retrieval_min_summary_chars,
        )
        self._generator = ContentGenerator(
            llm,
            min_content_chars=s.generation_min_content_chars,
            min_summary_chars=s.retrieval_min_summary_chars,
            safety_net_template=s.safety_net_template,
        )
        self._profiler = StyleProfiler(history_store, limit=s.history_limit)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentOrchestrator":
        """Wire real collaborators (OpenAI, search provider, cache backend, JSONL history)."""

        return cls(
            LLMClient(settings),
            cache=BlogAICache.from_settings(settings, build_cache_backend(settings)),
            search_provider=get_search_provider(settings),
            history_store=JsonlHistoryStore(settings.history_dir),
            settings=settings,
        )

    @property
    def cache(self) -> BlogAICache:
        return self._cache

    def execute_sync(self, request: AgentRequest | Mapping[str, Any]) -> AgentResponse:
        return asyncio.run(self.execute(request))

    async def execute(self, request: AgentRequest | Mapping[str, Any]) -> AgentResponse:
        conversation_id = _requested_conversation_id(request) or new_conversation_id()
        run = RunState(conversation_id=conversation_id, message_id=new_message_id())

        with run_context(conversation_id=conversation_id, stage=PipelineState.START.value):
            try:
                req = request if isinstance(request, AgentRequest) else AgentRequest.model_validate(request)
                return await self._run(req, run)
            except Exception as e:
                fatal = FatalPipelineError(str(e) or type(e).__name__)
                log_exception(logger, f"Pipeline failed: {fatal}", states=[s.value for s in run.history])
                if run.state not in TERMINAL_STATES:
                    run.advance(PipelineState.ERROR)
                return self._error_response(run, str(fatal))

    async def _run(self, req: AgentRequest, run: RunState) -> AgentResponse:
        self._enter(run, PipelineState.CACHE_AND_PERCEPTION)
        blocks = list(req.current_content)
        cached_structure, cached_style, perception = await asyncio.gather(
            asyncio.to_thread(self._cache.get_document_structure, req.post_id, blocks),
            asyncio.to_thread(self._cache.get_writing_style, req.user_id),
            asyncio.to_thread(self._perception.perceive, req.message, blocks),
        )
        run.cache_hits["document_structure"] = cached_structure is not None
        run.cache_hits["writing_style"] = cached_style is not None

        if cached_structure is None:
            await asyncio.to_thread(
                self._cache.set_document_structure, req.post_id, blocks, perception.document_structure
            )

        style = cached_style
        if style is None:
            style = await asyncio.to_thread(self._profiler.profile, req.user_id)
            await asyncio.to_thread(self._cache.set_writing_style, req.user_id, style)

        self._enter(run, PipelineState.PLANNING)
        planning = await self._planner.plan(perception, req.message)

        if planning.clarification_needed:
            self._enter(run, PipelineState.CLARIFICATION_REQUESTED)
            return self._clarification_response(run, perception, planning)

        search_context: SearchContext | None = None
        if planning.needs_search and planning.search_queries:
            self._enter(run, PipelineState.RETRIEVAL)
            search_context = await self._retrieval.search(planning.search_queries)

        self._enter(run, PipelineState.GENERATION)
        generation = await self._generator.generate(planning, search_context, blocks, req.message, style)

        self._enter(run, PipelineState.VALIDATION)
        generated_text = generation.generated_text()
        quality, seo, readability = await asyncio.gather(
            asyncio.to_thread(score_quality, generation, planning),
            asyncio.to_thread(check_seo, generated_text, req.current_title),
            asyncio.to_thread(analyze_readability, generated_text),
        )

        structure = perception.document_structure
        preview = ModificationPreview(
            modifications=generation.modifications,
            explanation=generation.explanation,
            quality_score=min(1.0, max(0.0, quality.overall_score / 10)),
            preview_blocks=[b.to_editor() for b in apply_modifications(blocks, generation.modifications, structure=structure)],
            diff=calculate_diff(blocks, generation.modifications, structure=structure),
            tool_insights=ToolInsights(
                seo=seo,
                readability=readability,
                overall_score=round((seo.overall_score + readability.overall_score) / 2),
            ),
            quality=quality,
        )

        self._enter(run, PipelineState.DELIVERED)
        logger.info("Delivered %d modifications in %d ms", len(generation.modifications), run.elapsed_ms)
        return AgentResponse(
            conversation_id=run.conversation_id,
            message_id=run.message_id,
            reply=Reply(
                type="modification_preview",
                content=generation.explanation,
                metadata={
                    "thought_process": planning.thought_process,
                    "search_performed": search_context is not None,
                    "cache_hit": dict(run.cache_hits),
                    "performance": {"total_time_ms": run.elapsed_ms},
                    "generation_tier": generation.tier,
                },
            ),
            modification_preview=preview,
            suggestions=generate_suggestions(perception, planning, structure, instruction=req.message),
            debug=self._debug(run, perception, planning, search_context, generation, style),
        )

    @staticmethod
    def _enter(run: RunState, state: PipelineState) -> None:
        run.advance(state)
        set_stage(state.value)
        logger.debug("Pipeline state -> %s", state.value)

    def _debug(
        self,
        run: RunState,
        perception: PerceptionResult,
        planning: PlanningResult,
        search_context: SearchContext | None = None,
        generation: GenerationResult | None = None,
        style: WritingStyleProfile | None = None,
    ) -> dict[str, Any] | None:
        if not self._settings.include_debug:
            return None
        return {
            "run": run.snapshot(),
            "perception": perception.model_dump(mode="json"),
            "planning": planning.model_dump(mode="json"),
            "search": search_context.model_dump(mode="json") if search_context is not None else None,
            "generation_tier": generation.tier if generation is not None else None,
            "writing_style": style.model_dump(mode="json") if style is not None else None,
        }

    def _clarification_response(
        self, run: RunState, perception: PerceptionResult, planning: PlanningResult
    ) -> AgentResponse:
        titles = [s.title for s in perception.document_structure.level2_sections()]
        return AgentResponse(
            conversation_id=run.conversation_id,
            message_id=run.message_id,
            reply=Reply(
                type="clarification",
                content="\n".join(planning.clarification_questions),
                metadata={"available_paragraphs": titles},
            ),
            debug=self._debug(run, perception, planning),
        )

    @staticmethod
    def _error_response(run: RunState, message: str) -> AgentResponse:
        return AgentResponse(
            conversation_id=run.conversation_id,
            message_id=run.message_id,
            reply=Reply(type="text", content=ERROR_REPLY_TEMPLATE.format(message=message)),
        )


def _requested_conversation_id(request: AgentRequest | Mapping[str, Any]) -> str | None:
    """Conversation id from a request that may not validate."""

    if isinstance(request, AgentRequest):
        return request.conversation_id
    if isinstance(request, Mapping):
        value = request.get("conversation_id") or request.get("conversationId")
        return value if isinstance(value, str) and value else None
    return None
