"""Retrieval stage.

Best-effort external context: fan queries out to the search provider, dedupe, summarize. This
stage never raises; every failure maps to a degraded :class:`SearchContext`.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from blogagent.agents.base import BaseAgent
from blogagent.llm.client import LLMCaller
from blogagent.logging import get_logger, log_exception
from blogagent.models.search import SearchContext, SearchResult, SourceRef
from blogagent.prompts import NO_RESULTS_SUMMARY, SEARCH_UNAVAILABLE_SUMMARY, SUMMARIZER_SYSTEM_PROMPT
from blogagent.tools.web_search import WebSearchProvider
from blogagent.utils.text import normalize_whitespace

logger = get_logger(__name__)

SNIPPET_CHARS = 400
PROMPT_CONTENT_CHARS = 500
FALLBACK_SUMMARY_RESULTS = 3


def unavailable_context() -> SearchContext:
    return SearchContext(raw_results=[], summary=SEARCH_UNAVAILABLE_SUMMARY, sources=[])


def dedupe_by_url(results: Sequence[SearchResult], limit: int) -> list[SearchResult]:
    """Keep the first occurrence of each URL, up to ``limit`` results."""

    seen: set[str] = set()
    unique: list[SearchResult] = []
    for r in results:
        if r.url in seen:
            continue
        seen.add(r.url)
        unique.append(r)
        if len(unique) >= limit:
            break
    return unique


def fallback_summary(results: Sequence[SearchResult], *, min_chars: int = 50) -> str:
    """Summary built without the LLM from the leading text of the top results."""

    if not results:
        return NO_RESULTS_SUMMARY
    lines: list[str] = []
    for r in results[:FALLBACK_SUMMARY_RESULTS]:
        snippet = normalize_whitespace(r.content[:SNIPPET_CHARS])
        if len(snippet) < min_chars:
            continue
        lines.append(f"- {r.title}: {snippet}")
    return "\n".join(lines)


class RetrievalAgent(BaseAgent):
    """Parallel web search plus LLM summary."""

    def __init__(
        self,
        provider: WebSearchProvider | None,
        llm: LLMCaller,
        *,
        max_queries: int = 3,
        results_per_query: int = 3,
        max_results: int = 5,
        min_summary_chars: int = 50,
    ) -> None:
        super().__init__(llm)
        self._provider = provider
        self.max_queries = max_queries
        self.results_per_query = results_per_query
        self.max_results = max_results
        self.min_summary_chars = min_summary_chars

    async def search(self, queries: Sequence[str]) -> SearchContext:
        if self._provider is None:
            logger.info("No search provider configured; search unavailable")
            return unavailable_context()

        queries = [q for q in queries if q and q.strip()][: self.max_queries]
        if not queries:
            return unavailable_context()

        try:
            batches = await asyncio.gather(
                *(asyncio.to_thread(self._provider.search, q, max_results=self.results_per_query) for q in queries)
            )
        except Exception:
            log_exception(logger, "Search provider failed; search unavailable", queries=list(queries))
            return unavailable_context()

        flat = [r for batch in batches for r in batch]
        results = dedupe_by_url(flat, self.max_results)
        logger.info("Retrieval: %d queries -> %d results (%d unique)", len(queries), len(flat), len(results))
        if not results:
            # An empty result set carries no external data, same as a failed search.
            return unavailable_context()

        summary = await self.summarize(results)
        return SearchContext(
            raw_results=results,
            summary=summary,
            sources=[SourceRef(title=r.title, url=r.url) for r in results],
        )

    async def summarize(self, results: Sequence[SearchResult]) -> str:
        if not results:
            return NO_RESULTS_SUMMARY

        prompt = "\n\n".join(
            f"[{i}] {r.title}\n{r.content[:PROMPT_CONTENT_CHARS]}...\nSource: {r.url}" for i, r in enumerate(results, start=1)
        )
        try:
            summary = (await self.call_llm_async(SUMMARIZER_SYSTEM_PROMPT, prompt)).strip()
        except Exception as e:
            # Retrieval never fails the request; any summarizer error degrades to snippets.
            logger.warning("Failed to summarize search results, using extracted snippets: %s", e)
            return fallback_summary(results, min_chars=self.min_summary_chars)

        if len(summary) < self.min_summary_chars:
            logger.warning("LLM summary too short (%d chars), using extracted snippets", len(summary))
            return fallback_summary(results, min_chars=self.min_summary_chars)
        return summary
