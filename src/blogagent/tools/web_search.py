"""Web search providers."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from duckduckgo_search import DDGS

from blogagent.config import Settings
from blogagent.errors import RetrievalError
from blogagent.logging import get_logger
from blogagent.models.search import SearchResult

logger = get_logger(__name__)

_TRANSIENT_STATUS = {429, 500, 502, 503, 504}


class WebSearchProvider(Protocol):
    """Search provider interface."""

    def search(self, query: str, *, max_results: int) -> list[SearchResult]:
        """Search web."""


class TavilySearchError(RetrievalError):
    pass


def _to_result(title: Any, url: Any, content: Any, score: Any = None) -> SearchResult | None:
    if not url:
        return None
    try:
        return SearchResult(
            title=str(title or ""),
            url=str(url),
            content=str(content or ""),
            score=float(score) if score is not None else None,
        )
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class TavilySearchProvider:
    """Tavily API search provider.

    Notes:
        - API key must be provided via settings (`BLOGAGENT_TAVILY_API_KEY`).
        - Tavily's ``content`` field is already an extracted passage, which is what the
          retrieval summary works from; raw page content is not requested.
    """

    api_key: str
    base_url: str = "https://api.tavily.com"
    search_depth: str = "basic"
    timeout_s: float = 30.0
    max_retries: int = 2
    retry_backoff_s: float = 0.75
    retry_max_backoff_s: float = 8.0

    def search(self, query: str, *, max_results: int) -> list[SearchResult]:
        """Search using Tavily.

        Args:
            query: Search query.
            max_results: Maximum number of results.

        Returns:
            List of results.

        Raises:
            TavilySearchError: All attempts failed.
        """

        url = f"{self.base_url.rstrip('/')}/search"
        payload = {
            "api_key": self.api_key,
            "query": query,
            "max_results": max_results,
            "search_depth": self.search_depth,
            "include_answer": False,
            "include_raw_content": False,
            "include_images": False,
        }

        last_err: Exception | None = None
        started = time.monotonic()

        with httpx.Client(timeout=httpx.Timeout(self.timeout_s), follow_redirects=True) as client:
            for attempt in range(self.max_retries + 1):
                status_code: int | None = None
                try:
                    resp = client.post(url, json=payload)
                    status_code = resp.status_code
                    if status_code in _TRANSIENT_STATUS:
                        raise httpx.HTTPStatusError(
                            f"tavily transient status={status_code}",
                            request=resp.request,
                            response=resp,
                        )
                    resp.raise_for_status()

                    data = resp.json()
                    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
                        raise TavilySearchError("tavily response missing results list")

                    results: list[SearchResult] = []
                    for item in data["results"]:
                        if not isinstance(item, dict):
                            continue
                        r = _to_result(item.get("title"), item.get("url"), item.get("content"), item.get("score"))
                        if r is not None:
                            results.append(r)

                    logger.info(
                        "Tavily search ok: %d results (attempt=%d, %d ms)",
                        len(results),
                        attempt,
                        int((time.monotonic() - started) * 1000),
                    )
                    return results
                except (httpx.HTTPError, TavilySearchError, ValueError) as e:
                    last_err = e

                if attempt >= self.max_retries:
                    break

                retry_after_s: float | None = None
                if isinstance(last_err, httpx.HTTPStatusError) and last_err.response.status_code == 429:
                    ra = last_err.response.headers.get("retry-after")
                    try:
                        retry_after_s = float(ra) if ra is not None else None
                    except ValueError:
                        retry_after_s = None

                backoff = min(self.retry_max_backoff_s, self.retry_backoff_s * (2**attempt))
                sleep_s = retry_after_s if retry_after_s is not None else backoff
                logger.warning(
                    "Tavily search retry (attempt=%d/%d, status=%s, sleep=%.2fs)",
                    attempt,
                    self.max_retries,
                    status_code,
                    sleep_s,
                )
                time.sleep(sleep_s)

        logger.error("Tavily search failed after %d attempts: %s", self.max_retries + 1, last_err)
        raise TavilySearchError("Tavily search failed") from last_err


@dataclass(frozen=True)
class DuckDuckGoSearchProvider:
    """DuckDuckGo search provider. Failures degrade to an empty result list."""

    def search(self, query: str, *, max_results: int) -> list[SearchResult]:
        results: list[SearchResult] = []
        try:
            with DDGS() as ddgs:
                for r in ddgs.text(query, max_results=max_results):
                    item = _to_result(r.get("title"), r.get("href") or r.get("url"), r.get("body") or r.get("snippet"))
                    if item is not None:
                        results.append(item)
        except Exception as e:
            logger.exception("Search failed for query=%s: %s", query, e)
            return []

        return results


def get_search_provider(settings: Settings) -> WebSearchProvider | None:
    """Factory to create a search provider based on settings.

    Returns ``None`` when Tavily is selected without an API key; retrieval then reports
    search as unavailable instead of failing the request.
    """

    if settings.search_provider == "tavily":
        if not settings.tavily_api_key:
            logger.warning("BLOGAGENT_TAVILY_API_KEY not set; web search disabled")
            return None
        return TavilySearchProvider(
            api_key=settings.tavily_api_key,
            base_url=settings.tavily_api_base_url,
            search_depth=settings.tavily_search_depth,
            timeout_s=settings.tavily_timeout_s,
            max_retries=settings.tavily_max_retries,
            retry_backoff_s=settings.tavily_retry_backoff_s,
            retry_max_backoff_s=settings.tavily_retry_max_backoff_s,
        )

    return DuckDuckGoSearchProvider()
