"""Exception hierarchy.

Only :class:`FatalPipelineError` ever reaches the caller (as an error reply). Every other
error class is contained by the stage that raises it and mapped to a degraded mode.
"""

from __future__ import annotations


class BlogAgentError(RuntimeError):
    pass


class AnalysisError(BlogAgentError):
    """Malformed block input."""


class CacheError(BlogAgentError):
    """Cache backend unreachable or returned garbage. Always treated as a miss."""


class LLMError(BlogAgentError):
    """The language model call failed."""


class PlanningParseError(BlogAgentError):
    """Planner response was not an extractable, valid JSON plan."""


class RetrievalError(BlogAgentError):
    """Search provider failure."""


class GenerationTierFailure(BlogAgentError):
    """One generation strategy failed; the next one should be tried."""

    def __init__(self, tier: str, reason: str) -> None:
        super().__init__(f"{tier}: {reason}")
        self.tier = tier
        self.reason = reason


class FatalPipelineError(BlogAgentError):
    """An error that escaped stage-level containment."""
