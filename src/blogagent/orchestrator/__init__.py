from __future__ import annotations

from blogagent.orchestrator.pipeline import AgentOrchestrator
from blogagent.orchestrator.state import PipelineState

__all__ = ["AgentOrchestrator", "PipelineState"]
