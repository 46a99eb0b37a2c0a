"""Pipeline stages: perception, planning, retrieval and generation."""

from __future__ import annotations

from blogagent.agents.generator import ContentGenerator
from blogagent.agents.perception import PerceptionAgent
from blogagent.agents.planner import PlanningAgent
from blogagent.agents.retrieval import RetrievalAgent

__all__ = ["ContentGenerator", "PerceptionAgent", "PlanningAgent", "RetrievalAgent"]
