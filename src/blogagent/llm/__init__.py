"""Language model access."""

from __future__ import annotations

from blogagent.llm.client import ChatMessage, LLMCaller, LLMClient

__all__ = ["ChatMessage", "LLMCaller", "LLMClient"]
