"""Base agent interfaces."""

from __future__ import annotations

import asyncio

from blogagent.llm.client import LLMCaller


class BaseAgent:
    """Base class for LLM-backed pipeline stages."""

    def __init__(self, llm: LLMCaller) -> None:
        self._llm = llm

    def call_llm(self, system_prompt: str, user_prompt: str) -> str:
        return self._llm(system_prompt, user_prompt)

    async def call_llm_async(self, system_prompt: str, user_prompt: str) -> str:
        """Offload the blocking LLM call to a thread so the event loop stays free."""

        return await asyncio.to_thread(self._llm, system_prompt, user_prompt)
