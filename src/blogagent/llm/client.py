"""OpenAI-compatible LLM client.

This wraps the `openai` Python SDK. Pipeline stages only see the narrow :class:`LLMCaller`
interface ``(system_prompt, user_prompt) -> str`` so tests can pass a plain function.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, Sequence

from openai import OpenAI, OpenAIError

from blogagent.config import Settings
from blogagent.errors import LLMError
from blogagent.logging import get_logger

logger = get_logger(__name__)

Role = Literal["system", "user", "assistant"]


class LLMCaller(Protocol):
    """Single-turn text completion. Raises :class:`LLMError` on failure."""

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        ...


@dataclass(frozen=True)
class ChatMessage:
    """A chat message."""

    role: Role
    content: str


class LLMClient:
    """LLM client using OpenAI-compatible Chat Completions API."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        if not settings.openai_api_key:
            raise ValueError(
                "Missing BLOGAGENT_OPENAI_API_KEY. "
                "Set it in environment variables or a .env file."
            )

        self._client = OpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)

    def complete(self, messages: Sequence[ChatMessage], *, temperature: float | None = None) -> str:
        """Generate a completion.

        Args:
            messages: Chat messages.
            temperature: Sampling temperature; defaults to the configured one.

        Returns:
            Assistant message content ("" when the model returned nothing).

        Raises:
            LLMError: The SDK call failed.
        """

        payload: list[dict[str, str]] = [{"role": m.role, "content": m.content} for m in messages]
        try:
            resp = self._client.chat.completions.create(
                model=self._settings.openai_model,
                messages=payload,
                temperature=self._settings.openai_temperature if temperature is None else temperature,
                timeout=self._settings.openai_timeout_s,
            )
        except OpenAIError as e:
            logger.warning("LLM call failed: %s", e)
            raise LLMError(str(e)) from e

        if not resp.choices:
            return ""
        choice = resp.choices[0]
        if not choice.message or choice.message.content is None:
            return ""
        return choice.message.content

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        return self.complete(
            [ChatMessage(role="system", content=system_prompt), ChatMessage(role="user", content=user_prompt)]
        )
