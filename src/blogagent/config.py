"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `BLOGAGENT_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SAFETY_NET_TEMPLATE = (
    "## {section}\n\n"
    "抱歉，AI 模型暂时不可用，无法为「{section}」生成内容。请稍后重试，或换一种说法描述你的需求。\n\n"
    "Sorry, we couldn't generate content for \"{section}\" because the language model is "
    "currently unavailable. Please try again later or rephrase your request."
)


class Settings(BaseSettings):
    """Blog agent settings.

    All fields are environment-configurable. Prefix is `BLOGAGENT_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="BLOGAGENT_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    app_env: Literal["dev", "prod"] = Field(default="dev")
    log_level: str = Field(default="INFO")

    # LLM
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_timeout_s: float = Field(default=120.0)
    openai_temperature: float = Field(default=0.3, ge=0.0, le=2.0)

    # Search
    search_provider: Literal["tavily", "duckduckgo"] = Field(default="tavily")
    tavily_api_key: str | None = Field(default=None)
    tavily_api_base_url: str = Field(default="https://api.tavily.com")
    tavily_search_depth: Literal["basic", "advanced"] = Field(default="basic")
    tavily_timeout_s: float = Field(default=30.0, ge=1.0, le=300.0)
    tavily_max_retries: int = Field(default=2, ge=0, le=10)
    tavily_retry_backoff_s: float = Field(default=0.75, ge=0.0, le=30.0)
    tavily_retry_max_backoff_s: float = Field(default=8.0, ge=0.0, le=120.0)

    # Retrieval
    retrieval_max_queries: int = Field(default=3, ge=1, le=10)
    retrieval_results_per_query: int = Field(default=3, ge=1, le=20)
    retrieval_max_results: int = Field(default=5, ge=1, le=50)
    retrieval_min_summary_chars: int = Field(default=50, ge=0)

    # Cache
    redis_enabled: bool = Field(default=False)
    redis_url: str = Field(default="redis://localhost:6379/0")
    cache_key_prefix: str = Field(default="blog_ai")
    doc_structure_ttl_s: int = Field(default=300, ge=1)
    writing_style_ttl_s: int = Field(default=86400, ge=1)
    # Reserved; search results are not cached.
    search_results_ttl_s: int = Field(default=3600, ge=1)

    # Style profiling
    history_dir: Path = Field(default=Path("artifacts/history"))
    history_limit: int = Field(default=10, ge=1, le=100)

    # Generation
    generation_min_content_chars: int = Field(default=20, ge=1)
    safety_net_template: str = Field(default=DEFAULT_SAFETY_NET_TEMPLATE)

    # Response
    include_debug: bool = Field(default=False)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("BLOGAGENT_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
