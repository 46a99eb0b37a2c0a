"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_conversation_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "blogagent_conversation_id", default="-"
)
_stage_var: contextvars.ContextVar[str] = contextvars.ContextVar("blogagent_stage", default="-")


class _ContextFilter(logging.Filter):
    """Inject request context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.conversation_id = _conversation_var.get()  # type: ignore[attr-defined]
        record.stage = _stage_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def run_context(*, conversation_id: str, stage: str | None = None) -> Any:
    """Temporarily bind request context for structured logging.

    Args:
        conversation_id: Conversation identifier.
        stage: Optional pipeline stage.
    """

    token_conv = _conversation_var.set(conversation_id)
    token_stage = _stage_var.set(stage or _stage_var.get())
    try:
        yield
    finally:
        _conversation_var.reset(token_conv)
        _stage_var.reset(token_stage)


def set_stage(stage: str) -> None:
    """Update current pipeline stage in context."""

    _stage_var.set(stage)


def current_stage() -> str:
    return _stage_var.get()


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s conv=%(conversation_id)s stage=%(stage)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate handlers if configure_logging is called multiple times
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
