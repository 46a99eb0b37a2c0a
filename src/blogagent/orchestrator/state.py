from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class PipelineState(str, Enum):
    START = "start"
    CACHE_AND_PERCEPTION = "cache_and_perception"
    PLANNING = "planning"
    CLARIFICATION_REQUESTED = "clarification_requested"
    RETRIEVAL = "retrieval"
    GENERATION = "generation"
    VALIDATION = "validation"
    DELIVERED = "delivered"
    ERROR = "error"


TERMINAL_STATES = frozenset(
    {PipelineState.DELIVERED, PipelineState.CLARIFICATION_REQUESTED, PipelineState.ERROR}
)


@dataclass
class RunState:
    """Per-request progress through the pipeline."""

    conversation_id: str
    message_id: str
    state: PipelineState = PipelineState.START
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.START])
    started_at: float = field(default_factory=time.monotonic)
    cache_hits: dict[str, bool] = field(
        default_factory=lambda: {"document_structure": False, "writing_style": False}
    )

    def advance(self, state: PipelineState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"pipeline already finished in state {self.state.value}")
        self.state = state
        self.history.append(state)

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    def snapshot(self) -> dict[str, object]:
        return {
            "conversation_id": self.conversation_id,
            "message_id": self.message_id,
            "state": self.state.value,
            "history": [s.value for s in self.history],
            "elapsed_ms": self.elapsed_ms,
        }
