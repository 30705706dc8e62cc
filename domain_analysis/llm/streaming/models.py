"""
Streaming-specific dataclasses for the reasoning/answer stream.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import UpdateSnapshot


@dataclass(frozen=True)
class CompleteMessage:
    """A full, non-incremental message carried on a single stream line."""
    content: str | None = None
    reasoning_content: str | None = None


@dataclass(frozen=True)
class ReasoningDelta:
    """Incremental fragment of the reasoning phase."""
    text: str


@dataclass(frozen=True)
class ContentDelta:
    """Incremental fragment of the final answer."""
    text: str


@dataclass(frozen=True)
class Done:
    """The `data: [DONE]` marker."""


StreamEvent = CompleteMessage | ReasoningDelta | ContentDelta | Done


@dataclass
class AggregationState:
    """Mutable state for one in-flight analysis."""
    reasoning_content: str = ""
    final_content: str = ""
    is_reasoning_phase: bool = True
    reasoning_done: bool = False

    def end_reasoning_phase(self) -> None:
        self.is_reasoning_phase = False

    def snapshot(self, *, is_reasoning_phase: bool | None = None) -> UpdateSnapshot:
        """Build a cumulative snapshot, optionally overriding the phase flag."""
        return UpdateSnapshot(
            reasoning_content=self.reasoning_content,
            final_content=self.final_content,
            is_reasoning_phase=(
                self.is_reasoning_phase
                if is_reasoning_phase is None
                else is_reasoning_phase
            ),
        )

    def combined(self) -> str:
        """Reasoning and final answer joined by a blank line."""
        return f"{self.reasoning_content}\n\n{self.final_content}"
