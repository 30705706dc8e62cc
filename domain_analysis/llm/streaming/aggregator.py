"""
Applies decoded stream events to the aggregation state of one analysis.
"""

from __future__ import annotations

import structlog

from ..models import UpdateCallback
from .coalescer import StreamCoalescer
from .models import (
    AggregationState,
    CompleteMessage,
    ContentDelta,
    Done,
    ReasoningDelta,
    StreamEvent,
)

logger = structlog.get_logger(__name__)


class StreamAggregator:
    """Owns the aggregation state and coalescer for a single streaming call."""

    def __init__(
        self,
        on_update: UpdateCallback | None,
        *,
        flush_interval: float = 0.05,
        reasoning_sentinel: str | None = None,
    ):
        self.state = AggregationState()
        self.on_update = on_update
        self.reasoning_sentinel = reasoning_sentinel
        self.coalescer = StreamCoalescer(self.state, on_update, flush_interval)

    def apply(self, event: StreamEvent) -> None:
        if isinstance(event, CompleteMessage):
            self._apply_complete_message(event)
        elif isinstance(event, ReasoningDelta):
            self._apply_reasoning_delta(event)
        elif isinstance(event, ContentDelta):
            self._apply_content_delta(event)
        elif isinstance(event, Done):
            logger.debug("Stream signalled [DONE]; reading until transport ends")

    def _apply_complete_message(self, event: CompleteMessage) -> None:
        logger.info(
            "Received complete message",
            has_content=bool(event.content),
            has_reasoning=bool(event.reasoning_content),
        )

        # Independent updates, each flushed on its own. A wholesale value
        # supersedes fragments still queued for the same field.
        if event.content:
            self.coalescer.discard_pending_final()
            self.state.final_content = event.content
            self.state.end_reasoning_phase()
            self.coalescer.flush(force=True)

        if event.reasoning_content:
            self.coalescer.discard_pending_reasoning()
            self.state.reasoning_content = event.reasoning_content
            self.coalescer.flush(force=True)

    def _apply_reasoning_delta(self, event: ReasoningDelta) -> None:
        if self.state.is_reasoning_phase:
            self.coalescer.add_reasoning(event.text)

        if self.reasoning_sentinel and self.reasoning_sentinel in event.text:
            self.state.reasoning_done = True

    def _apply_content_delta(self, event: ContentDelta) -> None:
        if self.state.is_reasoning_phase:
            self.state.end_reasoning_phase()
        self.coalescer.add_final(event.text)

    def finish(self) -> str:
        """
        Drain pending fragments, emit the terminal snapshot and return the
        combined result.
        """
        self.coalescer.flush()

        logger.info(
            "Streaming response finished",
            reasoning_length=len(self.state.reasoning_content),
            final_length=len(self.state.final_content),
            reasoning_done=self.state.reasoning_done,
        )

        if self.on_update is not None:
            self.on_update(self.state.snapshot(is_reasoning_phase=False))

        return self.state.combined()
