"""
Streaming support for the analysis client.

- SSE line decoding into typed events
- Coalescing of deltas into periodic snapshots
- Aggregation of reasoning and answer text
"""

from __future__ import annotations

from .aggregator import StreamAggregator
from .coalescer import StreamCoalescer
from .models import (
    AggregationState,
    CompleteMessage,
    ContentDelta,
    Done,
    ReasoningDelta,
    StreamEvent,
)
from .parser import StreamDecoder, parse_stream_line, parse_stream_payload

__all__ = [
    "AggregationState",
    "CompleteMessage",
    "ContentDelta",
    "Done",
    "ReasoningDelta",
    "StreamAggregator",
    "StreamCoalescer",
    "StreamDecoder",
    "StreamEvent",
    "parse_stream_line",
    "parse_stream_payload",
]
