"""
Incremental SSE line decoder for chat-completion streams.

Turns raw transport chunks into typed stream events. Chunk boundaries are
unrelated to line boundaries, so partial lines are buffered until complete.
"""

from __future__ import annotations

import codecs
import json
from typing import Any

import structlog

from ..exceptions import DecodeError
from .models import CompleteMessage, ContentDelta, Done, ReasoningDelta, StreamEvent

logger = structlog.get_logger(__name__)

DATA_PREFIX = "data:"
DONE_LINE = "data: [DONE]"


def parse_stream_payload(data: Any) -> StreamEvent | None:
    """
    Classify a decoded JSON payload into a stream event.

    A complete `message` object takes precedence over `delta` fields. Returns
    None for shapes that carry nothing we consume.
    """
    if not isinstance(data, dict):
        return None

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    choice = choices[0]
    if not isinstance(choice, dict):
        return None

    message = choice.get("message")
    if isinstance(message, dict):
        return CompleteMessage(
            content=message.get("content"),
            reasoning_content=message.get("reasoning_content"),
        )

    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None

    reasoning = delta.get("reasoning_content")
    content = delta.get("content")

    # Providers send both keys on every delta, nulling the inactive one
    if "reasoning_content" in delta and (reasoning is not None or content is None):
        return ReasoningDelta(text=reasoning or "")

    if "content" in delta:
        return ContentDelta(text=content or "")

    return None


def parse_stream_line(line: str) -> StreamEvent | None:
    """
    Parse one stream line.

    Raises:
        DecodeError: If a `data:` line does not hold valid JSON.
    """
    if not line.startswith(DATA_PREFIX):
        return None

    if line == DONE_LINE or line[len(DATA_PREFIX):].strip() == "[DONE]":
        return Done()

    payload = line[len(DATA_PREFIX):]
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodeError(f"JSON decode error: {e}", line=line) from e

    return parse_stream_payload(data)


class StreamDecoder:
    """Decodes byte chunks into stream events, one instance per response."""

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self.stats = {
            "chunks": 0,
            "lines": 0,
            "events": 0,
            "ignored_lines": 0,
            "malformed_lines": 0,
        }

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Decode a transport chunk and return the events of completed lines."""
        self.stats["chunks"] += 1
        self._buffer += self._decoder.decode(chunk)

        if "\n" not in self._buffer:
            return []

        *lines, self._buffer = self._buffer.split("\n")
        return self._process_lines(lines)

    def close(self) -> list[StreamEvent]:
        """Flush the decoder and parse any trailing line without a newline."""
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""
        return self._process_lines([remainder])

    def _process_lines(self, lines: list[str]) -> list[StreamEvent]:
        events: list[StreamEvent] = []

        for raw_line in lines:
            line = raw_line.rstrip("\r")
            if not line.strip():
                continue

            self.stats["lines"] += 1
            try:
                event = parse_stream_line(line)
            except DecodeError as e:
                self.stats["malformed_lines"] += 1
                logger.warning(
                    "Skipping malformed stream line",
                    error=str(e),
                    line=e.line,
                )
                continue

            if event is None:
                self.stats["ignored_lines"] += 1
                continue

            if isinstance(event, Done):
                logger.debug("Received [DONE] marker")

            self.stats["events"] += 1
            events.append(event)

        return events

    def get_stats(self) -> dict[str, int]:
        """Get decoding statistics for monitoring."""
        return self.stats.copy()
