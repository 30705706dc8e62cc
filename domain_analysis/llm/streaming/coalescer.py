"""
Time-based coalescing of stream deltas into callback updates.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Callable

import structlog

from ..models import UpdateCallback
from .models import AggregationState

logger = structlog.get_logger(__name__)


class StreamCoalescer:
    """
    Buffers reasoning and answer fragments and flushes them at most once per
    interval, plus on a periodic tick so bursts followed by silence still
    surface.

    The tick task and the read loop share one event loop and only interleave
    at await points, so flushes never overlap.
    """

    def __init__(
        self,
        state: AggregationState,
        on_update: UpdateCallback | None,
        interval: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = state
        self.on_update = on_update
        self.interval = interval
        self._clock = clock
        self._reasoning_chunks: list[str] = []
        self._final_chunks: list[str] = []
        self._last_flush = float("-inf")
        self._ticker: asyncio.Task[None] | None = None
        self._stopped = False
        self.flush_count = 0
        self.error: Exception | None = None

    def add_reasoning(self, text: str) -> None:
        if text:
            self._reasoning_chunks.append(text)
        self.flush_if_needed()

    def add_final(self, text: str) -> None:
        if text:
            self._final_chunks.append(text)
        self.flush_if_needed()

    def discard_pending_reasoning(self) -> None:
        self._reasoning_chunks = []

    def discard_pending_final(self) -> None:
        self._final_chunks = []

    @property
    def has_pending(self) -> bool:
        return bool(self._reasoning_chunks or self._final_chunks)

    def flush_if_needed(self) -> None:
        self.raise_if_failed()
        if self._clock() - self._last_flush >= self.interval:
            self.flush()

    def flush(self, *, force: bool = False) -> bool:
        """
        Move pending fragments into the aggregation state.

        Emits a snapshot when anything was pending, or unconditionally when
        `force` is set. Returns whether a snapshot was emitted.
        """
        if not self.has_pending and not force:
            return False

        if self._reasoning_chunks:
            self.state.reasoning_content += "".join(self._reasoning_chunks)
            self._reasoning_chunks = []

        if self._final_chunks:
            self.state.final_content += "".join(self._final_chunks)
            self._final_chunks = []

        if self.on_update is not None:
            self.on_update(self.state.snapshot())

        self.flush_count += 1
        self._last_flush = self._clock()
        return True

    def start(self) -> None:
        """Start the periodic flush task on the running loop."""
        if self._ticker is not None or self._stopped:
            return
        self._ticker = asyncio.get_running_loop().create_task(self._tick())

    async def stop(self) -> None:
        """Cancel the periodic flush task. Later calls are no-ops."""
        if self._stopped:
            return
        self._stopped = True

        if self._ticker is None:
            return

        self._ticker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._ticker
        logger.debug("Flush ticker stopped", flushes=self.flush_count)

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def raise_if_failed(self) -> None:
        """Re-raise an error the ticker hit while delivering an update."""
        if self.error is not None:
            raise self.error

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.flush()
            except Exception as e:
                # Held for the read loop; the ticker stops here
                self.error = e
                logger.error(
                    "Update callback failed during periodic flush",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return
