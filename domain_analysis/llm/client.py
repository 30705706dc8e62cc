"""
HTTP client for streaming domain analysis against a chat-completion API.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from ..logging_utils import log_operation
from .exceptions import ApiStatusError, ResponseFormatError, TransportError
from .models import AnalysisClientConfig, AnalysisRequest, UpdateCallback
from .prompts import build_analysis_request
from .streaming.aggregator import StreamAggregator
from .streaming.parser import StreamDecoder

logger = structlog.get_logger(__name__)


class StreamingAnalysisClient:
    """
    Client for the domain analysis endpoint.

    With an `on_update` callback the response is streamed, decoded and
    coalesced into periodic snapshots; without one a single non-streaming
    request is made.
    """

    def __init__(
        self,
        config: AnalysisClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_client = http_client is None
        self.client: httpx.AsyncClient = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.read_timeout, connect=config.connect_timeout
            ),
        )
        self.last_decoder_stats: dict[str, int] = {}

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def build_request(self, domain: str, *, stream: bool) -> AnalysisRequest:
        return build_analysis_request(
            domain,
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            stream=stream,
        )

    @log_operation("domain_analysis")
    async def analyze(
        self, domain: str, on_update: UpdateCallback | None = None
    ) -> str:
        """Analyze a domain, streaming snapshots to `on_update` when given.

        Returns:
            The final answer text in non-streaming mode, otherwise the
            reasoning and final answer separated by a blank line.

        Raises:
            ApiStatusError: The API answered with a non-success status.
            TransportError: httpx failed to complete the request or read the body.
            ResponseFormatError: A non-streaming response had no message content.
        """
        if on_update is None:
            request = self.build_request(domain, stream=False)
            return await self._analyze_once(request)

        request = self.build_request(domain, stream=True)
        return await self._analyze_streaming(request, on_update)

    async def _analyze_once(self, request: AnalysisRequest) -> str:
        try:
            response = await self.client.post(
                self.config.endpoint_url,
                json=request.to_payload(),
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error: {e!s}", model=self.config.model
            ) from e

        if not response.is_success:
            raise self._status_error(
                response.status_code, response.reason_phrase, response.content
            )

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ResponseFormatError(
                f"Unexpected response format: {e!s}", model=self.config.model
            ) from e

    async def _analyze_streaming(
        self, request: AnalysisRequest, on_update: UpdateCallback
    ) -> str:
        aggregator = StreamAggregator(
            on_update,
            flush_interval=self.config.flush_interval,
            reasoning_sentinel=self.config.reasoning_sentinel,
        )
        decoder = StreamDecoder()
        coalescer = aggregator.coalescer

        coalescer.start()
        try:
            async with self.client.stream(
                "POST",
                self.config.endpoint_url,
                json=request.to_payload(),
                headers=self._headers(),
            ) as response:
                if not response.is_success:
                    error_body = await response.aread()
                    raise self._status_error(
                        response.status_code, response.reason_phrase, error_body
                    )

                async for chunk in response.aiter_bytes():
                    coalescer.raise_if_failed()
                    for event in decoder.feed(chunk):
                        aggregator.apply(event)

                for event in decoder.close():
                    aggregator.apply(event)
                coalescer.raise_if_failed()

        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error during streaming: {e!s}",
                model=self.config.model,
            ) from e
        finally:
            await coalescer.stop()
            self.last_decoder_stats = decoder.get_stats()

        logger.debug("Stream decoder statistics", **self.last_decoder_stats)
        return aggregator.finish()

    def _status_error(
        self, status: int, status_text: str, raw_body: bytes
    ) -> ApiStatusError:
        body: dict[str, Any] = {}
        try:
            decoded = json.loads(raw_body)
        except (ValueError, UnicodeDecodeError):
            decoded = None
        if isinstance(decoded, dict):
            body = decoded

        logger.error(
            "API returned an error status",
            status=status,
            status_text=status_text,
            error_body=body,
        )
        return ApiStatusError(status, status_text, body, model=self.config.model)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> StreamingAnalysisClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
