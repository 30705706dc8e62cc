"""
Error types for chat-completion API calls.

This module separates failures by where they happen:
- Transport failures (network, timeouts)
- Non-success HTTP status codes with the decoded error body
- Malformed stream lines (recovered inside the decoder)
- Unexpected response documents
"""

from __future__ import annotations

from typing import Any


class LLMError(Exception):
    """Base error for the analysis client."""

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.model = model
        self.status_code = status_code
        self.response_data = response_data or {}


class TransportError(LLMError):
    """The request never produced a response (connection, TLS, timeout)."""
    pass


class ApiStatusError(LLMError):
    """The API answered with a non-success HTTP status."""

    def __init__(
        self,
        status: int,
        status_text: str,
        body: dict[str, Any] | None = None,
        **kwargs,
    ):
        super().__init__(
            f"API request failed: {status} {status_text}",
            status_code=status,
            response_data=body,
            **kwargs,
        )
        self.status = status
        self.status_text = status_text
        self.body = body or {}


class ResponseFormatError(LLMError):
    """A complete (non-streaming) response did not have the expected shape."""
    pass


class StreamingError(LLMError):
    """Streaming-specific errors."""
    pass


class DecodeError(StreamingError):
    """A single stream line could not be decoded as JSON."""

    def __init__(self, message: str, line: str, **kwargs):
        super().__init__(message, **kwargs)
        self.line = line
