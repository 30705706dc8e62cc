"""
Chat-completion API integration for domain analysis.

This package provides:
- Type-safe dataclass models for requests and snapshots
- Prompt construction
- Streaming decode and coalescing (see `streaming`)
- The HTTP client (`client.StreamingAnalysisClient`)
"""

from __future__ import annotations

from .exceptions import (
    ApiStatusError,
    DecodeError,
    LLMError,
    ResponseFormatError,
    StreamingError,
    TransportError,
)
from .models import (
    AnalysisClientConfig,
    AnalysisRequest,
    LLMMessage,
    MessageRole,
    UpdateCallback,
    UpdateSnapshot,
)
from .prompts import build_analysis_request

__all__ = [
    "AnalysisClientConfig",
    "AnalysisRequest",
    "ApiStatusError",
    "DecodeError",
    "LLMError",
    "LLMMessage",
    "MessageRole",
    "ResponseFormatError",
    "StreamingError",
    "TransportError",
    "UpdateCallback",
    "UpdateSnapshot",
    "build_analysis_request",
]
