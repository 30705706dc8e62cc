"""Streaming domain analysis client for reasoning chat-completion APIs."""

from __future__ import annotations

from .llm.client import StreamingAnalysisClient
from .llm.exceptions import ApiStatusError, LLMError, TransportError
from .llm.models import AnalysisClientConfig, UpdateSnapshot

__all__ = [
    "AnalysisClientConfig",
    "ApiStatusError",
    "LLMError",
    "StreamingAnalysisClient",
    "TransportError",
    "UpdateSnapshot",
]

__version__ = "0.1.0"
