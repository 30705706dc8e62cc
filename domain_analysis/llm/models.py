"""
Core dataclasses for the domain analysis client.

This module provides:
- Message and request structures sent to the API
- The validated client configuration
- The snapshot handed to update callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ENDPOINT_URL = "https://api.deepseek.com/chat/completions"
DEFAULT_MODEL = "deepseek-reasoner"
DEFAULT_MAX_TOKENS = 4000
DEFAULT_FLUSH_INTERVAL_MS = 50
DEFAULT_REASONING_SENTINEL = "My analysis is as follows:"


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True)
class LLMMessage:
    """OpenAI-compatible message structure."""
    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class AnalysisRequest:
    """A fully built analysis request for one domain."""
    domain: str
    messages: tuple[LLMMessage, ...]
    model: str
    max_tokens: int = DEFAULT_MAX_TOKENS
    stream: bool = True

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body shared by streaming and non-streaming calls."""
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
            "stream": self.stream,
            "max_tokens": self.max_tokens,
        }


@dataclass(frozen=True)
class UpdateSnapshot:
    """Cumulative view of a streaming analysis, delivered to callbacks."""
    reasoning_content: str
    final_content: str
    is_reasoning_phase: bool


UpdateCallback = Callable[[UpdateSnapshot], None]


class AnalysisClientConfig(BaseModel):
    """Injected configuration for StreamingAnalysisClient."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    endpoint_url: str = Field(default=DEFAULT_ENDPOINT_URL, min_length=1)
    model: str = DEFAULT_MODEL
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    flush_interval_ms: int = Field(default=DEFAULT_FLUSH_INTERVAL_MS, gt=0)
    reasoning_sentinel: str = DEFAULT_REASONING_SENTINEL
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float = Field(default=120.0, gt=0)

    @property
    def flush_interval(self) -> float:
        """Flush interval in seconds."""
        return self.flush_interval_ms / 1000.0

