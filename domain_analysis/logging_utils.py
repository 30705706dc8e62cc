"""
Centralized logging utilities for the domain analysis client.

This module provides decorators and helpers to standardize logging across
the codebase:
- Structured logging with contextual information
- Error category classification for log records
- Timing of async operations
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from .llm.exceptions import (
    ApiStatusError,
    DecodeError,
    LLMError,
    ResponseFormatError,
    TransportError,
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")
AsyncCallable = Callable[P, Awaitable[T]]

logger = structlog.get_logger(__name__)


def setup_logging(level: str | int = "INFO") -> None:
    """Route stdlib logging (and therefore structlog) at the given level."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        level = resolved
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)


def classify_error(error: BaseException) -> str:
    """
    Classify an error into a category used in log records.

    Args:
        error: The exception to classify

    Returns:
        The error category name
    """
    if isinstance(error, ApiStatusError):
        return "api_status_error"
    if isinstance(error, DecodeError):
        return "decode_error"
    if isinstance(error, ResponseFormatError):
        return "response_format_error"
    if isinstance(error, TransportError):
        if isinstance(error.__cause__, httpx.TimeoutException):
            return "timeout_error"
        return "transport_error"
    if isinstance(error, LLMError):
        return "llm_error"
    if isinstance(error, ValidationError):
        return "validation_error"
    if isinstance(error, TimeoutError | httpx.TimeoutException):
        return "timeout_error"
    if isinstance(error, ConnectionError | OSError | httpx.TransportError):
        return "connection_error"
    if isinstance(error, ValueError | TypeError):
        return "parameter_error"
    return "unknown_error"


def _failure_log_data(error: Exception, start_time: float | None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_category": classify_error(error),
        "error_message": str(error),
    }
    if isinstance(error, LLMError) and error.status_code is not None:
        data["status_code"] = error.status_code
    if start_time is not None:
        data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
    return data


def log_operation(
    operation: str,
    *,
    log_result: bool = False,
    log_timing: bool = True,
    context: dict[str, Any] | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator for logging async operations with structured context.

    Args:
        operation: Description of the operation being performed
        log_result: Whether to log function result
        log_timing: Whether to log execution timing
        context: Additional context to include in logs

    Returns:
        Decorated function with logging
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )

            operation_logger.info("Operation started")

            start_time = time.perf_counter() if log_timing else None

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                operation_logger.error(
                    "Operation failed", **_failure_log_data(e, start_time)
                )
                raise

            end_log_data: dict[str, Any] = {}
            if start_time is not None:
                end_log_data["duration_ms"] = round(
                    (time.perf_counter() - start_time) * 1000, 2
                )
            if log_result:
                end_log_data["result"] = result

            operation_logger.info("Operation completed successfully", **end_log_data)
            return result

        return wrapper
    return decorator


@asynccontextmanager
async def operation_context(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
    log_timing: bool = True,
):
    """
    Async context manager for operation logging.

    Args:
        operation: Description of the operation
        context: Additional context for logging
        log_timing: Whether to log operation timing

    Yields:
        Bound logger for the operation
    """
    operation_logger = logger.bind(
        operation=operation,
        **(context or {}),
    )

    operation_logger.info("Operation started")
    start_time = time.perf_counter() if log_timing else None

    try:
        yield operation_logger
    except Exception as e:
        operation_logger.error("Operation failed", **_failure_log_data(e, start_time))
        raise

    log_data: dict[str, Any] = {}
    if start_time is not None:
        log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)

    operation_logger.info("Operation completed successfully", **log_data)
