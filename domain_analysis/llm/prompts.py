"""Prompt text and request construction for domain analysis."""

from __future__ import annotations

from .models import DEFAULT_MAX_TOKENS, AnalysisRequest, LLMMessage, MessageRole

ANALYST_SYSTEM_PROMPT = """You are a professional domain name analyst and domain valuation expert. \
For the domain the user provides, give a detailed analysis covering:
1. The domain's basic composition and type (generic, industry-specific, etc.)
2. Its brand value, memorability and market potential
3. An approximate valuation range in the current market
4. Recommended use cases and industries

Keep the analysis objective and professional, and support your views with \
concrete reasons."""

USER_PROMPT_TEMPLATE = (
    "Please analyze the value, suitable use cases and recommended industries "
    "of the following domain: {domain}"
)


def build_analysis_request(
    domain: str,
    *,
    model: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    stream: bool = True,
) -> AnalysisRequest:
    """Build the system/user message pair for analysing `domain`.

    Raises:
        ValueError: If the domain is empty or whitespace.
    """
    domain = domain.strip()
    if not domain:
        raise ValueError("domain must be a non-empty string")

    return AnalysisRequest(
        domain=domain,
        messages=(
            LLMMessage(role=MessageRole.SYSTEM, content=ANALYST_SYSTEM_PROMPT),
            LLMMessage(
                role=MessageRole.USER,
                content=USER_PROMPT_TEMPLATE.format(domain=domain),
            ),
        ),
        model=model,
        max_tokens=max_tokens,
        stream=stream,
    )
