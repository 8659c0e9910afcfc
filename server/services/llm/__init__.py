"""Optional text generation for analyses and lecture summaries, with deterministic fallbacks."""

from server.services.llm.provider import (
    AnthropicProvider,
    FakeProvider,
    LLMError,
    LLMProvider,
    get_provider,
)
from server.services.llm.fallback import fallback_analysis, fallback_summary
from server.services.llm.validate import parse_summary_response

__all__ = [
    "AnthropicProvider",
    "FakeProvider",
    "LLMError",
    "LLMProvider",
    "get_provider",
    "fallback_analysis",
    "fallback_summary",
    "parse_summary_response",
]
