"""Text-generation provider interface. Anthropic Messages API over httpx."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger("lectures.llm")

ANTHROPIC_VERSION = "2023-06-01"


@dataclass
class LLMError(Exception):
    """Structured error from the provider. Never expose raw tracebacks."""
    kind: str  # timeout | unavailable | provider_error | invalid_response
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class LLMProvider(ABC):
    """Abstract text generator: prompt in, text out."""

    name: str = "base"

    @abstractmethod
    def generate(self, prompt: str, max_tokens: int) -> str:
        """Return generated text or raise LLMError."""
        ...


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str = "https://api.anthropic.com",
        timeout_s: int = 120,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.name = "anthropic"

    def generate(self, prompt: str, max_tokens: int) -> str:
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                resp = client.post(f"{self.base_url}/v1/messages", json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise LLMError(kind="timeout", message="Model request timed out", details={"error": str(e)})
        except httpx.ConnectError as e:
            raise LLMError(kind="unavailable", message="Cannot connect to the model API", details={"error": str(e)})
        except httpx.HTTPError as e:
            logger.exception("Model request failed")
            raise LLMError(kind="provider_error", message="Model request failed", details={"error": str(e)})
        if resp.status_code != 200:
            raise LLMError(
                kind="provider_error",
                message=f"Model API returned {resp.status_code}",
                details={"status": resp.status_code, "body": resp.text[:200]},
            )
        try:
            data = resp.json()
        except json.JSONDecodeError as e:
            raise LLMError(kind="invalid_response", message="Invalid response from model API", details={"error": str(e)})
        text = _first_text_block(data)
        if not text:
            raise LLMError(kind="invalid_response", message="Empty response from model")
        logger.info("Model answered with %d chars", len(text))
        return text


def _first_text_block(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    for block in data.get("content") or []:
        if isinstance(block, dict) and block.get("type", "text") == "text":
            return block.get("text") or ""
    return ""


class FakeProvider(LLMProvider):
    """Test double: returns canned text or raises a canned error."""

    def __init__(self, canned: Optional[str] = None, error: Optional[LLMError] = None):
        self.canned = canned
        self.error = error
        self.name = "fake"
        self.calls: List[Dict[str, Any]] = []

    def generate(self, prompt: str, max_tokens: int) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        if self.canned is not None:
            return self.canned
        raise LLMError(kind="invalid_response", message="No canned response")


def get_provider(settings) -> Optional[LLMProvider]:
    """Provider for the configured key, or None when generation is disabled."""
    api_key = getattr(settings, "claude_api_key", None)
    if not api_key:
        return None
    return AnthropicProvider(
        api_key=api_key,
        model=getattr(settings, "llm_model", None) or "claude-sonnet-4-20250514",
        base_url=getattr(settings, "llm_base_url", None) or "https://api.anthropic.com",
        timeout_s=getattr(settings, "llm_timeout_s", None) or 120,
    )
