"""Utility for chat-completion LLM calls.

This module provides the single HTTP entry point the generator uses to talk
to a model. Any OpenAI-compatible ``/chat/completions`` endpoint works; the
endpoint, model and key come from ``GenSettings``.

Usage:
    config = LLMConfig.from_settings(GenSettings())
    response = call_llm_sync(build_messages(system, user), config, max_tokens=4096)
    print(response.text, response.total_tokens)
"""

import requests
from typing import Dict, Any, List, Optional

from ..core.config import GenSettings
from ..core.logging import log_debug
from ..models import LLMResponse
from .exceptions import AIServiceError


class LLMConfig:
    """Configuration for the chat-completion API."""

    def __init__(self, endpoint_url: str, model: str, api_key: Optional[str] = None, timeout: int = 180):
        self.endpoint_url = endpoint_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: GenSettings) -> "LLMConfig":
        return cls(
            endpoint_url=settings.api_base_url,
            model=settings.model,
            api_key=settings.api_key,
            timeout=settings.llm_timeout,
        )

    @property
    def completions_url(self) -> str:
        if self.endpoint_url.endswith("/chat/completions"):
            return self.endpoint_url
        return f"{self.endpoint_url}/chat/completions"

    def validate(self):
        """Validate that the endpoint and model are configured."""
        if not self.endpoint_url:
            raise AIServiceError("LLM endpoint not configured. Set UTGEN_API_BASE_URL or pass --api-base-url.")
        if not self.model:
            raise AIServiceError("LLM model not configured. Set UTGEN_MODEL or pass --model.")


def build_messages(system_message: str, user_message: str) -> List[Dict[str, str]]:
    """Build chat messages from a system instruction and a user message."""
    messages = []
    if system_message:
        messages.append({"role": "system", "content": system_message})
    messages.append({"role": "user", "content": user_message})
    return messages


def _build_request_body(
    messages: List[Dict[str, str]],
    model: str,
    max_tokens: int,
    temperature: float,
) -> Dict[str, Any]:
    """Build the request body for the chat-completion API."""
    return {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "stream": False,
    }


def _build_headers(config: LLMConfig) -> Dict[str, str]:
    """Build headers for the API request."""
    headers = {
        "accept": "application/json",
        "Content-Type": "application/json",
    }
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"
    return headers


def _extract_text_from_response(result: Dict[str, Any]) -> str:
    """Extract text content from API response."""
    if "choices" in result and len(result["choices"]) > 0:
        choice = result["choices"][0]
        if "message" in choice and "content" in choice["message"]:
            return choice["message"]["content"] or ""
        if "text" in choice:
            return choice["text"]
    if "text" in result:
        return result["text"]
    if "content" in result:
        return result["content"]

    raise AIServiceError("Unexpected response format from LLM API", details=result)


def _extract_usage(result: Dict[str, Any]) -> Dict[str, int]:
    usage = result.get("usage") or {}
    return {
        "prompt_tokens": int(usage.get("prompt_tokens", 0) or 0),
        "completion_tokens": int(usage.get("completion_tokens", 0) or 0),
    }


def call_llm_sync(
    messages: List[Dict[str, str]],
    config: LLMConfig,
    max_tokens: int = 4096,
    temperature: float = 0.2,
) -> LLMResponse:
    """
    Make a synchronous call to the chat-completion API.

    Args:
        messages: Chat messages (system + user)
        config: Endpoint, model, key and timeout
        max_tokens: Maximum tokens in response
        temperature: Sampling temperature (0.0-1.0)

    Returns:
        LLMResponse with the response text and token usage

    Raises:
        AIServiceError: If the endpoint is unreachable or returns an error
    """
    config.validate()
    log_debug(f"model={config.model} max_tokens={max_tokens} temp={temperature}", "llm_client")

    request_body = _build_request_body(messages, config.model, max_tokens, temperature)
    try:
        response = requests.post(
            config.completions_url,
            json=request_body,
            headers=_build_headers(config),
            timeout=config.timeout,
        )
    except requests.RequestException as e:
        raise AIServiceError(f"LLM API request failed: {e}") from e

    if response.status_code != 200:
        raise AIServiceError(
            f"LLM API Error: {response.status_code} - {response.text}"
        )

    try:
        result = response.json()
    except ValueError as e:
        raise AIServiceError(f"LLM API returned invalid JSON: {e}") from e

    usage = _extract_usage(result)
    return LLMResponse(
        text=_extract_text_from_response(result),
        prompt_tokens=usage["prompt_tokens"],
        completion_tokens=usage["completion_tokens"],
    )
