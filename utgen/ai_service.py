from typing import Optional

from .core.config import GenSettings
from .models import LLMResponse, Prompt
from .utils.llm_client import LLMConfig, build_messages, call_llm_sync


class AIService:
    """Generator AI Service using the chat-completion utility."""

    def __init__(self, config: LLMConfig, temperature: float = 0.2):
        self.config = config
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: GenSettings) -> "AIService":
        return cls(LLMConfig.from_settings(settings))

    @property
    def model(self) -> str:
        return self.config.model

    def call(self, prompt: Prompt, max_tokens: int, temperature: Optional[float] = None) -> LLMResponse:
        """Send a prompt and return the response text with token counts."""
        return call_llm_sync(
            build_messages(prompt.system, prompt.user),
            self.config,
            max_tokens=max_tokens,
            temperature=self.temperature if temperature is None else temperature,
        )
