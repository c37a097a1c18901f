"""
LLM Provider Base - Abstract base for text-generation API providers.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


@dataclass
class LLMMessage:
    """A message in a chat-completion request."""
    role: str  # "system", "user", "assistant"
    content: str

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        return LLMMessage(role=role, content=text)


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.

    Providers may hold a network connection pool; the host process opens it
    with ``start()`` and releases it with ``aclose()``.
    """

    name = "base"

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_temperature: float = 0.7, default_max_tokens: int = 2000):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

    async def start(self) -> None:
        """Acquire long-lived resources. No-op by default."""

    async def aclose(self) -> None:
        """Release long-lived resources. No-op by default."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: Conversation messages
            temperature: Sampling temperature override
            max_tokens: Max output tokens override
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with the generated content
        """
        pass

    @abstractmethod
    async def list_models(self) -> List[Dict[str, Any]]:
        """Return the model catalogue advertised by the provider."""
        pass

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]
