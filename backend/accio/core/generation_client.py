"""
Generation Client - one request to the text-generation provider per call.
"""

import logging
import time
from typing import Optional

from ..llm.base import LLMProvider, LLMMessage
from .exceptions import GenerationUnavailable
from .prompt_composer import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class GenerationClient:
    """
    Sends a composed prompt to the configured provider and returns the raw
    assistant text.

    Every failure (no provider configured, transport error, non-2xx status,
    unusable response body) surfaces as GenerationUnavailable. The cause is
    logged here and nowhere else. There is no retry.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider],
        temperature: float = 0.7,
        max_tokens: int = 2000,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    @property
    def is_configured(self) -> bool:
        return self.provider is not None

    async def generate(self, prompt: str) -> str:
        if self.provider is None:
            logger.warning("Generation requested but no LLM provider is configured")
            raise GenerationUnavailable()

        messages = [
            LLMMessage.text("system", self.system_prompt),
            LLMMessage.text("user", prompt),
        ]

        start_time = time.time()
        try:
            response = await self.provider.chat_completion(
                messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Generation call failed: {e}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": self.provider.name,
                    "model": self.provider.model,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise GenerationUnavailable() from e

        if not response.content.strip():
            logger.error(
                "Generation call returned empty content",
                extra={"extra_fields": {"provider": self.provider.name, "model": self.provider.model}}
            )
            raise GenerationUnavailable()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Generation returned {len(response.content)} chars")

        return response.content
