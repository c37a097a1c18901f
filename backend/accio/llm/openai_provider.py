"""
OpenAI-compatible LLM Provider.
Talks to any endpoint implementing the ``/chat/completions`` and ``/models``
routes of the OpenAI HTTP API.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse

logger = logging.getLogger(__name__)


class LLMProviderError(Exception):
    """The provider answered, but not with something we can use."""


class OpenAIProvider(LLMProvider):
    """
    Provider for OpenAI-style chat completion APIs.

    One ``httpx.AsyncClient`` is reused for every call between ``start()``
    and ``aclose()``. A client can also be injected, in which case its
    lifecycle stays with the caller.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        default_temperature: float = 0.7,
        default_max_tokens: int = 2000,
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
        log_calls: bool = True,
    ):
        super().__init__(api_key, model, base_url.rstrip("/"), default_temperature, default_max_tokens)
        self.timeout = timeout
        self.log_calls = log_calls
        self._client = http_client
        self._owns_client = http_client is None

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            await self.start()
        return self._client

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send one request to the Chat Completions endpoint."""
        start_time = time.time()
        url = f"{self.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": self._format_messages(messages),
            "max_tokens": max_tokens or self.default_max_tokens,
            "temperature": temperature if temperature is not None else self.default_temperature,
        }

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"LLM API call starting: provider={self.name}, model={payload['model']}, "
                f"temperature={payload['temperature']}, {len(messages)} messages"
            )

        client = await self._get_client()
        resp = await client.post(url, json=payload, headers=self._get_headers())
        resp.raise_for_status()

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMProviderError(f"Malformed chat completion response: {e}") from e
        if not isinstance(content, str):
            raise LLMProviderError("Chat completion response has no text content")

        usage = data.get("usage") or {}
        duration_ms = (time.time() - start_time) * 1000

        if self.log_calls:
            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": self.name,
                    "model": data.get("model", payload["model"]),
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "duration_ms": round(duration_ms, 2),
                }}
            )

        return LLMResponse(
            content=content,
            model=data.get("model", payload["model"]),
            usage=usage,
        )

    async def list_models(self) -> List[Dict[str, Any]]:
        client = await self._get_client()
        resp = await client.get(f"{self.base_url}/models", headers=self._get_headers())
        resp.raise_for_status()
        try:
            return list(resp.json()["data"])
        except (ValueError, KeyError, TypeError) as e:
            raise LLMProviderError(f"Malformed model list response: {e}") from e
