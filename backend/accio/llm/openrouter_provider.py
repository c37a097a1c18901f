"""
OpenRouter LLM Provider.
OpenAI-compatible API; OpenRouter additionally identifies the calling app
through the ``HTTP-Referer`` and ``X-Title`` headers.
"""

from typing import Dict, Optional

import httpx

from .openai_provider import OpenAIProvider


class OpenRouterProvider(OpenAIProvider):
    """Provider for the OpenRouter gateway."""

    name = "openrouter"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://openrouter.ai/api/v1",
        referer: str = "http://localhost:3000",
        app_title: str = "Accio AI Playground",
        default_temperature: float = 0.7,
        default_max_tokens: int = 2000,
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
        log_calls: bool = True,
    ):
        super().__init__(
            api_key,
            model=model,
            base_url=base_url,
            default_temperature=default_temperature,
            default_max_tokens=default_max_tokens,
            timeout=timeout,
            http_client=http_client,
            log_calls=log_calls,
        )
        self.referer = referer
        self.app_title = app_title

    def _get_headers(self) -> Dict[str, str]:
        headers = super()._get_headers()
        headers["HTTP-Referer"] = self.referer
        headers["X-Title"] = self.app_title
        return headers
