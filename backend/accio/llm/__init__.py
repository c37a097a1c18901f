"""LLM module - provides unified interface for LLM API providers."""

from .base import LLMProvider, LLMMessage, LLMResponse
from .openai_provider import OpenAIProvider, LLMProviderError
from .openrouter_provider import OpenRouterProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'LLMProviderError',
    'OpenAIProvider',
    'OpenRouterProvider',
    'create_llm_provider',
]
