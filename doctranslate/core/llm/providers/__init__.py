"""
LLM Provider Implementations

Individual provider implementations for different LLM APIs.

Providers:
    - gemini: Google Gemini API (reads binary documents)
    - openai: OpenAI-compatible APIs
"""

from .gemini import GeminiProvider
from .openai import OpenAICompatibleProvider

__all__ = ['GeminiProvider', 'OpenAICompatibleProvider']
