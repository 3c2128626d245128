"""
LLM provider abstraction and factory
"""
from doctranslate.config import (
    API_ENDPOINT,
    DEFAULT_MODEL,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    LLM_PROVIDER,
    OPENAI_API_KEY,
    REQUEST_TIMEOUT,
)
from ..exceptions import ConfigurationError
from .base import DocumentPart, LLMProvider, LLMResponse
from .providers import GeminiProvider, OpenAICompatibleProvider

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_provider(provider_type: str = LLM_PROVIDER, **kwargs) -> LLMProvider:
    """Factory function to create LLM providers"""
    provider_type = (provider_type or LLM_PROVIDER).lower()
    timeout = kwargs.get("timeout") or REQUEST_TIMEOUT

    if provider_type == "gemini":
        api_key = kwargs.get("api_key") or GEMINI_API_KEY
        if not api_key:
            raise ConfigurationError(
                "Gemini provider requires an API key. Set GEMINI_API_KEY environment variable or pass api_key parameter."
            )
        model = kwargs.get("model")
        if not model or model == DEFAULT_MODEL:
            model = GEMINI_MODEL
        return GeminiProvider(api_key=api_key, model=model, timeout=timeout)

    if provider_type == "openai":
        return OpenAICompatibleProvider(
            api_endpoint=kwargs.get("api_endpoint") or API_ENDPOINT,
            model=kwargs.get("model") or DEFAULT_MODEL,
            api_key=kwargs.get("api_key") or OPENAI_API_KEY,
            timeout=timeout
        )

    raise ConfigurationError(
        f"Unknown LLM provider '{provider_type}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
    )


__all__ = [
    'DocumentPart',
    'LLMProvider',
    'LLMResponse',
    'GeminiProvider',
    'OpenAICompatibleProvider',
    'SUPPORTED_PROVIDERS',
    'create_llm_provider',
]
