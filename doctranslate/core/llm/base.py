"""
Base classes and data structures for LLM providers.

This module defines the abstract base class that all LLM providers must implement,
as well as common data structures like LLMResponse.

Providers perform exactly one HTTP request per call and translate transport
failures into typed exceptions. Retrying is the caller's business
(see doctranslate.core.retry).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import json
import httpx

from doctranslate.config import REQUEST_TIMEOUT
from ..exceptions import (
    LLMConnectionError,
    LLMResponseError,
    ServiceUnavailableError,
    error_for_status,
)
from .extraction import extract_json_object


@dataclass
class LLMResponse:
    """Response from LLM with token usage information"""
    content: str
    prompt_tokens: int = 0  # Number of tokens in the prompt
    completion_tokens: int = 0  # Number of tokens in the response
    was_truncated: bool = False  # True if the model stopped on its output limit

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class DocumentPart:
    """A binary document attached to a prompt"""
    mime_type: str
    data: str  # base64 payload, without the data URI prefix


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    service_name = "llm"

    def __init__(self, model: str, timeout: int = REQUEST_TIMEOUT):
        """
        Initialize the LLM provider.

        Args:
            model: Model name/identifier
            timeout: Request timeout in seconds
        """
        self.model = model
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a persistent HTTP client with connection pooling"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                timeout=httpx.Timeout(self.timeout)
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _post_json(self, url: str, payload: Dict[str, Any],
                         headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON body.

        Raises:
            ServiceUnavailableError: HTTP 503
            LLMAuthenticationError: HTTP 401/403
            LLMRateLimitError: HTTP 429
            ServiceError: any other HTTP error status
            LLMConnectionError: timeouts and network failures
            LLMResponseError: body is not JSON
        """
        client = await self._get_client()
        try:
            response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise LLMConnectionError(f"{self.service_name} request timed out: {e}",
                                     service=self.service_name) from e
        except httpx.HTTPError as e:
            # Some proxies surface upstream overload only as an error message
            if "503" in str(e):
                raise ServiceUnavailableError(f"{self.service_name} unavailable: {e}",
                                              service=self.service_name) from e
            raise LLMConnectionError(f"{self.service_name} connection failed: {e}",
                                     service=self.service_name) from e

        if response.is_error:
            body = response.text[:500]
            retry_after = response.headers.get("retry-after")
            raise error_for_status(
                response.status_code,
                f"{self.service_name} HTTP {response.status_code} {response.reason_phrase}: {body}",
                service=self.service_name,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None
            )

        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"{self.service_name} returned invalid JSON: {e}",
                                   service=self.service_name) from e

    @abstractmethod
    async def generate(self, prompt: str, system_prompt: Optional[str] = None,
                       documents: Optional[Sequence[DocumentPart]] = None,
                       json_output: bool = False) -> LLMResponse:
        """
        Generate text from prompt.

        Args:
            prompt: The user prompt (content to process)
            system_prompt: Optional system prompt (role/instructions)
            documents: Optional documents the model should read
            json_output: Ask the model for a JSON object

        Returns:
            LLMResponse object with content and token usage info
        """
        pass

    async def generate_json(self, prompt: str, system_prompt: Optional[str] = None,
                            documents: Optional[Sequence[DocumentPart]] = None) -> Dict[str, Any]:
        """Generate and parse a JSON object response"""
        response = await self.generate(prompt, system_prompt=system_prompt,
                                       documents=documents, json_output=True)
        return extract_json_object(response.content, service=self.service_name)

    async def get_available_models(self) -> List[str]:
        """List model names offered by the provider (empty when unsupported)"""
        return []
