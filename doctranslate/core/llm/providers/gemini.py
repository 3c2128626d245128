"""
Google Gemini provider implementation.

This module provides the GeminiProvider class for interacting with
Google's Gemini API.

Features:
    - Multimodal input: documents are sent inline (PDF, images, Office files)
    - Native JSON output mode
    - Large context windows
"""

from typing import List, Optional, Sequence

from ..base import DocumentPart, LLMProvider, LLMResponse
from ...exceptions import LLMResponseError

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider(LLMProvider):
    """
    Provider for Google Gemini API.

    Configuration:
        api_key: Google AI API key (required)
        model: Gemini model name

    Example:
        >>> provider = GeminiProvider(
        ...     api_key="AI...",
        ...     model="gemini-2.0-flash"
        ... )
        >>> response = await provider.generate("Translate: Hello")
    """

    service_name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash", **kwargs):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Google AI API key
            model: Gemini model name (default: gemini-2.0-flash)
        """
        super().__init__(model, **kwargs)
        self.api_key = api_key
        self.api_endpoint = f"{GEMINI_API_BASE}/models/{model}:generateContent"

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key
        }

    async def get_available_models(self) -> List[str]:
        """
        Fetch Gemini models that support generateContent, excluding
        experimental and vision-only models.
        """
        client = await self._get_client()
        response = await client.get(f"{GEMINI_API_BASE}/models", headers=self._headers(), timeout=10)
        response.raise_for_status()

        models = []
        for model in response.json().get("models", []):
            model_name = model.get("name", "").replace("models/", "")
            if any(keyword in model_name.lower() for keyword in ("experimental", "vision", "-exp-")):
                continue
            if "generateContent" in model.get("supportedGenerationMethods", []):
                models.append(model_name)
        return models

    async def generate(self, prompt: str, system_prompt: Optional[str] = None,
                       documents: Optional[Sequence[DocumentPart]] = None,
                       json_output: bool = False) -> LLMResponse:
        """
        Generate text using Gemini API.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt (role/instructions)
            documents: Documents passed as inline data parts
            json_output: Request application/json output

        Returns:
            LLMResponse with content and token usage info
        """
        parts = [{"text": prompt}]
        for document in documents or ():
            parts.append({
                "inlineData": {
                    "mimeType": document.mime_type,
                    "data": document.data
                }
            })

        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": 0.2}
        }
        if json_output:
            payload["generationConfig"]["responseMimeType"] = "application/json"
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        response_json = await self._post_json(self.api_endpoint, payload, headers=self._headers())

        candidates = response_json.get("candidates") or []
        if not candidates:
            block_reason = response_json.get("promptFeedback", {}).get("blockReason")
            raise LLMResponseError(
                f"Gemini returned no candidates{f' (blocked: {block_reason})' if block_reason else ''}",
                service=self.service_name
            )

        candidate = candidates[0]
        text_parts = candidate.get("content", {}).get("parts", [])
        response_text = "".join(part.get("text", "") for part in text_parts)

        usage_metadata = response_json.get("usageMetadata", {})
        return LLMResponse(
            content=response_text,
            prompt_tokens=usage_metadata.get("promptTokenCount", 0),
            completion_tokens=usage_metadata.get("candidatesTokenCount", 0),
            was_truncated=candidate.get("finishReason") == "MAX_TOKENS"
        )
