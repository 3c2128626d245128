"""
OpenAI-compatible provider implementation.

This module provides the OpenAICompatibleProvider class for interacting with
OpenAI API and compatible endpoints (llama.cpp, LM Studio, vLLM, OpenAI, etc.).
"""

import base64
import binascii
from typing import List, Optional, Sequence

from ..base import DocumentPart, LLMProvider, LLMResponse
from ...exceptions import UnsupportedFormatError


class OpenAICompatibleProvider(LLMProvider):
    """OpenAI-compatible API provider (works with llama.cpp, LM Studio, vLLM, OpenAI, etc.)

    Chat completion APIs do not accept arbitrary binary attachments:
    text documents are decoded and inlined in the prompt, images are sent
    as image_url parts, anything else is rejected.
    """

    service_name = "openai"

    def __init__(self, api_endpoint: str, model: str, api_key: Optional[str] = None, **kwargs):
        super().__init__(model, **kwargs)
        self.api_endpoint = api_endpoint
        self.api_key = api_key

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _document_content(self, document: DocumentPart) -> dict:
        if document.mime_type.startswith("image/"):
            return {
                "type": "image_url",
                "image_url": {"url": f"data:{document.mime_type};base64,{document.data}"}
            }
        if document.mime_type.startswith("text/"):
            try:
                text = base64.b64decode(document.data).decode("utf-8", errors="replace")
            except (binascii.Error, ValueError) as e:
                raise UnsupportedFormatError(f"Could not decode text document: {e}",
                                             file_type=document.mime_type) from e
            return {"type": "text", "text": f"Document:\n{text}"}
        raise UnsupportedFormatError(
            f"The {self.service_name} provider cannot read '{document.mime_type}' documents; "
            f"use the gemini provider for binary formats",
            file_type=document.mime_type
        )

    async def generate(self, prompt: str, system_prompt: Optional[str] = None,
                       documents: Optional[Sequence[DocumentPart]] = None,
                       json_output: bool = False) -> LLMResponse:
        """
        Generate text using an OpenAI compatible API.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt (role/instructions)
            documents: Text or image documents to include
            json_output: Request a JSON object response

        Returns:
            LLMResponse with content and token usage info
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        if documents:
            content = [{"type": "text", "text": prompt}]
            content.extend(self._document_content(document) for document in documents)
            messages.append({"role": "user", "content": content})
        else:
            messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "temperature": 0.2
        }
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        response_json = await self._post_json(self.api_endpoint, payload, headers=self._headers())

        choice = (response_json.get("choices") or [{}])[0]
        response_text = choice.get("message", {}).get("content") or ""

        usage = response_json.get("usage", {})
        return LLMResponse(
            content=response_text,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            was_truncated=choice.get("finish_reason") == "length"
        )

    async def get_available_models(self) -> List[str]:
        """List models from the /models endpoint next to the chat endpoint"""
        base_url = self.api_endpoint.rsplit("/chat/completions", 1)[0]
        client = await self._get_client()
        response = await client.get(f"{base_url}/models", headers=self._headers(), timeout=10)
        response.raise_for_status()
        return [model.get("id") for model in response.json().get("data", []) if model.get("id")]
