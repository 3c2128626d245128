"""
Formatted document translation through Google Cloud Translation (v3).

- DocumentTranslationClient: thin async client for the translateDocument REST method
- translate_document: translate a document data URI, preserving its formatting
- TranslateDocumentInput / TranslateDocumentOutput: request and result types
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from doctranslate.config import (
    GOOGLE_CLOUD_ACCESS_TOKEN,
    GOOGLE_CLOUD_LOCATION,
    GOOGLE_CLOUD_PROJECT,
    REQUEST_TIMEOUT,
    TRANSLATION_API_BASE,
)
from ..documents import build_data_uri, data_uri_payload
from ..exceptions import (
    ConfigurationError,
    DocumentTranslationError,
    ServiceError,
    ServiceUnavailableError,
    error_for_status,
)
from ..retry import RetryExecutor, RetryPolicy
from .common import require_fields

logger = logging.getLogger(__name__)

TRANSLATION_FAILED_MESSAGE = (
    "Failed to translate the document. The format may not be supported or the file may be corrupted."
)


@dataclass
class TranslateDocumentInput:
    # Expected format: 'data:<mimetype>;base64,<encoded_data>'
    document_data_uri: str
    mime_type: str
    source_language: str  # ISO 639-1 code
    target_language: str  # ISO 639-1 code


@dataclass
class TranslateDocumentOutput:
    translated_document_data_uri: str


class DocumentTranslationClient:
    """Client for Cloud Translation's translateDocument method"""

    service_name = "cloud-translation"

    def __init__(
        self,
        project_id: str = GOOGLE_CLOUD_PROJECT,
        access_token: str = GOOGLE_CLOUD_ACCESS_TOKEN,
        location: str = GOOGLE_CLOUD_LOCATION,
        api_base: str = TRANSLATION_API_BASE,
        timeout: int = REQUEST_TIMEOUT
    ):
        self.project_id = project_id
        self.access_token = access_token
        self.location = location
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def parent(self) -> str:
        return f"projects/{self.project_id}/locations/{self.location}"

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/{self.parent}:translateDocument"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def translate_document(self, content: str, mime_type: str,
                                 source_language: str, target_language: str) -> bytes:
        """
        Translate a base64-encoded document.

        Returns:
            Raw bytes of the translated document

        Raises:
            ConfigurationError: Project or access token not configured
            ServiceUnavailableError: HTTP 503 (transient)
            ServiceError: Other HTTP or transport failures
            DocumentTranslationError: Response carries no document
        """
        if not self.project_id or not self.access_token:
            raise ConfigurationError(
                "Document translation requires GOOGLE_CLOUD_PROJECT and GOOGLE_CLOUD_ACCESS_TOKEN"
            )

        request_body = {
            "sourceLanguageCode": source_language,
            "targetLanguageCode": target_language,
            "documentInputConfig": {
                "content": content,
                "mimeType": mime_type
            }
        }
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "x-goog-user-project": self.project_id
        }

        client = await self._get_client()
        try:
            response = await client.post(self.endpoint, json=request_body, headers=headers)
        except httpx.HTTPError as e:
            if "503" in str(e):
                raise ServiceUnavailableError(f"{self.service_name} unavailable: {e}",
                                              service=self.service_name) from e
            raise ServiceError(f"{self.service_name} request failed: {e}",
                               service=self.service_name) from e

        if response.is_error:
            raise error_for_status(
                response.status_code,
                f"{self.service_name} HTTP {response.status_code}: {response.text[:500]}",
                service=self.service_name
            )

        try:
            outputs = response.json().get("documentTranslation", {}).get("byteStreamOutputs") or []
        except json.JSONDecodeError as e:
            raise DocumentTranslationError(f"{self.service_name} returned invalid JSON: {e}",
                                           service=self.service_name) from e
        if not outputs or not outputs[0]:
            raise DocumentTranslationError("Document translation did not return content.",
                                           service=self.service_name)
        return base64.b64decode(outputs[0])


async def translate_document(
    request: TranslateDocumentInput,
    client: Optional[DocumentTranslationClient] = None,
    policy: Optional[RetryPolicy] = None,
    log_callback=None
) -> TranslateDocumentOutput:
    """
    Translate a formatted document, keeping its layout.

    Transient upstream unavailability is retried under ``policy``; any other
    failure surfaces as DocumentTranslationError with a user-facing message.
    """
    require_fields(request, 'document_data_uri', 'mime_type', 'source_language', 'target_language')
    content = data_uri_payload(request.document_data_uri)

    owned = client is None
    client = client or DocumentTranslationClient()
    executor = RetryExecutor(policy, log_callback=log_callback)
    try:
        translated = await executor.execute(
            lambda: client.translate_document(content, request.mime_type,
                                              request.source_language, request.target_language),
            operation_id="translate_document"
        )
    except ServiceError as e:
        if isinstance(e, DocumentTranslationError) or executor.policy.retryable(e):
            raise
        logger.error("Document translation failed: %s", e)
        wrapped = DocumentTranslationError(
            TRANSLATION_FAILED_MESSAGE,
            status_code=e.status_code,
            service=client.service_name
        )
        wrapped.attempts_made = getattr(e, 'attempts_made', 1)
        wrapped.retries_exhausted = getattr(e, 'retries_exhausted', False)
        raise wrapped from e
    finally:
        if owned:
            await client.close()

    return TranslateDocumentOutput(build_data_uri(translated, request.mime_type))
