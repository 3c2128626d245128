"""
Upload → extract → detect → translate → review workflow.

TranslationSession holds the state of one document being translated and
drives the remote operations in the order the user experiences them.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from doctranslate.config import TranslationConfig
from .documents import DocumentFile, parse_data_uri, translated_filename
from .exceptions import ValidationError, error_message
from .languages import Language, find_language, is_supported, language_label, target_languages
from .llm import LLMProvider, create_llm_provider
from .retry import RetryPolicy
from .services import (
    DetectSourceLanguageInput,
    DocumentTranslationClient,
    ExtractTextFromDocumentInput,
    GenerateTranslationQualityHintsInput,
    TranslateDocumentInput,
    TranslateTextInput,
    detect_source_language,
    extract_text_from_document,
    generate_translation_quality_hints,
    translate_document,
    translate_text,
)

logger = logging.getLogger(__name__)


@dataclass
class TranslationResult:
    """Outcome of translating one document"""
    filename: str
    source_language: str
    target_language: str
    translated_text: str
    translated_document_data_uri: str
    download_filename: str
    completed_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self, include_document: bool = False) -> dict:
        data = {
            'filename': self.filename,
            'source_language': self.source_language,
            'target_language': self.target_language,
            'translated_text': self.translated_text,
            'download_filename': self.download_filename,
            'completed_at': self.completed_at
        }
        if include_document:
            data['translated_document_data_uri'] = self.translated_document_data_uri
        return data


class TranslationSession:
    """State and actions for translating a single uploaded document"""

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        document_client: Optional[DocumentTranslationClient] = None,
        policy: Optional[RetryPolicy] = None,
        auto_detect: bool = True,
        detection_backend: Optional[str] = None,
        log_callback: Optional[Callable[[str, str], None]] = None
    ):
        """
        Args:
            provider: LLM provider for extraction, detection, translation and hints
            document_client: Client for formatted document translation
            policy: Retry policy shared by every remote call of the session
            auto_detect: Detect the source language after extraction
            detection_backend: 'llm' or 'local'
            log_callback: Callback for logging (level, message)
        """
        self.provider = provider
        self.document_client = document_client
        self.policy = policy
        self.auto_detect = auto_detect
        self.detection_backend = detection_backend
        self.log_callback = log_callback
        self._reset()

    def _reset(self):
        self.document: Optional[DocumentFile] = None
        self.original_text = ''
        self.source_language = ''
        self.target_language = ''
        self.detected_language_label = ''
        self.detection_confidence: Optional[float] = None
        self.detection_error: Optional[str] = None
        self.translated_text = ''
        self.translated_document_data_uri: Optional[str] = None
        self.quality_hints = ''

    def _log(self, level: str, message: str):
        if self.log_callback:
            self.log_callback(level, message)
        else:
            logger.log(getattr(logging, level.upper(), logging.INFO), message)

    # === Language selection ===

    def set_auto_detect(self, enabled: bool):
        """Toggle auto-detection; any chosen or detected source is cleared"""
        self.auto_detect = enabled
        self.source_language = ''
        self.detected_language_label = ''
        self.detection_confidence = None

    def set_source_language(self, code: str):
        if not is_supported(code):
            raise ValidationError(f"Unsupported source language: {code}")
        self.source_language = code

    def set_target_language(self, code: str):
        if not is_supported(code):
            raise ValidationError(f"Unsupported target language: {code}")
        self.target_language = code

    def target_languages(self) -> List[Language]:
        return target_languages(self.source_language or None)

    # === Upload ===

    async def load_document(self, document: DocumentFile) -> str:
        """
        Extract the text of a new document and, when enabled, detect its language.

        Extraction failure clears the session and re-raises. Detection failure
        is recorded in ``detection_error`` and leaves the source language unset.

        Returns:
            The extracted text
        """
        target = self.target_language
        auto_detect = self.auto_detect
        self.clear()
        self.auto_detect = auto_detect
        self.target_language = target
        self.document = document

        try:
            result = await extract_text_from_document(
                ExtractTextFromDocumentInput(document.data_uri),
                provider=self.provider,
                policy=self.policy,
                log_callback=self.log_callback
            )
        except Exception as e:
            self._log("error", f"Text extraction failed: {error_message(e)}")
            self.clear()
            raise
        self.original_text = result.extracted_text

        if self.auto_detect:
            await self.detect_language()
        return self.original_text

    async def detect_language(self) -> Optional[Language]:
        """Detect the source language of the extracted text"""
        try:
            result = await detect_source_language(
                DetectSourceLanguageInput(self.original_text),
                provider=self.provider,
                policy=self.policy,
                backend=self.detection_backend,
                log_callback=self.log_callback
            )
        except Exception as e:
            self.detection_error = error_message(e)
            self._log("warning", f"Language detection failed: {self.detection_error}")
            return None

        language = find_language(result.language_code)
        if language is None:
            self.detection_error = f"Detected language '{result.language_code}' is not supported"
            self._log("warning", self.detection_error)
            return None

        self.source_language = language.value
        self.detected_language_label = language.label
        self.detection_confidence = result.confidence
        self.detection_error = None
        self._log("info", f"Source language set to {language.label}.")
        return language

    def restore(self, document: DocumentFile, original_text: str,
                source_language: str, target_language: str):
        """Rebuild a session from a previous upload (e.g. a web job)"""
        self.clear()
        self.document = document
        self.original_text = original_text
        self.set_source_language(source_language)
        self.set_target_language(target_language)

    # === Translation ===

    async def translate(self) -> TranslationResult:
        """
        Translate the raw text and the formatted document concurrently.

        If either call fails, the other is cancelled and awaited before the
        error is re-raised.

        Raises:
            ValidationError: If document, text or languages are missing
        """
        if not self.document or not self.original_text or not self.source_language or not self.target_language:
            raise ValidationError(
                "A document, its extracted text, a source language and a target language are required"
            )

        self.translated_text = ''
        self.translated_document_data_uri = None

        source_code = self.source_language
        target_code = self.target_language

        text_task = asyncio.ensure_future(
            translate_text(
                TranslateTextInput(
                    text=self.original_text,
                    source_language=language_label(source_code),
                    target_language=language_label(target_code)
                ),
                provider=self.provider,
                policy=self.policy,
                log_callback=self.log_callback
            )
        )
        document_task = asyncio.ensure_future(
            translate_document(
                TranslateDocumentInput(
                    document_data_uri=self.document.data_uri,
                    mime_type=self.document.mime_type,
                    source_language=source_code,
                    target_language=target_code
                ),
                client=self.document_client,
                policy=self.policy,
                log_callback=self.log_callback
            )
        )
        tasks = (text_task, document_task)

        try:
            text_result, document_result = await asyncio.gather(*tasks)
        except BaseException:
            # The first failure ends the translation; the sibling must not keep retrying
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        self.translated_text = text_result.translated_text
        self.translated_document_data_uri = document_result.translated_document_data_uri
        return TranslationResult(
            filename=self.document.filename,
            source_language=source_code,
            target_language=target_code,
            translated_text=self.translated_text,
            translated_document_data_uri=self.translated_document_data_uri,
            download_filename=self.download_filename()
        )

    async def fetch_quality_hints(self) -> str:
        """Ask the model for quality commentary on the current translation"""
        if not self.original_text or not self.translated_text or not self.source_language or not self.target_language:
            raise ValidationError("Need original text, translated text, and languages to generate hints.")

        result = await generate_translation_quality_hints(
            GenerateTranslationQualityHintsInput(
                original_text=self.original_text,
                translated_text=self.translated_text,
                source_language=language_label(self.source_language),
                target_language=language_label(self.target_language)
            ),
            provider=self.provider,
            policy=self.policy,
            log_callback=self.log_callback
        )
        self.quality_hints = result.quality_hints
        return self.quality_hints

    # === Download ===

    def download_filename(self) -> str:
        if not self.document or not self.target_language:
            raise ValidationError("Translated document is not available for download.")
        return translated_filename(self.document.filename, self.target_language)

    def translated_document_bytes(self) -> bytes:
        if not self.translated_document_data_uri:
            raise ValidationError("Translated document is not available for download.")
        _, data = parse_data_uri(self.translated_document_data_uri)
        return data

    def clear(self):
        """Forget the current document and all results"""
        self._reset()

    async def aclose(self):
        """Close the HTTP clients of the provider and the document client"""
        if self.provider is not None:
            await self.provider.close()
        if self.document_client is not None:
            await self.document_client.close()


def create_session(config: TranslationConfig,
                   log_callback: Optional[Callable[[str, str], None]] = None) -> TranslationSession:
    """
    Build a session wired to the provider, retry policy and document client
    described by ``config``.

    Raises:
        ValidationError: If the retry settings are invalid
        ConfigurationError: If the provider cannot be configured
    """
    try:
        policy = RetryPolicy(
            max_attempts=config.max_attempts,
            initial_delay=config.initial_delay,
            backoff_factor=config.backoff_factor
        )
    except ValueError as e:
        raise ValidationError(f"Invalid retry settings: {e}") from e

    provider = create_llm_provider(
        config.llm_provider,
        api_key=config.provider_api_key,
        model=config.model,
        api_endpoint=config.api_endpoint,
        timeout=config.timeout
    )
    return TranslationSession(
        provider=provider,
        document_client=DocumentTranslationClient(timeout=config.timeout),
        policy=policy,
        auto_detect=config.auto_detect,
        detection_backend=config.detection_backend,
        log_callback=log_callback
    )
