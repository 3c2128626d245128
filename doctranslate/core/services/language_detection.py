"""
Automatic detection of a document's source language.

- detect_source_language: run the detection through the configured backend
- DetectSourceLanguageInput / DetectSourceLanguageOutput: request and result types
"""
import logging
from dataclasses import dataclass
from typing import Optional

from doctranslate.config import DETECTION_BACKEND
from doctranslate.utils.language_detector import LanguageDetector
from ..exceptions import LLMResponseError, ValidationError
from ..llm import LLMProvider
from ..llm.extraction import require_field
from ..prompts import DETECT_LANGUAGE_PROMPT
from ..retry import RetryExecutor, RetryPolicy
from .common import provider_scope, require_fields

logger = logging.getLogger(__name__)


@dataclass
class DetectSourceLanguageInput:
    text: str  # The text content of the document to detect the language from


@dataclass
class DetectSourceLanguageOutput:
    language_code: str  # ISO 639-1 code of the detected language
    confidence: float  # 0.0-1.0

    def to_dict(self) -> dict:
        return {'language_code': self.language_code, 'confidence': self.confidence}


def _parse_detection(payload: dict, service: str) -> DetectSourceLanguageOutput:
    language_code = require_field(payload, 'languageCode', str, service).strip()
    if not language_code:
        raise LLMResponseError("Model returned an empty language code", service=service)
    confidence = require_field(payload, 'confidence', float, service)
    return DetectSourceLanguageOutput(language_code, min(max(confidence, 0.0), 1.0))


async def detect_source_language(
    request: DetectSourceLanguageInput,
    provider: Optional[LLMProvider] = None,
    policy: Optional[RetryPolicy] = None,
    backend: Optional[str] = None,
    log_callback=None
) -> DetectSourceLanguageOutput:
    """
    Detect the language of ``request.text``.

    Args:
        request: Text to analyze
        provider: LLM provider (defaults to the configured one)
        policy: Retry policy for the remote call
        backend: 'llm' (remote model) or 'local' (langdetect, offline)
        log_callback: Retry log callback (level, message)
    """
    require_fields(request, 'text')
    backend = (backend or DETECTION_BACKEND).lower()

    if backend == 'local':
        code, confidence = LanguageDetector.detect_language(request.text)
        if not code:
            raise ValidationError("Text is too short or ambiguous to detect its language")
        return DetectSourceLanguageOutput(code, confidence)

    async with provider_scope(provider) as llm:
        prompt = DETECT_LANGUAGE_PROMPT.format(text=request.text)

        async def detect():
            payload = await llm.generate_json(prompt)
            return _parse_detection(payload, llm.service_name)

        result = await RetryExecutor(policy, log_callback=log_callback).execute(
            detect, operation_id="detect_source_language"
        )

    logger.info("Detected source language %s (confidence %.2f)", result.language_code, result.confidence)
    return result
