"""
AI-generated translation quality estimates shown to the user as feedback.

- generate_translation_quality_hints: ask the model to review a translation
- GenerateTranslationQualityHintsInput / GenerateTranslationQualityHintsOutput
"""
from dataclasses import dataclass
from typing import Optional

from ..llm import LLMProvider
from ..llm.extraction import require_field
from ..prompts import QUALITY_HINTS_PROMPT, QUALITY_HINTS_SYSTEM_PROMPT
from ..retry import RetryExecutor, RetryPolicy
from .common import provider_scope, require_fields


@dataclass
class GenerateTranslationQualityHintsInput:
    original_text: str
    translated_text: str
    source_language: str
    target_language: str


@dataclass
class GenerateTranslationQualityHintsOutput:
    # Hints or quality estimates giving insight into the translation's likely accuracy
    quality_hints: str


async def generate_translation_quality_hints(
    request: GenerateTranslationQualityHintsInput,
    provider: Optional[LLMProvider] = None,
    policy: Optional[RetryPolicy] = None,
    log_callback=None
) -> GenerateTranslationQualityHintsOutput:
    require_fields(request, 'original_text', 'translated_text', 'source_language', 'target_language')
    prompt = QUALITY_HINTS_PROMPT.format(
        original_text=request.original_text,
        translated_text=request.translated_text,
        source_language=request.source_language,
        target_language=request.target_language
    )

    async with provider_scope(provider) as llm:
        async def hints():
            payload = await llm.generate_json(prompt, system_prompt=QUALITY_HINTS_SYSTEM_PROMPT)
            return GenerateTranslationQualityHintsOutput(
                require_field(payload, 'qualityHints', str, llm.service_name)
            )

        return await RetryExecutor(policy, log_callback=log_callback).execute(
            hints, operation_id="generate_translation_quality_hints"
        )
