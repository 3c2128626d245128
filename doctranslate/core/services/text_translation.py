"""
Raw text translation through the language model.

- translate_text: translate text between two languages
- TranslateTextInput / TranslateTextOutput: request and result types
"""
from dataclasses import dataclass
from typing import Optional

from ..llm import LLMProvider
from ..llm.extraction import require_field
from ..prompts import TRANSLATE_TEXT_PROMPT
from ..retry import RetryExecutor, RetryPolicy
from .common import provider_scope, require_fields


@dataclass
class TranslateTextInput:
    text: str
    source_language: str  # e.g. "English"
    target_language: str  # e.g. "Spanish"


@dataclass
class TranslateTextOutput:
    translated_text: str


async def translate_text(
    request: TranslateTextInput,
    provider: Optional[LLMProvider] = None,
    policy: Optional[RetryPolicy] = None,
    log_callback=None
) -> TranslateTextOutput:
    """Translate ``request.text`` from the source to the target language"""
    require_fields(request, 'text', 'source_language', 'target_language')
    prompt = TRANSLATE_TEXT_PROMPT.format(
        source_language=request.source_language,
        target_language=request.target_language,
        text=request.text
    )

    async with provider_scope(provider) as llm:
        async def translate():
            payload = await llm.generate_json(prompt)
            return TranslateTextOutput(require_field(payload, 'translatedText', str, llm.service_name))

        return await RetryExecutor(policy, log_callback=log_callback).execute(
            translate, operation_id="translate_text"
        )
