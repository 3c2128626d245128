"""
Remote operations of the translation service.

Each operation takes a typed request, performs its remote call through the
shared retry policy and returns a typed result.
"""
from .document_translation import (
    DocumentTranslationClient,
    TranslateDocumentInput,
    TranslateDocumentOutput,
    translate_document,
)
from .language_detection import (
    DetectSourceLanguageInput,
    DetectSourceLanguageOutput,
    detect_source_language,
)
from .quality_hints import (
    GenerateTranslationQualityHintsInput,
    GenerateTranslationQualityHintsOutput,
    generate_translation_quality_hints,
)
from .text_extraction import (
    ExtractTextFromDocumentInput,
    ExtractTextFromDocumentOutput,
    extract_text_from_document,
)
from .text_translation import (
    TranslateTextInput,
    TranslateTextOutput,
    translate_text,
)

__all__ = [
    'DocumentTranslationClient',
    'TranslateDocumentInput',
    'TranslateDocumentOutput',
    'translate_document',
    'DetectSourceLanguageInput',
    'DetectSourceLanguageOutput',
    'detect_source_language',
    'GenerateTranslationQualityHintsInput',
    'GenerateTranslationQualityHintsOutput',
    'generate_translation_quality_hints',
    'ExtractTextFromDocumentInput',
    'ExtractTextFromDocumentOutput',
    'extract_text_from_document',
    'TranslateTextInput',
    'TranslateTextOutput',
    'translate_text',
]
