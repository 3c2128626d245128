"""
Supported languages for document translation.

Codes are ISO 639-1. Text translation and quality hints use the human label
(e.g. "Spanish"); document translation uses the code (e.g. "es").
"""
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Language:
    """A selectable language"""
    value: str  # ISO 639-1 code
    label: str

    def to_dict(self) -> dict:
        return {'value': self.value, 'label': self.label}


LANGUAGES: List[Language] = [
    Language('en', 'English'),
    Language('es', 'Spanish'),
    Language('fr', 'French'),
    Language('de', 'German'),
    Language('it', 'Italian'),
    Language('pt', 'Portuguese'),
    Language('ru', 'Russian'),
    Language('ja', 'Japanese'),
    Language('ko', 'Korean'),
    Language('zh', 'Chinese (Simplified)'),
    Language('ar', 'Arabic'),
    Language('hi', 'Hindi'),
    Language('fa', 'Persian'),
    Language('nl', 'Dutch'),
    Language('pl', 'Polish'),
    Language('sv', 'Swedish'),
    Language('tr', 'Turkish'),
]


def find_language(value: Optional[str]) -> Optional[Language]:
    """
    Find a supported language by code or label (case-insensitive).

    Detection services answer with either form, e.g. "fr" or "French".
    """
    if not value:
        return None
    needle = value.strip().lower()
    for language in LANGUAGES:
        if language.label.lower() == needle or language.value.lower() == needle:
            return language
    return None


def language_label(code: str) -> str:
    """Human label for a code, or the code itself when unknown"""
    for language in LANGUAGES:
        if language.value == code:
            return language.label
    return code


def is_supported(code: str) -> bool:
    return any(language.value == code for language in LANGUAGES)


def target_languages(source_code: Optional[str] = None) -> List[Language]:
    """All languages a document in ``source_code`` can be translated into"""
    return [language for language in LANGUAGES if language.value != source_code]
