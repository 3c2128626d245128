"""
Unit tests for the supported language list.
"""
from doctranslate.core.languages import (
    LANGUAGES,
    find_language,
    is_supported,
    language_label,
    target_languages,
)


class TestLanguages:
    """Tests for language lookup helpers."""

    def test_codes_are_unique(self):
        codes = [language.value for language in LANGUAGES]
        assert len(codes) == len(set(codes)) == 17

    def test_find_by_code_or_label(self):
        assert find_language("fr").label == "French"
        assert find_language("French").value == "fr"
        assert find_language("  SPANISH ").value == "es"

    def test_find_unknown(self):
        assert find_language("xx") is None
        assert find_language("") is None
        assert find_language(None) is None

    def test_label_falls_back_to_code(self):
        assert language_label("zh") == "Chinese (Simplified)"
        assert language_label("xx") == "xx"

    def test_is_supported(self):
        assert is_supported("fa")
        assert not is_supported("French")

    def test_target_languages_exclude_source(self):
        targets = target_languages("en")
        assert len(targets) == 16
        assert all(language.value != "en" for language in targets)

    def test_target_languages_without_source(self):
        assert target_languages() == LANGUAGES

    def test_to_dict(self):
        assert find_language("de").to_dict() == {'value': 'de', 'label': 'German'}
