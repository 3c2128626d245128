"""
Unit tests for the LLM-backed remote operations.
"""
import pytest

import doctranslate.core.services.common as common_module
from conftest import FakeProvider, llm_json, unavailable
from doctranslate.core.documents import build_data_uri
from doctranslate.core.exceptions import (
    InvalidDataUriError,
    LLMAuthenticationError,
    LLMResponseError,
    ServiceUnavailableError,
    ValidationError,
)
from doctranslate.core.retry import RetryPolicy
from doctranslate.core.services import (
    DetectSourceLanguageInput,
    ExtractTextFromDocumentInput,
    GenerateTranslationQualityHintsInput,
    TranslateTextInput,
    detect_source_language,
    extract_text_from_document,
    generate_translation_quality_hints,
    translate_text,
)


class TestExtractTextFromDocument:
    """Tests for extract_text_from_document."""

    @pytest.mark.asyncio
    async def test_document_is_attached(self, instant_policy):
        provider = FakeProvider(llm_json(extractedText="Quarterly report"))
        uri = build_data_uri(b"%PDF-1.4", "application/pdf")

        result = await extract_text_from_document(ExtractTextFromDocumentInput(uri), provider, instant_policy)

        assert result.extracted_text == "Quarterly report"
        call = provider.calls[0]
        assert call['json_output'] is True
        assert call['system_prompt']
        assert call['documents'][0].mime_type == "application/pdf"
        assert call['documents'][0].data == uri.split(',', 1)[1]

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self, instant_policy):
        provider = FakeProvider(unavailable(), llm_json(extractedText="ok"))
        uri = build_data_uri(b"x", "text/plain")

        result = await extract_text_from_document(ExtractTextFromDocumentInput(uri), provider, instant_policy)

        assert result.extracted_text == "ok"
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_empty_text_is_a_valid_result(self, instant_policy):
        provider = FakeProvider(llm_json(extractedText=""))
        uri = build_data_uri(b"\x89PNG", "image/png")

        result = await extract_text_from_document(ExtractTextFromDocumentInput(uri), provider, instant_policy)
        assert result.extracted_text == ""

    @pytest.mark.asyncio
    async def test_invalid_data_uri(self, instant_policy):
        provider = FakeProvider()
        with pytest.raises(InvalidDataUriError):
            await extract_text_from_document(ExtractTextFromDocumentInput("hello"), provider, instant_policy)
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_missing_uri(self, instant_policy):
        with pytest.raises(ValidationError, match="document_data_uri"):
            await extract_text_from_document(ExtractTextFromDocumentInput(""), FakeProvider(), instant_policy)


class TestDetectSourceLanguage:
    """Tests for detect_source_language."""

    @pytest.mark.asyncio
    async def test_llm_backend(self, instant_policy):
        provider = FakeProvider(llm_json(languageCode="fr", confidence=0.97))

        result = await detect_source_language(DetectSourceLanguageInput("Bonjour à tous"), provider,
                                              instant_policy, backend="llm")

        assert result.language_code == "fr"
        assert result.confidence == 0.97
        assert "Bonjour à tous" in provider.calls[0]['prompt']
        assert result.to_dict() == {'language_code': 'fr', 'confidence': 0.97}

    @pytest.mark.asyncio
    async def test_confidence_is_clamped(self, instant_policy):
        provider = FakeProvider(llm_json(languageCode="es", confidence=7))
        result = await detect_source_language(DetectSourceLanguageInput("Hola"), provider, instant_policy, backend="llm")
        assert result.confidence == 1.0

    @pytest.mark.asyncio
    async def test_malformed_answer_is_not_retried(self, instant_policy):
        provider = FakeProvider(llm_json(language="fr"), llm_json(languageCode="fr", confidence=1))

        with pytest.raises(LLMResponseError):
            await detect_source_language(DetectSourceLanguageInput("Bonjour"), provider, instant_policy, backend="llm")
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_local_backend_needs_no_provider(self):
        text = "Der schnelle braune Fuchs springt über den faulen Hund und läuft in den Wald."
        result = await detect_source_language(DetectSourceLanguageInput(text), backend="local")
        assert result.language_code == "de"
        assert 0.0 < result.confidence <= 1.0

    @pytest.mark.asyncio
    async def test_local_backend_short_text(self):
        with pytest.raises(ValidationError):
            await detect_source_language(DetectSourceLanguageInput("Hi"), backend="local")

    @pytest.mark.asyncio
    async def test_empty_text(self, instant_policy):
        with pytest.raises(ValidationError):
            await detect_source_language(DetectSourceLanguageInput("  "), FakeProvider(), instant_policy)


class TestTranslateText:
    """Tests for translate_text."""

    @pytest.mark.asyncio
    async def test_prompt_uses_language_labels(self, instant_policy):
        provider = FakeProvider(llm_json(translatedText="Hola mundo"))

        result = await translate_text(TranslateTextInput("Hello world", "English", "Spanish"), provider, instant_policy)

        assert result.translated_text == "Hola mundo"
        prompt = provider.calls[0]['prompt']
        assert "English" in prompt and "Spanish" in prompt and "Hello world" in prompt

    @pytest.mark.asyncio
    async def test_exhausted_retries_surface_last_error(self):
        errors = [unavailable(), unavailable()]
        provider = FakeProvider(*errors)
        policy = RetryPolicy(max_attempts=2, initial_delay=0.0)

        with pytest.raises(ServiceUnavailableError) as exc_info:
            await translate_text(TranslateTextInput("Hello", "English", "French"), provider, policy)

        assert exc_info.value is errors[-1]
        assert exc_info.value.attempts_made == 2
        assert exc_info.value.retries_exhausted is True

    @pytest.mark.asyncio
    async def test_authentication_error_fails_fast(self, instant_policy):
        provider = FakeProvider(LLMAuthenticationError("bad key"), llm_json(translatedText="never"))

        with pytest.raises(LLMAuthenticationError):
            await translate_text(TranslateTextInput("Hello", "English", "French"), provider, instant_policy)
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["text", "source_language", "target_language"])
    async def test_required_fields(self, field, instant_policy):
        values = {'text': "Hello", 'source_language': "English", 'target_language': "French"}
        values[field] = ""
        with pytest.raises(ValidationError, match=field):
            await translate_text(TranslateTextInput(**values), FakeProvider(), instant_policy)


class TestQualityHints:
    """Tests for generate_translation_quality_hints."""

    @pytest.mark.asyncio
    async def test_hints(self, instant_policy):
        provider = FakeProvider(llm_json(qualityHints="Accurate; 'report' could be 'informe'."))
        request = GenerateTranslationQualityHintsInput("The report", "El reporte", "English", "Spanish")

        result = await generate_translation_quality_hints(request, provider, instant_policy)

        assert result.quality_hints == "Accurate; 'report' could be 'informe'."
        call = provider.calls[0]
        assert "The report" in call['prompt'] and "El reporte" in call['prompt']
        assert call['system_prompt']

    @pytest.mark.asyncio
    async def test_requires_translation(self, instant_policy):
        request = GenerateTranslationQualityHintsInput("The report", "", "English", "Spanish")
        with pytest.raises(ValidationError, match="translated_text"):
            await generate_translation_quality_hints(request, FakeProvider(), instant_policy)


class TestProviderScope:
    """Tests for the configured-provider fallback."""

    @pytest.mark.asyncio
    async def test_owned_provider_is_closed(self, monkeypatch, instant_policy):
        created = FakeProvider(llm_json(translatedText="Salut"))
        monkeypatch.setattr(common_module, "create_llm_provider", lambda: created)

        result = await translate_text(TranslateTextInput("Hi", "English", "French"), policy=instant_policy)

        assert result.translated_text == "Salut"
        assert created.closed is True

    @pytest.mark.asyncio
    async def test_callers_provider_is_left_open(self, instant_policy):
        provider = FakeProvider(llm_json(translatedText="Salut"))
        await translate_text(TranslateTextInput("Hi", "English", "French"), provider, instant_policy)
        assert provider.closed is False
