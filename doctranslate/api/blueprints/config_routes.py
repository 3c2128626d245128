"""
Configuration, language and health check routes
"""
import asyncio
import logging

import httpx
from flask import Blueprint, request, jsonify

from doctranslate.config import (
    API_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    DETECTION_BACKEND,
    GEMINI_MODEL,
    LLM_PROVIDER,
    MAX_UPLOAD_SIZE_MB,
    REQUEST_TIMEOUT,
    DEBUG_MODE,
)
from doctranslate.core.exceptions import TranslationError, ValidationError, error_message
from doctranslate.core.languages import LANGUAGES, find_language, target_languages
from doctranslate.core.llm import SUPPORTED_PROVIDERS
from doctranslate.core.retry import DEFAULT_RETRY_POLICY

# Setup logger for this module
logger = logging.getLogger('config_routes')
if DEBUG_MODE:
    logger.setLevel(logging.DEBUG)


def create_config_blueprint(session_factory):
    """
    Create and configure the config blueprint

    Args:
        session_factory: Callable building a TranslationSession from request settings
    """
    bp = Blueprint('config', __name__)

    @bp.route('/api/health', methods=['GET'])
    def health_check():
        """API health check endpoint"""
        return jsonify({
            "status": "ok",
            "message": "Translation API is running",
            "llm_provider": LLM_PROVIDER,
            "supported_providers": list(SUPPORTED_PROVIDERS)
        })

    @bp.route('/api/config', methods=['GET'])
    def get_default_config():
        """Get default configuration values"""
        config_response = {
            "llm_provider": LLM_PROVIDER,
            "api_endpoint": API_ENDPOINT,
            "default_model": GEMINI_MODEL if LLM_PROVIDER == 'gemini' else DEFAULT_MODEL,
            "timeout": REQUEST_TIMEOUT,
            "retry_policy": DEFAULT_RETRY_POLICY.to_dict(),
            "detection_backend": DETECTION_BACKEND,
            "max_upload_size_mb": MAX_UPLOAD_SIZE_MB,
            "default_source_language": DEFAULT_SOURCE_LANGUAGE,
            "default_target_language": DEFAULT_TARGET_LANGUAGE,
            "languages": [language.to_dict() for language in LANGUAGES]
        }
        logger.debug("/api/config response: %s", config_response)
        return jsonify(config_response)

    @bp.route('/api/languages', methods=['GET'])
    def get_languages():
        """Selectable languages; with ?source=xx the source itself is excluded"""
        source = request.args.get('source') or None
        if source and find_language(source) is None:
            raise ValidationError(f"Unsupported source language: {source}")
        source_code = find_language(source).value if source else None
        return jsonify({
            "source": source_code,
            "languages": [language.to_dict() for language in target_languages(source_code)]
        })

    @bp.route('/api/models', methods=['GET'])
    def get_available_models():
        """List models offered by the selected provider"""
        settings = {
            'llm_provider': request.args.get('provider', LLM_PROVIDER),
            'gemini_api_key': request.args.get('api_key'),
            'openai_api_key': request.args.get('api_key'),
            'llm_api_endpoint': request.args.get('api_endpoint', API_ENDPOINT)
        }

        async def fetch():
            session = session_factory(settings)
            try:
                return await session.provider.get_available_models()
            finally:
                await session.aclose()

        try:
            models = asyncio.run(fetch())
        except (TranslationError, httpx.HTTPError) as e:
            logger.warning("Could not list models: %s", e)
            return jsonify({
                "models": [],
                "status": "error",
                "count": 0,
                "error": error_message(e)
            })

        return jsonify({
            "models": models,
            "status": "connected",
            "count": len(models)
        })

    return bp
