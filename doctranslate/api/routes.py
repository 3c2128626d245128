"""
Flask routes orchestrator for the translation API

This module serves as a lightweight coordinator that registers
all route blueprints:

- blueprints/config_routes.py: Health checks, configuration, languages and models
- blueprints/document_routes.py: Upload with text extraction, language detection, quality hints
- blueprints/translation_routes.py: Translation job management
- blueprints/file_routes.py: Translated file download and delete
- blueprints/history_routes.py: Translation history
"""
import logging
import traceback

from flask import jsonify

from doctranslate.config import MAX_UPLOAD_SIZE_MB
from doctranslate.core.exceptions import (
    ConfigurationError,
    FileFormatError,
    ServiceError,
    TranslationError,
    ValidationError,
    error_message,
)
from .blueprints import (
    create_config_blueprint,
    create_document_blueprint,
    create_translation_blueprint,
    create_file_blueprint,
    create_history_blueprint
)
from .handlers import create_web_session

logger = logging.getLogger(__name__)


def configure_routes(app, state_manager, output_dir, start_translation_job,
                     session_factory=create_web_session):
    """
    Configure Flask routes by registering all blueprints

    Args:
        app: Flask application instance
        state_manager: Translation state manager
        output_dir: Base directory for file operations
        start_translation_job: Function to start translation jobs
        session_factory: Callable building a TranslationSession from request settings
    """
    app.register_blueprint(create_config_blueprint(session_factory))
    app.register_blueprint(create_document_blueprint(output_dir, session_factory))
    app.register_blueprint(create_translation_blueprint(state_manager, start_translation_job, output_dir))
    app.register_blueprint(create_file_blueprint(output_dir))
    app.register_blueprint(create_history_blueprint(state_manager))

    _register_error_handlers(app)


def _error_body(error, details=None):
    body = {"error": error_message(error), "details": details if details is not None else str(error)}
    if getattr(error, 'attempts_made', None) is not None:
        body["attempts_made"] = error.attempts_made
        body["retries_exhausted"] = getattr(error, 'retries_exhausted', False)
    return body


def _register_error_handlers(app):
    """Register global error handlers"""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify(_error_body(error)), 400

    @app.errorhandler(FileFormatError)
    def file_format_error(error):
        return jsonify(_error_body(error)), 400

    @app.errorhandler(ServiceError)
    def remote_service_error(error):
        logger.warning("Remote service failure: %s", error)
        return jsonify(_error_body(error)), 502

    @app.errorhandler(ConfigurationError)
    def configuration_error(error):
        logger.error("Configuration error: %s", error)
        return jsonify(_error_body(error)), 500

    @app.errorhandler(TranslationError)
    def translation_error(error):
        return jsonify(_error_body(error)), 500

    @app.errorhandler(404)
    def route_not_found(error):
        return jsonify({"error": "API Endpoint not found"}), 404

    @app.errorhandler(413)
    def request_too_large(error):
        return jsonify({
            "error": "File too large",
            "details": f"Maximum upload size is {MAX_UPLOAD_SIZE_MB} MB"
        }), 413

    @app.errorhandler(500)
    def internal_server_error(error):
        logger.error("INTERNAL SERVER ERROR: %s\nTRACEBACK:\n%s", error, traceback.format_exc())
        return jsonify({"error": "Internal server error", "details": str(error)}), 500
