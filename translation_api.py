"""
Flask web server for the document translation API with WebSocket support
"""
import os
import sys
import logging
from datetime import datetime
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Reduce verbosity of werkzeug (Flask HTTP server logs)
logging.getLogger('werkzeug').setLevel(logging.WARNING)

from doctranslate.config import (
    GEMINI_API_KEY,
    GOOGLE_CLOUD_ACCESS_TOKEN,
    GOOGLE_CLOUD_PROJECT,
    HOST,
    LLM_PROVIDER,
    MAX_UPLOAD_SIZE_MB,
    OUTPUT_DIR,
    PORT
)
from doctranslate.api.routes import configure_routes
from doctranslate.api.websocket import configure_websocket_handlers
from doctranslate.api.handlers import start_translation_job
from doctranslate.api.translation_state import get_state_manager
from doctranslate.core.llm import SUPPORTED_PROVIDERS
from doctranslate.core.retry import DEFAULT_RETRY_POLICY


app = Flask(__name__)
# Multipart overhead on top of the document itself
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE_MB * 1024 * 1024 + 64 * 1024
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")

# Thread-safe state manager
state_manager = get_state_manager()


def validate_configuration():
    """Validate required configuration before starting server"""
    issues = []
    warnings = []

    if not PORT or not isinstance(PORT, int):
        issues.append("PORT must be a valid integer")
    if LLM_PROVIDER not in SUPPORTED_PROVIDERS:
        issues.append(f"LLM_PROVIDER must be one of: {', '.join(SUPPORTED_PROVIDERS)}")
    if LLM_PROVIDER == 'gemini' and not GEMINI_API_KEY:
        warnings.append("GEMINI_API_KEY is not set; requests must supply gemini_api_key")
    if not GOOGLE_CLOUD_PROJECT or not GOOGLE_CLOUD_ACCESS_TOKEN:
        warnings.append("GOOGLE_CLOUD_PROJECT / GOOGLE_CLOUD_ACCESS_TOKEN not set; document translation will fail")

    for warning in warnings:
        logger.warning(warning)

    if issues:
        logger.error("=" * 70)
        logger.error("CONFIGURATION ERROR")
        logger.error("=" * 70)
        for issue in issues:
            logger.error(f"   - {issue}")
        logger.error("Create a .env file from .env.example, configure it and restart.")
        logger.error("=" * 70)
        raise ValueError("Configuration validation failed. See errors above.")

    logger.info("Configuration validated successfully")


# Ensure output directory exists
try:
    os.makedirs(os.path.join(OUTPUT_DIR, 'uploads'), exist_ok=True)
    logger.info(f"Output folder '{OUTPUT_DIR}' is ready")
except OSError as e:
    logger.error(f"Critical error: Unable to create output folder '{OUTPUT_DIR}': {e}")
    sys.exit(1)


def start_job_wrapper(translation_id, config):
    """Wrapper to inject dependencies into job starter"""
    start_translation_job(translation_id, config, state_manager, OUTPUT_DIR, socketio)


# Configure routes and WebSocket handlers
configure_routes(app, state_manager, OUTPUT_DIR, start_job_wrapper)
configure_websocket_handlers(socketio, state_manager)


if __name__ == '__main__':
    validate_configuration()

    logger.info("=" * 60)
    logger.info(f"DOCUMENT TRANSLATION SERVER (Version {datetime.now().strftime('%Y%m%d-%H%M')})")
    logger.info("=" * 60)
    logger.info(f"   - LLM provider: {LLM_PROVIDER}")
    logger.info(f"   - Retry policy: {DEFAULT_RETRY_POLICY.max_attempts} attempts, "
                f"{DEFAULT_RETRY_POLICY.initial_delay}s initial delay, x{DEFAULT_RETRY_POLICY.backoff_factor}")
    logger.info(f"   - API: http://{HOST}:{PORT}/api/")
    logger.info(f"   - Health Check: http://{HOST}:{PORT}/api/health")
    logger.info("")

    if HOST == '0.0.0.0':
        logger.warning("Server is binding to 0.0.0.0 (all network interfaces)")
        logger.warning("   For production, use a proper WSGI server like gunicorn:")
        logger.warning("   gunicorn --worker-class eventlet -w 1 --bind 0.0.0.0:5000 translation_api:app")

    socketio.run(app, debug=False, host=HOST, port=PORT, allow_unsafe_werkzeug=True)
