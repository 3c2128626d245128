"""
Centralized configuration class
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("🔍 DEBUG_MODE enabled - verbose logging active")

# Get config directory (current working directory)
_config_dir = Path.cwd()
_env_file = _config_dir / '.env'

if not _env_file.exists():
    _config_logger.warning(
        ".env configuration file not found in %s - running with default settings "
        "(copy .env.example to .env to configure providers and API keys)",
        _config_dir
    )

# Load .env file if it exists
_dotenv_result = load_dotenv(_env_file)
if _debug_mode:
    _config_logger.debug(f"📁 load_dotenv() returned: {_dotenv_result}")

# LLM provider configuration
LLM_PROVIDER = os.getenv('LLM_PROVIDER', 'gemini')  # 'gemini' or 'openai'
API_ENDPOINT = os.getenv('API_ENDPOINT', 'https://api.openai.com/v1/chat/completions')
DEFAULT_MODEL = os.getenv('DEFAULT_MODEL', 'gpt-4o-mini')
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.0-flash')
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '120'))

# Retry policy shared by every remote call
RETRY_MAX_ATTEMPTS = int(os.getenv('RETRY_MAX_ATTEMPTS', '3'))
RETRY_INITIAL_DELAY = float(os.getenv('RETRY_INITIAL_DELAY', '1.0'))  # seconds
RETRY_BACKOFF_FACTOR = float(os.getenv('RETRY_BACKOFF_FACTOR', '2.0'))

# Google Cloud Translation (formatted document translation)
GOOGLE_CLOUD_PROJECT = os.getenv('GOOGLE_CLOUD_PROJECT', '')
GOOGLE_CLOUD_LOCATION = os.getenv('GOOGLE_CLOUD_LOCATION', 'us-central1')
GOOGLE_CLOUD_ACCESS_TOKEN = os.getenv('GOOGLE_CLOUD_ACCESS_TOKEN', '')
TRANSLATION_API_BASE = os.getenv('TRANSLATION_API_BASE', 'https://translation.googleapis.com/v3')

# Language detection backend: 'llm' (remote model) or 'local' (langdetect)
DETECTION_BACKEND = os.getenv('DETECTION_BACKEND', 'llm')

# Default languages from environment (ISO 639-1 codes)
DEFAULT_SOURCE_LANGUAGE = os.getenv('DEFAULT_SOURCE_LANGUAGE', '')
DEFAULT_TARGET_LANGUAGE = os.getenv('DEFAULT_TARGET_LANGUAGE', '')

# Server configuration
HOST = os.getenv('HOST', '127.0.0.1')
PORT = int(os.getenv('PORT', '5000'))
OUTPUT_DIR = os.getenv('OUTPUT_DIR', 'translated_files')
MAX_UPLOAD_SIZE_MB = int(os.getenv('MAX_UPLOAD_SIZE_MB', '20'))

# Debug mode (reload after .env is loaded)
DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'

# Log loaded configuration in debug mode
if DEBUG_MODE or _debug_mode:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("="*60)
    _config_logger.debug("📋 LOADED CONFIGURATION VALUES:")
    _config_logger.debug("="*60)
    _config_logger.debug(f"   LLM_PROVIDER: {LLM_PROVIDER}")
    _config_logger.debug(f"   API_ENDPOINT: {API_ENDPOINT}")
    _config_logger.debug(f"   DEFAULT_MODEL: {DEFAULT_MODEL}")
    _config_logger.debug(f"   GEMINI_MODEL: {GEMINI_MODEL}")
    _config_logger.debug(f"   GEMINI_API_KEY: {'***' + GEMINI_API_KEY[-4:] if GEMINI_API_KEY else '(not set)'}")
    _config_logger.debug(f"   OPENAI_API_KEY: {'***' + OPENAI_API_KEY[-4:] if OPENAI_API_KEY else '(not set)'}")
    _config_logger.debug(f"   GOOGLE_CLOUD_PROJECT: {GOOGLE_CLOUD_PROJECT or '(not set)'}")
    _config_logger.debug(f"   GOOGLE_CLOUD_LOCATION: {GOOGLE_CLOUD_LOCATION}")
    _config_logger.debug(f"   RETRY: {RETRY_MAX_ATTEMPTS} attempts, {RETRY_INITIAL_DELAY}s x{RETRY_BACKOFF_FACTOR}")
    _config_logger.debug(f"   DETECTION_BACKEND: {DETECTION_BACKEND}")
    _config_logger.debug(f"   HOST: {HOST}  PORT: {PORT}")
    _config_logger.debug("="*60)


def parse_bool(value, default: bool = True) -> bool:
    """Interpret a form or JSON flag ('false', '0', 'no' and 'off' are false)"""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ('false', '0', 'no', 'off')


@dataclass
class TranslationConfig:
    """Unified configuration for both CLI and web interfaces"""

    # Core settings
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    target_language: str = DEFAULT_TARGET_LANGUAGE
    auto_detect: bool = True

    # LLM provider settings
    llm_provider: str = LLM_PROVIDER
    model: str = DEFAULT_MODEL
    api_endpoint: str = API_ENDPOINT
    gemini_api_key: str = GEMINI_API_KEY
    openai_api_key: str = OPENAI_API_KEY
    timeout: int = REQUEST_TIMEOUT

    # Retry parameters
    max_attempts: int = RETRY_MAX_ATTEMPTS
    initial_delay: float = RETRY_INITIAL_DELAY
    backoff_factor: float = RETRY_BACKOFF_FACTOR

    # Language detection backend
    detection_backend: str = DETECTION_BACKEND

    # Interface-specific
    interface_type: str = "cli"  # or "web"
    enable_colors: bool = True

    @property
    def provider_model(self) -> str:
        """Model name for the selected provider"""
        if self.llm_provider == "gemini" and self.model == DEFAULT_MODEL:
            return GEMINI_MODEL
        return self.model

    @property
    def provider_api_key(self) -> str:
        """API key for the selected provider"""
        if self.llm_provider == "gemini":
            return self.gemini_api_key
        return self.openai_api_key

    @classmethod
    def from_cli_args(cls, args) -> 'TranslationConfig':
        """Create config from CLI arguments"""
        return cls(
            source_language=args.source_lang or '',
            target_language=args.target_lang,
            auto_detect=not args.source_lang,
            llm_provider=getattr(args, 'provider', LLM_PROVIDER),
            model=getattr(args, 'model', DEFAULT_MODEL),
            api_endpoint=getattr(args, 'api_endpoint', API_ENDPOINT),
            gemini_api_key=getattr(args, 'gemini_api_key', GEMINI_API_KEY),
            openai_api_key=getattr(args, 'openai_api_key', OPENAI_API_KEY),
            interface_type="cli",
            enable_colors=not args.no_color
        )

    @classmethod
    def from_web_request(cls, request_data: dict) -> 'TranslationConfig':
        """Create config from web request data"""
        return cls(
            source_language=request_data.get('source_language', DEFAULT_SOURCE_LANGUAGE),
            target_language=request_data.get('target_language', DEFAULT_TARGET_LANGUAGE),
            auto_detect=parse_bool(request_data.get('auto_detect')),
            llm_provider=request_data.get('llm_provider', LLM_PROVIDER),
            model=request_data.get('model', DEFAULT_MODEL),
            api_endpoint=request_data.get('llm_api_endpoint', API_ENDPOINT),
            gemini_api_key=request_data.get('gemini_api_key') or GEMINI_API_KEY,
            openai_api_key=request_data.get('openai_api_key') or OPENAI_API_KEY,
            timeout=int(request_data.get('timeout', REQUEST_TIMEOUT)),
            max_attempts=int(request_data.get('max_attempts', RETRY_MAX_ATTEMPTS)),
            initial_delay=float(request_data.get('initial_delay', RETRY_INITIAL_DELAY)),
            backoff_factor=float(request_data.get('backoff_factor', RETRY_BACKOFF_FACTOR)),
            detection_backend=request_data.get('detection_backend') or DETECTION_BACKEND,
            interface_type="web"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (API keys are masked)"""
        return {
            'source_language': self.source_language,
            'target_language': self.target_language,
            'auto_detect': self.auto_detect,
            'llm_provider': self.llm_provider,
            'model': self.provider_model,
            'api_endpoint': self.api_endpoint,
            'timeout': self.timeout,
            'max_attempts': self.max_attempts,
            'initial_delay': self.initial_delay,
            'backoff_factor': self.backoff_factor,
            'detection_backend': self.detection_backend,
            'gemini_api_key': '***' if self.gemini_api_key else '',
            'openai_api_key': '***' if self.openai_api_key else ''
        }
