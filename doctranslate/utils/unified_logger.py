"""
Unified logging system for the document translator
Provides consistent logging across CLI and Web interfaces
"""
import os
import sys
from datetime import datetime
from typing import Optional, Dict, Any, Callable
from enum import Enum


class LogLevel(Enum):
    """Log levels with priority values"""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class LogType(Enum):
    """Types of log messages for special handling"""
    GENERAL = "general"
    RETRY = "retry"
    LANGUAGE_DETECTED = "language_detected"
    QUALITY_HINTS = "quality_hints"
    FILE_OPERATION = "file_operation"
    TRANSLATION_START = "translation_start"
    TRANSLATION_END = "translation_end"
    ERROR_DETAIL = "error_detail"


class Colors:
    """ANSI color codes for terminal output"""
    # Check if colors should be disabled
    NO_COLOR = os.environ.get('NO_COLOR') is not None or not sys.stdout.isatty()

    YELLOW = '' if NO_COLOR else '\033[93m'       # headers, warnings
    WHITE = '' if NO_COLOR else '\033[97m'        # main text
    GRAY = '' if NO_COLOR else '\033[90m'         # technical details
    GREEN = '' if NO_COLOR else '\033[92m'        # results
    RED = '' if NO_COLOR else '\033[91m'          # errors
    ENDC = '' if NO_COLOR else '\033[0m'          # reset

    @classmethod
    def disable(cls):
        """Disable all colors"""
        cls.YELLOW = cls.WHITE = cls.GRAY = cls.GREEN = cls.RED = cls.ENDC = ''


class UnifiedLogger:
    """
    Unified logger that provides consistent logging across all interfaces
    """

    def __init__(self,
                 name: str = "doctranslate",
                 console_output: bool = True,
                 enable_colors: bool = True,
                 min_level: LogLevel = LogLevel.INFO,
                 web_callback: Optional[Callable] = None,
                 storage_callback: Optional[Callable] = None):
        """
        Initialize the unified logger

        Args:
            name: Logger name/identifier
            console_output: Whether to output to console
            enable_colors: Whether to use colored output
            min_level: Minimum log level to display
            web_callback: Callback for web interface (WebSocket emission)
            storage_callback: Callback for storing logs (e.g., in memory)
        """
        self.name = name
        self.console_output = console_output
        self.enable_colors = enable_colors
        self.min_level = min_level
        self.web_callback = web_callback
        self.storage_callback = storage_callback
        self._start_time: Optional[datetime] = None

        if not enable_colors:
            Colors.disable()

    def _format_timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _format_console_message(self, level: LogLevel, message: str,
                                log_type: LogType = LogType.GENERAL,
                                data: Optional[Dict[str, Any]] = None) -> str:
        """Format message for console output"""
        data = data or {}
        timestamp = self._format_timestamp()

        level_colors = {
            LogLevel.DEBUG: Colors.GRAY,
            LogLevel.INFO: Colors.WHITE,
            LogLevel.WARNING: Colors.YELLOW,
            LogLevel.ERROR: Colors.RED,
            LogLevel.CRITICAL: Colors.RED
        }
        color = level_colors.get(level, Colors.WHITE)

        if log_type == LogType.TRANSLATION_START:
            return self._format_translation_start(data)
        elif log_type == LogType.TRANSLATION_END:
            return self._format_translation_end(data)
        elif log_type == LogType.ERROR_DETAIL:
            return self._format_error_detail(message, data)
        elif log_type == LogType.QUALITY_HINTS:
            return f"\n{Colors.GREEN}QUALITY HINTS{Colors.ENDC}\n{Colors.WHITE}{data.get('hints', message)}{Colors.ENDC}"
        elif log_type == LogType.RETRY:
            return f"{Colors.YELLOW}[{timestamp}] [RETRY] {message}{Colors.ENDC}"

        level_str = f"[{level.name}]" if level != LogLevel.INFO else ""
        return f"{color}[{timestamp}] {level_str} {message}{Colors.ENDC}"

    def _format_translation_start(self, data: Dict[str, Any]) -> str:
        self._start_time = datetime.now()
        output = [f"{Colors.YELLOW}TRANSLATION STARTED{Colors.ENDC}"]
        output.append(f"{Colors.WHITE}Document: {data.get('input_file', 'Unknown')}{Colors.ENDC}")
        output.append(f"{Colors.WHITE}Languages: {data.get('source_lang') or 'auto-detect'} → {data.get('target_lang', 'Unknown')}{Colors.ENDC}")
        output.append(f"{Colors.GRAY}Provider: {data.get('llm_provider', 'Unknown')} / {data.get('model', 'Unknown')}{Colors.ENDC}")
        return '\n'.join(output)

    def _format_translation_end(self, data: Dict[str, Any]) -> str:
        output = [f"\n{Colors.WHITE}TRANSLATION COMPLETE{Colors.ENDC}"]
        if self._start_time:
            output.append(f"{Colors.GRAY}Duration: {datetime.now() - self._start_time}{Colors.ENDC}")
            self._start_time = None
        if 'output_file' in data:
            output.append(f"{Colors.WHITE}Output saved to: {data['output_file']}{Colors.ENDC}")
        if data.get('text_output_file'):
            output.append(f"{Colors.WHITE}Translated text saved to: {data['text_output_file']}{Colors.ENDC}")
        return '\n'.join(output)

    def _format_error_detail(self, message: str, data: Dict[str, Any]) -> str:
        timestamp = self._format_timestamp()
        output = [f"{Colors.RED}[{timestamp}] ERROR: {message}{Colors.ENDC}"]
        if 'details' in data:
            output.append(f"{Colors.RED}Details: {data['details']}{Colors.ENDC}")
        if 'attempts_made' in data:
            output.append(f"{Colors.RED}Attempts: {data['attempts_made']}{Colors.ENDC}")
        return '\n'.join(output)

    def log(self, level: LogLevel, message: str,
            log_type: LogType = LogType.GENERAL,
            data: Optional[Dict[str, Any]] = None):
        """
        Main logging method

        Args:
            level: Log level
            message: Log message
            log_type: Type of log for special formatting
            data: Additional data for the log entry
        """
        if level.value < self.min_level.value:
            return

        if self.console_output:
            try:
                console_msg = self._format_console_message(level, message, log_type, data)
                if console_msg:
                    print(console_msg, flush=True)
            except UnicodeEncodeError:
                # Handle Unicode errors on Windows (cp1252 codec issues)
                safe_message = message.encode('ascii', 'replace').decode('ascii')
                print(f"[{self._format_timestamp()}] {safe_message}", flush=True)

        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'level': level.name,
            'type': log_type.value,
            'message': message,
            'data': data or {}
        }

        # Web callback (for WebSocket)
        if self.web_callback:
            self.web_callback(log_entry)

        # Storage callback (for in-memory storage)
        if self.storage_callback:
            self.storage_callback(log_entry)

    # Convenience methods
    def debug(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.DEBUG, message, log_type, data)

    def info(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.INFO, message, log_type, data)

    def warning(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.WARNING, message, log_type, data)

    def error(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.ERROR, message, log_type, data)

    def create_retry_callback(self) -> Callable[[str, str], None]:
        """
        Create a (level, message) callback for RetryExecutor and TranslationSession
        """
        def retry_callback(level: str, message: str):
            log_level = LogLevel.__members__.get(level.upper(), LogLevel.INFO)
            log_type = LogType.RETRY if log_level == LogLevel.WARNING and "Retrying" in message else LogType.GENERAL
            self.log(log_level, message, log_type)

        return retry_callback


def setup_cli_logger(enable_colors: bool = True) -> UnifiedLogger:
    """Setup logger for CLI usage"""
    # Import here to avoid circular dependencies
    from doctranslate.config import DEBUG_MODE

    return UnifiedLogger(
        console_output=True,
        enable_colors=enable_colors,
        min_level=LogLevel.DEBUG if DEBUG_MODE else LogLevel.INFO
    )


def setup_web_logger(web_callback: Callable, storage_callback: Callable) -> UnifiedLogger:
    """Setup logger for one web translation job"""
    from doctranslate.config import DEBUG_MODE

    return UnifiedLogger(
        console_output=True,  # Also output to console for debugging
        enable_colors=True,
        min_level=LogLevel.DEBUG if DEBUG_MODE else LogLevel.INFO,
        web_callback=web_callback,
        storage_callback=storage_callback
    )
