"""
Exception hierarchy for the document translation system.

Every error carries a human-readable message. Errors raised at the remote
service boundary also carry the HTTP status code of the failed request, so
retry classification never has to parse message strings.
"""

from typing import Optional, Dict, Any


class TranslationError(Exception):
    """Base exception for all translation-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context about the error
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base += f" (context: {context_str})"
        return base


# ============================================================================
# Remote service errors
# ============================================================================

class ServiceError(TranslationError):
    """Raised when a remote service call fails.

    Attributes:
        status_code: HTTP status of the failed request, if any
        service: Name of the remote service (e.g. "gemini")
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        service: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        if service:
            ctx['service'] = service
        super().__init__(message, ctx, recoverable)
        self.status_code = status_code
        self.service = service


class ServiceUnavailableError(ServiceError):
    """Raised when the upstream service is temporarily unavailable (HTTP 503).

    This is the transient failure the shared retry policy recovers from.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status_code=503, service=service,
                         context=context, recoverable=True)


class LLMError(ServiceError):
    """Base exception for LLM provider errors."""
    pass


class LLMConnectionError(LLMError):
    """Raised when connection to LLM provider fails or times out."""

    def __init__(self, message: str, service: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, service=service, context=context, recoverable=True)


class LLMRateLimitError(LLMError):
    """Raised when rate limit is exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        service: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if retry_after is not None:
            ctx['retry_after'] = retry_after
        super().__init__(message, status_code=429, service=service,
                         context=ctx, recoverable=True)
        self.retry_after = retry_after


class LLMAuthenticationError(LLMError):
    """Raised when authentication fails (missing/invalid API key).

    This is NOT recoverable without user intervention.
    """

    def __init__(self, message: str, status_code: Optional[int] = 401,
                 service: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=status_code, service=service,
                         context=context, recoverable=False)


class LLMResponseError(LLMError):
    """Raised when LLM response is empty, invalid or unparseable."""

    def __init__(self, message: str, service: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, service=service, context=context, recoverable=True)


class DocumentTranslationError(ServiceError):
    """Raised when the formatted document translation fails."""
    pass


def error_for_status(
    status_code: int,
    message: str,
    service: Optional[str] = None,
    retry_after: Optional[float] = None
) -> ServiceError:
    """Map an HTTP error status to the matching exception instance.

    Args:
        status_code: HTTP status returned by the remote service
        message: Human-readable message (usually includes the response body)
        service: Name of the remote service
        retry_after: Value of the Retry-After header, if any

    Returns:
        The exception to raise
    """
    if status_code == 503:
        return ServiceUnavailableError(message, service=service)
    if status_code in (401, 403):
        return LLMAuthenticationError(message, status_code=status_code, service=service)
    if status_code == 429:
        return LLMRateLimitError(message, retry_after=retry_after, service=service)
    return ServiceError(message, status_code=status_code, service=service)


# ============================================================================
# File/Format-specific errors
# ============================================================================

class FileFormatError(TranslationError):
    """Base exception for file format errors."""
    pass


class FileReadError(FileFormatError):
    """Raised when reading input file fails."""
    pass


class InvalidDataUriError(FileFormatError):
    """Raised when a document data URI is malformed."""
    pass


class UnsupportedFormatError(FileFormatError):
    """Raised when file format is not supported."""

    def __init__(
        self,
        message: str,
        file_type: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if file_type is not None:
            ctx['file_type'] = file_type
        super().__init__(message, ctx, recoverable=False)
        self.file_type = file_type


# ============================================================================
# Configuration / validation errors
# ============================================================================

class ConfigurationError(TranslationError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context, recoverable=False)


class ValidationError(TranslationError):
    """Raised when a request is missing required input or has invalid values."""
    pass


def error_message(error: BaseException) -> str:
    """Human-readable message of any error, without the class-name prefix."""
    message = getattr(error, 'message', None)
    if isinstance(message, str) and message:
        return message
    return str(error) or type(error).__name__
