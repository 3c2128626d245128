"""
Retry executor with exponential backoff for remote service calls.

Every call to a hosted language model or translation API goes through
``RetryExecutor``. The executor:
- invokes the operation at most ``policy.max_attempts`` times
- waits ``initial_delay * backoff_factor ** (k - 2)`` seconds before attempt k
- retries only errors the policy's ``retryable`` predicate accepts
- re-raises the last underlying error unchanged, annotated with
  ``attempts_made`` and ``retries_exhausted``

The executor keeps no state between runs, so a single executor (and a single
policy) can serve any number of concurrent calls.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar

from doctranslate.config import (
    RETRY_MAX_ATTEMPTS,
    RETRY_INITIAL_DELAY,
    RETRY_BACKOFF_FACTOR
)
from .exceptions import TranslationError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def is_service_unavailable(error: BaseException) -> bool:
    """Default retry predicate: the upstream answered HTTP 503."""
    return getattr(error, "status_code", None) == 503


def _describe(error: BaseException) -> str:
    # TranslationError.__str__ already names the class
    if isinstance(error, TranslationError):
        return str(error)
    return f"{type(error).__name__}: {error}"


def message_indicates_unavailable(error: BaseException) -> bool:
    """Legacy predicate for foreign errors that only expose a message."""
    return "503" in str(error)


class RetryState(Enum):
    """States of one executor run."""
    IDLE = "idle"
    ATTEMPTING = "attempting"
    WAITING_TO_RETRY = "waiting_to_retry"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration shared read-only by every run that uses it.

    Attributes:
        max_attempts: Maximum number of times the operation may be invoked
        initial_delay: Delay in seconds before the second attempt
        backoff_factor: Multiplier applied to the delay after each retry
        retryable: Predicate deciding whether an error is transient
    """
    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    retryable: Callable[[BaseException], bool] = is_service_unavailable

    def __post_init__(self):
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ValueError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.backoff_factor < 1:
            raise ValueError(f"backoff_factor must be >= 1, got {self.backoff_factor}")
        if not callable(self.retryable):
            raise ValueError("retryable must be callable")

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before the given (1-based) attempt."""
        if attempt <= 1:
            return 0.0
        return self.initial_delay * (self.backoff_factor ** (attempt - 2))

    def to_dict(self) -> dict:
        return {
            "max_attempts": self.max_attempts,
            "initial_delay": self.initial_delay,
            "backoff_factor": self.backoff_factor,
            "retryable": getattr(self.retryable, "__name__", repr(self.retryable)),
        }


DEFAULT_RETRY_POLICY = RetryPolicy(
    max_attempts=RETRY_MAX_ATTEMPTS,
    initial_delay=RETRY_INITIAL_DELAY,
    backoff_factor=RETRY_BACKOFF_FACTOR,
)


@dataclass
class AttemptOutcome:
    """Record of one attempt, handed to ``on_attempt`` callbacks."""
    attempt: int
    started_at: float
    duration: float
    succeeded: bool
    next_state: RetryState
    error: Optional[BaseException] = None
    delay: float = 0.0


class RetryExecutor:
    """Runs remote operations under a retry policy."""

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        log_callback: Optional[Callable[[str, str], None]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        """
        Args:
            policy: Retry policy (defaults to DEFAULT_RETRY_POLICY)
            log_callback: Callback for logging (level, message)
            sleep: Coroutine function used to wait between attempts
        """
        self.policy = policy or DEFAULT_RETRY_POLICY
        self.log_callback = log_callback
        self._sleep = sleep or asyncio.sleep

    def _log(self, level: str, message: str):
        if self.log_callback:
            self.log_callback(level, message)
        else:
            logger.log(getattr(logging, level.upper(), logging.INFO), message)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_id: Optional[str] = None,
        on_attempt: Optional[Callable[[AttemptOutcome], None]] = None
    ) -> T:
        """Execute an operation with retry logic.

        Args:
            operation: Zero-argument callable returning an awaitable
            operation_id: Name used in log messages
            on_attempt: Callback receiving an AttemptOutcome after each attempt

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: The error of the last attempt, with ``attempts_made``
                and ``retries_exhausted`` attributes set
        """
        policy = self.policy
        op_id = operation_id or getattr(operation, "__name__", "remote_operation")
        attempt = 1
        delay = policy.initial_delay

        while True:
            started_at = time.time()
            try:
                result = await operation()
            except Exception as error:
                duration = time.time() - started_at
                transient = policy.retryable(error)
                exhausted = transient and attempt >= policy.max_attempts

                if not transient or exhausted:
                    error.attempts_made = attempt
                    error.retries_exhausted = exhausted
                    self._notify(on_attempt, AttemptOutcome(
                        attempt, started_at, duration, False, RetryState.FAILED, error
                    ))
                    if exhausted:
                        self._log(
                            "error",
                            f"Retry exhausted for {op_id} after {attempt} attempts: {error}"
                        )
                    else:
                        self._log("debug", f"Non-retryable error in {op_id}: {error}")
                    raise

                self._notify(on_attempt, AttemptOutcome(
                    attempt, started_at, duration, False,
                    RetryState.WAITING_TO_RETRY, error, delay
                ))
                self._log(
                    "warning",
                    f"Attempt {attempt}/{policy.max_attempts} failed for {op_id}: "
                    f"{_describe(error)}. Retrying in {delay:.2f}s..."
                )
                if delay > 0:
                    await self._sleep(delay)
                delay *= policy.backoff_factor
                attempt += 1
                continue

            self._notify(on_attempt, AttemptOutcome(
                attempt, started_at, time.time() - started_at, True, RetryState.SUCCEEDED
            ))
            if attempt > 1:
                self._log("info", f"Operation {op_id} succeeded after {attempt} attempts")
            return result

    def _notify(self, on_attempt, outcome: AttemptOutcome):
        if on_attempt is None:
            return
        try:
            on_attempt(outcome)
        except Exception as callback_error:
            self._log("warning", f"Error in on_attempt callback: {callback_error}")


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    operation_id: Optional[str] = None,
    log_callback: Optional[Callable[[str, str], None]] = None,
    on_attempt: Optional[Callable[[AttemptOutcome], None]] = None
) -> T:
    """Run ``operation`` once under ``policy`` (default: DEFAULT_RETRY_POLICY)."""
    executor = RetryExecutor(policy, log_callback=log_callback)
    return await executor.execute(operation, operation_id=operation_id, on_attempt=on_attempt)


def with_retry(policy: Optional[RetryPolicy] = None, operation_id: Optional[str] = None):
    """Decorator to add retry logic to async functions.

    Example:
        @with_retry(RetryPolicy(max_attempts=5, initial_delay=2.0))
        async def fetch_models() -> list:
            ...
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        async def wrapper(*args, **kwargs):
            return await execute_with_retry(
                lambda: func(*args, **kwargs),
                policy=policy,
                operation_id=operation_id or func.__name__
            )
        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper
    return decorator
