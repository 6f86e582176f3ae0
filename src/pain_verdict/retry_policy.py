"""Retry policy for embedding backend calls.

Retries live here, in the client wrapper, and nowhere in the scoring core:
- Transient network and rate-limit errors from OpenAI are retried
- Exponential backoff with jitter
- Every retry attempt is logged
"""

from __future__ import annotations

import openai
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .logging_config import get_logger

logger = get_logger(__name__)


# Transient exceptions that should trigger retries
EMBEDDING_TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    TimeoutError,
    ConnectionError,
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


def log_retry_attempt(retry_state: RetryCallState) -> None:
    """Log retry attempts with context."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    wait_time = retry_state.next_action.sleep if retry_state.next_action else 0

    logger.warning(
        "retry_attempt",
        attempt=retry_state.attempt_number,
        wait_seconds=round(wait_time, 2),
        exception_type=type(exception).__name__ if exception else None,
        exception_msg=str(exception)[:100] if exception else None,
    )


def embedding_retry(max_attempts: int = 3, initial: float = 1.0, max_wait: float = 20.0, jitter: float = 1.0):
    """Build a retry decorator for embedding calls.

    Args:
        max_attempts: Total attempts including the first call
        initial: First backoff in seconds
        max_wait: Upper bound on a single backoff
        jitter: Random extra wait added to each backoff

    Returns:
        tenacity decorator that re-raises the last exception
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential_jitter(initial=initial, max=max_wait, jitter=jitter),
        retry=retry_if_exception_type(EMBEDDING_TRANSIENT_EXCEPTIONS),
        before_sleep=log_retry_attempt,
    )
