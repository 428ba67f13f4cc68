"""Tenacity retry policy for outbound LLM calls.

Only rate limits are worth retrying: auth failures and malformed requests
fail the same way every time. Habit-store writes are never retried.
"""

import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger()


def _log_retry(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    logger.warning(
        "llm.retrying",
        call=getattr(state.fn, "__qualname__", str(state.fn)),
        attempt=state.attempt_number,
        wait_s=round(state.next_action.sleep, 1) if state.next_action else None,
        error=str(error) if error else None,
    )


def llm_retry(
    max_attempts: int = 3,
    min_wait: float = 2.0,
    max_wait: float = 30.0,
    exceptions: tuple = (Exception,),
):
    """Retry decorator with exponential backoff.

    Args:
        max_attempts: Total attempts including the first call
        min_wait: Min wait between retries (seconds)
        max_wait: Max wait between retries (seconds), long enough for rate limits
        exceptions: Exception types that trigger a retry; anything else propagates at once
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=_log_retry,
        reraise=True,
    )
