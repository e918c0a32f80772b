"""Retry classification and backoff for failed pipeline stages."""

import asyncio
import re
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from newsdesk.core.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_RETRY_DELAY_MS,
    DEFAULT_RETRY_DELAY_MS,
)
from newsdesk.core.logging import get_logger

logger = get_logger(__name__)

# Fallback for errors that don't declare retryability
RETRYABLE_PATTERNS = [
    re.compile(r"network", re.IGNORECASE),
    re.compile(r"timeout", re.IGNORECASE),
    re.compile(r"timed out", re.IGNORECASE),
    re.compile(r"rate limit", re.IGNORECASE),
    re.compile(r"\b(429|500|502|503|504)\b"),
    re.compile(r"ECONNRESET"),
    re.compile(r"ETIMEDOUT"),
    re.compile(r"connection reset", re.IGNORECASE),
]

RETRYABLE_EXCEPTION_TYPES: tuple[type[BaseException], ...] = (TimeoutError, ConnectionError)


class RetryDecision(BaseModel):
    """Verdict for one failure."""

    retry: bool
    attempt: int | None = None  # Attempt number the retry will be
    fatal: bool = False
    delay: float = 0.0  # seconds slept before returning


class ErrorHandler:
    """Decides whether a failed stage is retried, and waits out the backoff.

    Failures are counted per (stage, error type). A retry is granted while the
    count is within ``max_retries`` and the error is retryable. Counters live
    on the instance; call ``reset()`` at the start of every run.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
        max_retry_delay_ms: int = DEFAULT_MAX_RETRY_DELAY_MS,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.max_retry_delay_ms = max_retry_delay_ms
        self._sleep = sleep
        self._counts: dict[tuple[str, str], int] = {}

    def is_retryable(self, error: BaseException) -> bool:
        """Declared flag first, then builtin transient types, then the message."""
        declared = getattr(error, "retryable", None)
        if declared is not None:
            return bool(declared)

        cause = getattr(error, "cause", None) or error.__cause__
        for candidate in (error, cause):
            if isinstance(candidate, RETRYABLE_EXCEPTION_TYPES):
                return True

        messages = [str(error)]
        if cause is not None:
            messages.append(str(cause))
        return any(p.search(m) for p in RETRYABLE_PATTERNS for m in messages)

    def backoff_seconds(self, count: int) -> float:
        """Exponential backoff for the ``count``-th failure, capped."""
        delay_ms = self.retry_delay_ms * 2 ** max(count - 1, 0)
        return min(delay_ms, self.max_retry_delay_ms) / 1000

    async def handle_error(
        self,
        error: BaseException,
        stage: str | None = None,
        attempt: int | None = None,
    ) -> RetryDecision:
        stage = stage or getattr(error, "stage", None) or "unknown"
        key = (stage, type(error).__name__)
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count

        retryable = self.is_retryable(error)
        logger.error(
            "Pipeline stage error",
            stage=stage,
            error=str(error),
            error_type=key[1],
            attempt=attempt,
            failures=count,
            retryable=retryable,
        )

        if retryable and count <= self.max_retries:
            delay = self.backoff_seconds(count)
            logger.info(
                "Retrying stage",
                stage=stage,
                next_attempt=count + 1,
                max_attempts=self.max_retries + 1,
                delay=f"{delay:.2f}s",
            )
            if delay > 0:
                await self._sleep(delay)
            return RetryDecision(retry=True, attempt=count + 1, delay=delay)

        logger.error(
            "Giving up on stage",
            stage=stage,
            reason="max retries reached" if retryable else "non-retryable error",
            failures=count,
            max_retries=self.max_retries,
        )
        return RetryDecision(retry=False, fatal=True)

    def reset(self) -> None:
        self._counts.clear()
        logger.debug("Error handler reset")

    def get_stats(self) -> dict[str, int]:
        """Failure counts keyed by ``"<stage>_<ErrorType>"``."""
        return {f"{stage}_{name}": count for (stage, name), count in self._counts.items()}
