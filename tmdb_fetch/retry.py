"""Bounded retry policy with a fixed inter-attempt delay."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from .errors import ClassifiedError
from .models.attempt import FetchAttempt

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_retryable(error: ClassifiedError) -> bool:
    return error.retryable


@dataclass
class RetryPolicy:
    """Decide whether a failed attempt is tried again.

    ``max_attempts`` counts every attempt including the first. The delay is
    fixed (linear), not exponential. ``sleep`` is injectable so tests can
    record delays instead of waiting.
    """

    max_attempts: int = 3
    delay_s: float = 1.0
    is_retryable: Callable[[ClassifiedError], bool] = _is_retryable
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_s < 0:
            raise ValueError("delay_s must not be negative")

    def should_retry(self, attempt: FetchAttempt) -> bool:
        """Pure decision: True when ``attempt`` failed and may be repeated."""
        if attempt.succeeded:
            return False
        if attempt.attempt_number >= self.max_attempts:
            return False
        return self.is_retryable(attempt.error)

    async def run(self, call: Callable[[], Awaitable[T]], label: str = "") -> T:
        """Await ``call`` until it succeeds or the policy gives up.

        ``call`` must raise :class:`ClassifiedError` on failure; anything else
        propagates immediately. The last error is re-raised with its
        ``attempts`` attribute set.
        """
        attempt = FetchAttempt(attempt_number=1)
        while True:
            try:
                return await call()
            except ClassifiedError as exc:
                attempt.error = exc
                exc.attempts = attempt.attempt_number
                if not self.should_retry(attempt):
                    raise
            logger.warning(
                "Retrying TMDB request (%d/%d) for %s: %s",
                attempt.attempt_number,
                self.max_attempts,
                label,
                attempt.error.message,
                extra={
                    "url": label,
                    "attempt": attempt.attempt_number,
                    "error": attempt.error.message,
                },
            )
            await self.sleep(self.delay_s)
            attempt = FetchAttempt(attempt_number=attempt.attempt_number + 1)
