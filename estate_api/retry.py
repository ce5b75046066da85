"""Retry policy shared by every request path."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_fixed

from estate_api.errors import AbortError, ConnectionFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(error: BaseException) -> bool:
    """Timeouts and generic network failures are worth another try."""
    return isinstance(error, (AbortError, ConnectionFailure))


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with a constant delay.

    Attributes:
        attempts: Retries allowed after the first attempt.
        delay: Seconds to wait between attempts (not exponential).
        is_retriable: Classifies a failure as transient.
    """

    attempts: int = 3
    delay: float = 1.2
    is_retriable: Callable[[BaseException], bool] = is_transient

    def retrying(self, retry_count: int = 0) -> AsyncRetrying:
        """Build the tenacity controller for a call that already spent ``retry_count`` retries."""

        def log_retry(state: RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            logger.info(
                "Transient failure (%s), retry %d/%d in %ss",
                error, retry_count + state.attempt_number, self.attempts, self.delay,
            )

        return AsyncRetrying(
            stop=stop_after_attempt(max(1, self.attempts - retry_count + 1)),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception(self.is_retriable),
            before_sleep=log_retry,
            reraise=True,
        )

    async def run(
        self,
        operation: Callable[[int], Awaitable[T]],
        retry_count: int = 0,
    ) -> T:
        """Run ``operation(retry_count)`` until it succeeds or gives up.

        Attempts are strictly sequential. The last failure is re-raised once
        ``retry_count`` reaches ``attempts`` or the failure is not retriable.
        """
        async for attempt in self.retrying(retry_count):
            with attempt:
                return await operation(retry_count + attempt.retry_state.attempt_number - 1)
        raise AssertionError("unreachable: tenacity re-raises the last failure")
