# 📄 File: app/shared/core/retry.py
# 🧭 Purpose (Layman Explanation):
# When saving to the store fails for a moment, this tries again a couple of times,
# waiting a little longer each time, before giving up.
# 🧪 Purpose (Technical Summary):
# Reusable retry policy for key-value store writes built on tenacity's AsyncRetrying
# with stop_after_attempt and wait_exponential; converts exhaustion to StorageWriteError.
# 🔗 Dependencies:
# tenacity, asyncio, app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# KV-backed user, usage and plant repositories

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import StorageError, StorageWriteError

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


def _write_rejected(result: bool) -> bool:
    return result is False


class RetryPolicy:
    """
    Retry policy for store writes.

    The delay before attempt n+1 is ``base_delay * multiplier ** (n - 1)``,
    so the defaults wait 100 ms and then 200 ms across three attempts.
    A write fails an attempt by raising StorageError or by returning False.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.1,
        multiplier: float = 2.0,
        sleep: Optional[SleepFunc] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.multiplier = multiplier
        self.sleep = sleep or asyncio.sleep

    def delay_for(self, attempt_number: int) -> float:
        """Delay slept after the given (1-based) failed attempt."""
        return self.base_delay * self.multiplier ** (attempt_number - 1)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=self.multiplier),
            retry=retry_if_exception_type(StorageError) | retry_if_result(_write_rejected),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self.sleep,
        )

    async def write(self, key: str, operation: Callable[[], Awaitable[bool]]) -> None:
        """
        Run a store write under the policy.

        Raises:
            StorageWriteError: Once all attempts have failed
        """
        try:
            async for attempt in self._retrying():
                with attempt:
                    written = await operation()
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(written)
        except RetryError as e:
            last = e.last_attempt
            cause = last.exception() if last.failed else None
            logger.error(f"Store write for {key} abandoned after {self.max_attempts} attempts")
            raise StorageWriteError(key=key, attempts=self.max_attempts, cause=cause) from cause

    @classmethod
    def from_settings(cls, settings, sleep: Optional[SleepFunc] = None) -> "RetryPolicy":
        return cls(
            max_attempts=settings.STORAGE_RETRY_ATTEMPTS,
            base_delay=settings.STORAGE_RETRY_BASE_DELAY,
            multiplier=settings.STORAGE_RETRY_MULTIPLIER,
            sleep=sleep,
        )
