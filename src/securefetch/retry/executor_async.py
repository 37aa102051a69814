r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class that runs the attempt
function of one logical request in a bounded loop, waiting a fixed delay
between attempts that failed with a retryable error kind.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "AttemptState"]

import asyncio
import enum
import logging
import time
from typing import TYPE_CHECKING

from securefetch.exceptions import SecureFetchError
from securefetch.retry.decider import RetryDecider
from securefetch.retry.manager import CallbackConfig, CallbackManager
from securefetch.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from securefetch.core.config import RetryConfig

logger: logging.Logger = logging.getLogger(__name__)


class AttemptState(str, enum.Enum):
    """States of the retry loop.

    ``ATTEMPTING -> SUCCEEDED``, ``ATTEMPTING -> RETRYING -> ATTEMPTING``
    or ``ATTEMPTING -> FAILED``.
    """

    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    RETRYING = "retrying"
    FAILED = "failed"


class AsyncRetryExecutor:
    """Executes an attempt function with bounded, fixed-delay retries.

    Attempts are strictly sequential: the next attempt starts only after
    the previous one settled and the delay elapsed.

    Attributes:
        config: Retry configuration.
        decider: Logic for deciding whether to retry.
        callbacks: Manager for invoking callbacks.
        state: The current state of the loop.
        attempts: Number of attempts started so far.

    Example:
        ```pycon
        >>> import asyncio
        >>> from securefetch.core.config import RetryConfig
        >>> from securefetch.retry import AsyncRetryExecutor
        >>> async def main(attempt):
        ...     executor = AsyncRetryExecutor(RetryConfig(enabled=True, max_retries=2))
        ...     return await executor.execute(attempt, url="https://api.example.com", method="GET")
        ...
        >>> asyncio.run(main(attempt))  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        retry_config: RetryConfig,
        callback_config: CallbackConfig | None = None,
    ) -> None:
        self.config = retry_config
        self.max_retries = retry_config.effective_max_retries
        self.decider: RetryDecider = RetryDecider(self.max_retries)
        self.callbacks: CallbackManager = CallbackManager(callback_config or CallbackConfig())
        self.state = AttemptState.ATTEMPTING
        self.attempts = 0

    async def execute(
        self,
        attempt_func: Callable[[], Awaitable[httpx.Response]],
        *,
        url: str,
        method: str,
    ) -> httpx.Response:
        """Run ``attempt_func`` until it succeeds or a failure is final.

        Args:
            attempt_func: Performs one complete attempt. It returns the
                successful response or raises ``SecureFetchError``.
            url: The requested URL, used for logging and callbacks.
            method: The HTTP method, used for logging and callbacks.

        Returns:
            The response of the first successful attempt.

        Raises:
            SecureFetchError: The failure of the last attempt, when it is
                not retryable or no retries are left.
        """
        start_time = time.monotonic()
        attempt = 0
        while True:
            self.state = AttemptState.ATTEMPTING
            self.attempts = attempt + 1
            self.callbacks.on_request(url, method, attempt, self.max_retries)
            try:
                response = await attempt_func()
            except SecureFetchError as error:
                should_retry, reason = self.decider.should_retry(error, attempt)
                if not should_retry:
                    self._fail(
                        error,
                        url=url,
                        method=method,
                        attempt=attempt,
                        reason=reason,
                        start_time=start_time,
                    )
                    raise
                await self._wait_before_retry(error, url=url, method=method, attempt=attempt)
                attempt += 1
                continue

            self.state = AttemptState.SUCCEEDED
            logger.debug(f"{method} request to {url} succeeded on attempt {attempt + 1}")
            self.callbacks.on_success(url, method, attempt, self.max_retries, response, start_time)
            return response

    async def _wait_before_retry(
        self, error: SecureFetchError, *, url: str, method: str, attempt: int
    ) -> None:
        self.state = AttemptState.RETRYING
        wait_time = self.config.retry_delay
        log_structured(
            logger,
            logging.DEBUG,
            f"{method} request to {url} failed with {error.kind.value} on attempt "
            f"{attempt + 1}/{self.max_retries + 1}; retrying in {wait_time:.2f}s",
            url=url,
            method=method,
            attempt=attempt + 1,
            kind=error.kind.value,
            wait_time=wait_time,
        )
        self.callbacks.on_retry(url, method, attempt, self.max_retries, wait_time, error)
        await asyncio.sleep(wait_time)

    def _fail(
        self,
        error: SecureFetchError,
        *,
        url: str,
        method: str,
        attempt: int,
        reason: str,
        start_time: float,
    ) -> None:
        self.state = AttemptState.FAILED
        log_structured(
            logger,
            logging.DEBUG,
            f"{method} request to {url} failed with {error.kind.value} after "
            f"{attempt + 1} attempt(s) ({reason})",
            url=url,
            method=method,
            attempt=attempt + 1,
            kind=error.kind.value,
        )
        self.callbacks.on_failure(url, method, attempt, self.max_retries, error, start_time)
