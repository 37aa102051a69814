r"""Callback manager for request lifecycle events.

This module provides the CallbackManager class that builds the callback
info objects and invokes the user-defined hooks.
"""

from __future__ import annotations

__all__ = ["CallbackConfig", "CallbackManager"]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from securefetch.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from securefetch.core.config import FetchConfig
    from securefetch.exceptions import SecureFetchError


@dataclass(frozen=True)
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each retry delay.
        on_success: Optional callback invoked when the request succeeds.
        on_failure: Optional callback invoked when the request fails.
    """

    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    @classmethod
    def from_config(cls, config: FetchConfig) -> CallbackConfig:
        return cls(
            on_request=config.on_request,
            on_retry=config.on_retry,
            on_success=config.on_success,
            on_failure=config.on_failure,
        )


class CallbackManager:
    """Invokes lifecycle callbacks.

    Attempt numbers are received 0-indexed and passed on 1-indexed.

    Args:
        callbacks: Callback configuration.
    """

    def __init__(self, callbacks: CallbackConfig) -> None:
        self.callbacks = callbacks

    def on_request(self, url: str, method: str, attempt: int, max_retries: int) -> None:
        if self.callbacks.on_request is not None:
            self.callbacks.on_request(
                RequestInfo(url=url, method=method, attempt=attempt + 1, max_retries=max_retries)
            )

    def on_retry(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        wait_time: float,
        error: SecureFetchError,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: The failed attempt (0-indexed). The callback receives
                the number of the attempt about to be made.
            max_retries: Maximum number of retries.
            wait_time: Delay before the next attempt.
            error: The failure that triggered the retry.
        """
        if self.callbacks.on_retry is not None:
            self.callbacks.on_retry(
                RetryInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 2,
                    max_retries=max_retries,
                    wait_time=wait_time,
                    error=error,
                )
            )

    def on_success(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        response: httpx.Response,
        start_time: float,
    ) -> None:
        if self.callbacks.on_success is not None:
            self.callbacks.on_success(
                ResponseInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    response=response,
                    total_time=time.monotonic() - start_time,
                )
            )

    def on_failure(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        error: SecureFetchError,
        start_time: float,
    ) -> None:
        if self.callbacks.on_failure is not None:
            self.callbacks.on_failure(
                FailureInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    error=error,
                    total_time=time.monotonic() - start_time,
                )
            )
