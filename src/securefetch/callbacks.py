r"""Callback data structures for observability.

The engine exposes four lifecycle hooks, configured on ``FetchConfig``:

- on_request: called before each attempt
- on_retry: called before each retry delay
- on_success: called when a request succeeds
- on_failure: called once when a request finally fails

Attempt numbers passed to callbacks are 1-indexed.

Example:
    ```pycon
    >>> from securefetch import FetchConfig, SecureFetch
    >>> from securefetch.callbacks import RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"retry {info.attempt}/{info.max_retries + 1} after {info.kind.value}")
    ...
    >>> client = SecureFetch(FetchConfig(on_retry=log_retry))  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RequestInfo", "ResponseInfo", "RetryInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from securefetch.exceptions import ErrorKind, SecureFetchError


@dataclass(frozen=True)
class RequestInfo:
    """Information passed to the on_request callback.

    Attributes:
        url: The fully resolved URL.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt about to be made (1-indexed).
        max_retries: Maximum number of retries allowed for this call.
    """

    url: str
    method: str
    attempt: int
    max_retries: int


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to the on_retry callback.

    Attributes:
        url: The fully resolved URL.
        method: The HTTP method.
        attempt: The attempt that will be made after the delay (1-indexed).
        max_retries: Maximum number of retries allowed for this call.
        wait_time: The delay in seconds before that attempt.
        error: The error that triggered the retry.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    error: SecureFetchError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


@dataclass(frozen=True)
class ResponseInfo:
    """Information passed to the on_success callback.

    Attributes:
        url: The fully resolved URL.
        method: The HTTP method.
        attempt: The attempt that succeeded (1-indexed).
        max_retries: Maximum number of retries allowed for this call.
        response: The successful response.
        total_time: Seconds spent on all attempts, delays included.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    response: httpx.Response
    total_time: float


@dataclass(frozen=True)
class FailureInfo:
    """Information passed to the on_failure callback.

    Attributes:
        url: The fully resolved URL.
        method: The HTTP method.
        attempt: The last attempt made (1-indexed).
        max_retries: Maximum number of retries allowed for this call.
        error: The error surfaced to the caller.
        total_time: Seconds spent on all attempts, delays included.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    error: SecureFetchError
    total_time: float

    @property
    def status_code(self) -> int | None:
        """The HTTP status of the final failure, if it was an HTTP
        error."""
        if isinstance(self.error.details, dict):
            return self.error.details.get("status")
        return None
