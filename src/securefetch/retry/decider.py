r"""Retry decision logic.

This module provides the RetryDecider class that decides, from the kind
of a failure and the attempt count, whether another attempt is made.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from securefetch.exceptions import SecureFetchError

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Only ``NETWORK_ERROR`` and ``TIMEOUT_ERROR`` are retried; every other
    kind propagates on first occurrence.

    Args:
        max_retries: Maximum number of retries for one logical request.

    Example:
        ```pycon
        >>> from securefetch import ErrorKind, SecureFetchError
        >>> from securefetch.retry import RetryDecider
        >>> decider = RetryDecider(max_retries=1)
        >>> decider.should_retry(SecureFetchError("x", ErrorKind.NETWORK_ERROR), attempt=0)
        (True, 'NETWORK_ERROR')
        >>> decider.should_retry(SecureFetchError("x", ErrorKind.NETWORK_ERROR), attempt=1)
        (False, 'max retries exhausted')

        ```
    """

    def __init__(self, max_retries: int) -> None:
        self.max_retries = max_retries

    def should_retry(self, error: SecureFetchError, attempt: int) -> tuple[bool, str]:
        """Determine if a failure should trigger another attempt.

        Args:
            error: The failure of the attempt.
            attempt: The failed attempt number (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not error.kind.retryable:
            return (False, f"{error.kind.value} is not retryable")
        if attempt >= self.max_retries:
            return (False, "max retries exhausted")
        return (True, error.kind.value)
