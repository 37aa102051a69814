r"""Outcome classification for a single attempt.

The classifier turns whatever the transport produced (a response, an
exception, or nothing) into either the response itself or exactly one
``SecureFetchError``.
"""

from __future__ import annotations

__all__ = ["ResponseClassifier", "is_success_status", "preview_error_body"]

import json
import logging
from typing import Any

import httpx

from securefetch.exceptions import ErrorKind, SecureFetchError, create_error

logger: logging.Logger = logging.getLogger(__name__)


def is_success_status(status_code: int) -> bool:
    """Return whether a status is in the 2xx-or-redirect success range.

    Example:
        ```pycon
        >>> from securefetch.classifier import is_success_status
        >>> is_success_status(204), is_success_status(302), is_success_status(404)
        (True, True, False)

        ```
    """
    return 200 <= status_code < 400


async def preview_error_body(response: httpx.Response) -> Any | None:
    """Decode an error body without consuming it for the caller.

    The body is buffered once and decoded from that copy: JSON first, then
    text with undecodable bytes replaced. The response stays readable
    afterwards.

    Args:
        response: The failed response.

    Returns:
        The decoded JSON value, the body text, or ``None`` if the body
        could not be read.
    """
    try:
        content = await response.aread()
    except (httpx.HTTPError, httpx.StreamError) as exc:
        logger.debug(f"Could not read error body: {exc}")
        return None
    try:
        return json.loads(content)
    except ValueError:
        pass
    return response.text


class ResponseClassifier:
    """Maps attempt outcomes to a response or a ``SecureFetchError``."""

    async def classify(
        self,
        outcome: httpx.Response | Exception | None,
        *,
        url: str,
        timeout: float,
    ) -> httpx.Response:
        """Classify the outcome of one attempt.

        Args:
            outcome: The response, the exception raised by the attempt, or
                ``None`` if nothing was obtained.
            url: The requested URL, recorded in error details.
            timeout: The effective deadline of the attempt.

        Returns:
            The response, if it is a success.

        Raises:
            SecureFetchError: For every failure, chained to the original
                exception when there is one.
        """
        if outcome is None:
            raise create_error(
                "No response received from server",
                ErrorKind.NETWORK_ERROR,
                {"url": url},
            )
        if isinstance(outcome, SecureFetchError):
            raise outcome
        if isinstance(outcome, (TimeoutError, httpx.TimeoutException)):
            raise create_error(
                f"Timeout: request exceeded the time limit of {timeout}s",
                ErrorKind.TIMEOUT_ERROR,
                {"url": url, "timeout": timeout},
            ) from outcome
        if isinstance(outcome, Exception):
            raise create_error(
                f"Network error: {outcome}",
                ErrorKind.NETWORK_ERROR,
                {"url": url, "original_error": str(outcome) or type(outcome).__name__},
            ) from outcome

        if not is_success_status(outcome.status_code):
            raise create_error(
                f"HTTP error {outcome.status_code}: {outcome.reason_phrase}",
                ErrorKind.HTTP_ERROR,
                {
                    "status": outcome.status_code,
                    "status_text": outcome.reason_phrase,
                    "url": url,
                    "details": await preview_error_body(outcome),
                },
            )
        return outcome
