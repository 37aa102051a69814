r"""Body decoders for successful responses.

Decoders are terminal: a read or parse failure raises
``VALIDATION_ERROR`` and is never retried.
"""

from __future__ import annotations

__all__ = ["ResultEnvelope", "decode_json", "decode_text"]

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from securefetch.exceptions import ErrorKind, create_error

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)

_DECODE_ERRORS = (ValueError, httpx.StreamError, httpx.TransportError)


@dataclass(frozen=True)
class ResultEnvelope(Generic[T]):
    """Uniform wrapper around a decoded body.

    Attributes:
        success: Always ``True``; failures are raised instead.
        data: The decoded body.
        status: The HTTP status code.
        headers: The response headers.
    """

    success: bool
    data: T
    status: int
    headers: dict[str, str]

    @classmethod
    def from_response(cls, response: httpx.Response, data: T) -> ResultEnvelope[T]:
        return cls(success=True, data=data, status=response.status_code, headers=dict(response.headers))


async def decode_json(response: httpx.Response) -> ResultEnvelope[Any]:
    """Read and parse a JSON body.

    Args:
        response: A successful response.

    Returns:
        The envelope holding the parsed value.

    Raises:
        SecureFetchError: ``VALIDATION_ERROR`` if the body cannot be read
            or is not valid JSON. ``details["original_error"]`` holds the
            parser message.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from securefetch.decoders import decode_json
        >>> response = httpx.Response(200, json={"id": 1})
        >>> asyncio.run(decode_json(response)).data
        {'id': 1}

        ```
    """
    try:
        await response.aread()
        data = response.json()
    except _DECODE_ERRORS as exc:
        logger.debug(f"Failed to parse JSON response: {exc}")
        raise create_error(
            "Failed to parse JSON response",
            ErrorKind.VALIDATION_ERROR,
            {"original_error": str(exc) or type(exc).__name__},
        ) from exc
    return ResultEnvelope.from_response(response, data)


async def decode_text(response: httpx.Response) -> ResultEnvelope[str]:
    """Read a text body.

    Args:
        response: A successful response.

    Returns:
        The envelope holding the body text.

    Raises:
        SecureFetchError: ``VALIDATION_ERROR`` if the body cannot be read.
    """
    try:
        await response.aread()
        text = response.text
    except _DECODE_ERRORS as exc:
        logger.debug(f"Failed to read text response: {exc}")
        raise create_error(
            "Failed to read text response",
            ErrorKind.VALIDATION_ERROR,
            {"original_error": str(exc) or type(exc).__name__},
        ) from exc
    return ResultEnvelope.from_response(response, text)
