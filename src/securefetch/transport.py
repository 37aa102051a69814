r"""Transport abstraction over ``httpx``.

A transport is any async callable ``(url, descriptor) -> httpx.Response``.
``httpx.Response`` buffers its body on first read, which lets the
classifier preview an error body while leaving it readable for the
caller.
"""

from __future__ import annotations

__all__ = ["HttpxTransport", "Transport"]

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import httpx

from securefetch.core.config import CredentialsPolicy

if TYPE_CHECKING:
    from securefetch.builder import RequestDescriptor

logger: logging.Logger = logging.getLogger(__name__)

Transport = Callable[[str, "RequestDescriptor"], Awaitable[httpx.Response]]


class HttpxTransport:
    """Sends request descriptors through an ``httpx.AsyncClient``.

    Jar cookies are attached according to the descriptor's credentials
    policy. The client's own timeout is not used; the attempt deadline
    bounds every call.

    Args:
        client: The client used to send requests. It is not closed by the
            transport.
        origin: Optional URL whose scheme/host/port defines the same origin
            for ``CredentialsPolicy.SAME_ORIGIN``. Without it every request
            counts as same-origin.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from securefetch.transport import HttpxTransport
        >>> async def main():
        ...     async with httpx.AsyncClient() as client:
        ...         transport = HttpxTransport(client, origin="https://api.example.com")
        ...         ...
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, client: httpx.AsyncClient, origin: str | None = None) -> None:
        self.client = client
        self.origin = httpx.URL(origin) if origin else None

    def sends_cookies(self, url: httpx.URL, policy: CredentialsPolicy) -> bool:
        """Return whether jar cookies go with a request to ``url``."""
        if policy is CredentialsPolicy.OMIT:
            return False
        if policy is CredentialsPolicy.INCLUDE or self.origin is None:
            return True
        # relative URLs resolve against the client's base_url
        if url.is_relative_url:
            return True
        return (url.scheme, url.host, url.port) == (
            self.origin.scheme,
            self.origin.host,
            self.origin.port,
        )

    async def __call__(self, url: str, descriptor: RequestDescriptor) -> httpx.Response:
        request_url = httpx.URL(url)
        cookies = (
            self.client.cookies if self.sends_cookies(request_url, descriptor.credentials) else None
        )
        request = self.client.build_request(
            descriptor.method,
            request_url,
            headers=descriptor.headers,
            content=descriptor.content,
            timeout=httpx.Timeout(None),
        )
        if cookies is None and "Cookie" not in descriptor.headers:
            request.headers.pop("Cookie", None)
        logger.debug(
            f"Sending {descriptor.method} request to {url} "
            f"(credentials={descriptor.credentials.value}, cookies={'yes' if cookies else 'no'})"
        )
        return await self.client.send(request)
