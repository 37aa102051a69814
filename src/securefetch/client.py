r"""Asynchronous client with CSRF injection, deadlines and retry.

``SecureFetch`` is the public entry point. It owns an
``httpx.AsyncClient`` when used as an async context manager, or works
with an injected client, transport and cookie source.
"""

from __future__ import annotations

__all__ = ["SecureFetch"]

import json
from typing import TYPE_CHECKING, Any

import httpx

from securefetch.builder import RequestBuilder
from securefetch.core.config import FetchConfig
from securefetch.csrf import CsrfTokenResolver, jar_cookie_source
from securefetch.decoders import decode_json, decode_text
from securefetch.engine import RequestEngine
from securefetch.exceptions import ErrorKind, create_error
from securefetch.transport import HttpxTransport

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from securefetch.builder import RequestDescriptor
    from securefetch.csrf import CookieSource
    from securefetch.decoders import ResultEnvelope
    from securefetch.transport import Transport


class SecureFetch:
    r"""Asynchronous HTTP client with CSRF injection, deadlines and retry.

    Args:
        config: Optional client configuration. If ``None``, a default
            ``FetchConfig`` is used.
        client: Optional ``httpx.AsyncClient`` to send requests with. It is
            not closed by ``SecureFetch``.
        transport: Optional transport replacing the ``httpx`` one. When
            given, no ``httpx`` client is needed.
        cookie_source: Optional callable returning the cookie string the
            CSRF token is read from. Defaults to the ``httpx`` cookie jar,
            or to no cookies with a custom transport.

    Example:
        ```pycon
        >>> import asyncio
        >>> from securefetch import FetchConfig, SecureFetch
        >>> async def main():  # doctest: +SKIP
        ...     config = FetchConfig(base_url="https://api.example.com")
        ...     async with SecureFetch(config) as client:
        ...         response = await client.post("/items", {"name": "widget"})
        ...         result = await client.process_json_response(response)
        ...     return result.data
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: Transport | None = None,
        cookie_source: CookieSource | None = None,
    ) -> None:
        self.config = config if config is not None else FetchConfig()
        self._client = client
        self._owns_client = False
        self._transport = transport
        self._cookie_source = cookie_source

        resolver = CsrfTokenResolver(self.config.csrf, self._read_cookies)
        self._builder = RequestBuilder(self.config, resolver)
        self._engine = RequestEngine(self.config, self._builder, self._send)

    async def __aenter__(self) -> Self:
        """Enter the async context manager, creating an ``httpx`` client
        if none was injected."""
        if self._client is None and self._transport is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager, closing an owned client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the ``httpx`` client.

        Raises:
            RuntimeError: If no client was injected and the instance is used
                outside of an async context manager.
        """
        if self._client is None:
            msg = "SecureFetch must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    def _read_cookies(self) -> str:
        if self._cookie_source is not None:
            return self._cookie_source()
        if self._transport is not None:
            return ""
        return jar_cookie_source(self._ensure_client().cookies, self.config.base_url or None)()

    async def _send(self, url: str, descriptor: RequestDescriptor) -> httpx.Response:
        if self._transport is not None:
            return await self._transport(url, descriptor)
        transport = HttpxTransport(self._ensure_client(), origin=self.config.base_url or None)
        return await transport(url, descriptor)

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        r"""Send a request.

        Args:
            url: Path appended to ``base_url``, or a full URL when no base
                URL is configured.
            method: HTTP method. Defaults to ``"GET"``.
            headers: Per-call headers; they win over defaults and the CSRF
                header.
            content: Optional request body.
            timeout: Per-call deadline in seconds, applied to each attempt.

        Returns:
            The successful response (status 2xx or 3xx).

        Raises:
            SecureFetchError: If the request fails.
            RuntimeError: If used outside of a context manager without an
                injected client or transport.
        """
        if self._transport is None:
            self._ensure_client()
        return await self._engine.fetch(
            url, method=method, headers=headers, content=content, timeout=timeout
        )

    async def get(self, url: str, **options: Any) -> httpx.Response:
        """Send a GET request (see ``fetch()`` for options)."""
        return await self.fetch(url, **{**options, "method": "GET"})

    async def post(self, url: str, data: Any = None, **options: Any) -> httpx.Response:
        """Send a POST request with ``data`` serialized as JSON.

        ``None`` is sent as an empty JSON object.

        Raises:
            SecureFetchError: ``VALIDATION_ERROR`` if ``data`` is not JSON
                serializable, or any failure of ``fetch()``.
        """
        return await self._send_json("POST", url, data, options)

    async def put(self, url: str, data: Any = None, **options: Any) -> httpx.Response:
        """Send a PUT request with ``data`` serialized as JSON."""
        return await self._send_json("PUT", url, data, options)

    async def patch(self, url: str, data: Any = None, **options: Any) -> httpx.Response:
        """Send a PATCH request with ``data`` serialized as JSON."""
        return await self._send_json("PATCH", url, data, options)

    async def delete(self, url: str, **options: Any) -> httpx.Response:
        """Send a DELETE request (see ``fetch()`` for options)."""
        return await self.fetch(url, **{**options, "method": "DELETE"})

    async def _send_json(
        self, method: str, url: str, data: Any, options: dict[str, Any]
    ) -> httpx.Response:
        try:
            content = json.dumps({} if data is None else data)
        except (TypeError, ValueError) as exc:
            raise create_error(
                "Failed to serialize request body as JSON",
                ErrorKind.VALIDATION_ERROR,
                {"url": self._builder.resolve_url(url), "original_error": str(exc)},
            ) from exc
        return await self.fetch(url, **{**options, "method": method, "content": content})

    async def process_json_response(self, response: httpx.Response) -> ResultEnvelope[Any]:
        """Decode a JSON body into a result envelope.

        Raises:
            SecureFetchError: ``VALIDATION_ERROR`` if the body is not JSON.
        """
        return await decode_json(response)

    async def process_text_response(self, response: httpx.Response) -> ResultEnvelope[str]:
        """Decode a text body into a result envelope.

        Raises:
            SecureFetchError: ``VALIDATION_ERROR`` if the body cannot be read.
        """
        return await decode_text(response)
