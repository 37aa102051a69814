r"""Zero-configuration one-shot request helper."""

from __future__ import annotations

__all__ = ["secure_fetch"]

from typing import TYPE_CHECKING, Any

from securefetch.client import SecureFetch

if TYPE_CHECKING:
    import httpx


async def secure_fetch(url: str, **options: Any) -> httpx.Response:
    r"""Send a single request with the default configuration.

    A ``SecureFetch`` client is created for the call and closed
    afterwards. The response body is already read, so it stays usable.

    Args:
        url: The URL to request.
        **options: Options accepted by ``SecureFetch.fetch()`` (``method``,
            ``headers``, ``content``, ``timeout``).

    Returns:
        The successful response.

    Raises:
        SecureFetchError: If the request fails.

    Example:
        ```pycon
        >>> import asyncio
        >>> from securefetch import secure_fetch
        >>> response = asyncio.run(secure_fetch("https://api.example.com/data"))  # doctest: +SKIP

        ```
    """
    async with SecureFetch() as client:
        return await client.fetch(url, **options)
