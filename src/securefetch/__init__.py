r"""securefetch - Async HTTP requests with CSRF protection, deadlines and
retry.

This package wraps an ``httpx`` transport with the concerns every
browser-facing API client needs, and reports every failure as one typed
error.

Key Features:
    - CSRF token read from a cookie and sent as a header on POST, PUT,
      PATCH and DELETE (soft-fail by default, strict mode available)
    - Per-attempt deadline that cancels the in-flight call
    - Bounded retry with a fixed delay for network errors and timeouts
    - A single ``SecureFetchError`` type tagged with an ``ErrorKind``
    - JSON/text body decoders returning a uniform ``ResultEnvelope``
    - Lifecycle callbacks and opt-in structured JSON logging

Example:
    ```pycon
    >>> import asyncio
    >>> from securefetch import ErrorKind, FetchConfig, RetryConfig, SecureFetch, SecureFetchError
    >>> async def main():  # doctest: +SKIP
    ...     config = FetchConfig(
    ...         base_url="https://api.example.com",
    ...         timeout=5.0,
    ...         retry=RetryConfig(enabled=True, max_retries=2, retry_delay=0.5),
    ...     )
    ...     async with SecureFetch(config) as client:
    ...         try:
    ...             response = await client.get("/users/1")
    ...         except SecureFetchError as error:
    ...             if error.kind is ErrorKind.HTTP_ERROR:
    ...                 return error.details["status"]
    ...             raise
    ...         return (await client.process_json_response(response)).data
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "CredentialsPolicy",
    "CsrfConfig",
    "ErrorKind",
    "FetchConfig",
    "ResultEnvelope",
    "RetryConfig",
    "SecureFetch",
    "SecureFetchError",
    "__version__",
    "create_error",
    "secure_fetch",
]

from importlib.metadata import PackageNotFoundError, version

from securefetch.client import SecureFetch
from securefetch.core.config import CredentialsPolicy, CsrfConfig, FetchConfig, RetryConfig
from securefetch.decoders import ResultEnvelope
from securefetch.exceptions import ErrorKind, SecureFetchError, create_error
from securefetch.fetch import secure_fetch

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
