r"""Request descriptor construction.

The builder merges the base URL, the default headers, the CSRF header and
the caller's options into a ``RequestDescriptor``. A new descriptor is
built for every attempt.
"""

from __future__ import annotations

__all__ = ["RequestBuilder", "RequestDescriptor"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from securefetch.core.config import STATE_CHANGING_METHODS, CredentialsPolicy
from securefetch.exceptions import ErrorKind, create_error

if TYPE_CHECKING:
    from collections.abc import Mapping

    from securefetch.core.config import FetchConfig
    from securefetch.csrf import CsrfTokenResolver

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything the transport needs to send one attempt.

    Attributes:
        method: Upper-case HTTP method.
        url: The fully resolved URL.
        headers: Merged request headers.
        content: Optional request body.
        timeout: Effective deadline in seconds for the attempt.
        credentials: Policy for attaching jar cookies.
    """

    method: str
    url: str
    headers: httpx.Headers
    content: str | bytes | None
    timeout: float
    credentials: CredentialsPolicy


class RequestBuilder:
    """Builds request descriptors from a client configuration.

    Args:
        config: The client configuration.
        csrf_resolver: Resolver used to read the CSRF token.
    """

    def __init__(self, config: FetchConfig, csrf_resolver: CsrfTokenResolver) -> None:
        self.config = config
        self.csrf_resolver = csrf_resolver

    def resolve_url(self, path: str) -> str:
        """Prefix ``path`` with the base URL, if one is configured.

        Example:
            ```pycon
            >>> from securefetch.builder import RequestBuilder
            >>> from securefetch.core.config import FetchConfig
            >>> from securefetch.csrf import CsrfTokenResolver
            >>> config = FetchConfig(base_url="https://api.example.com/")
            >>> builder = RequestBuilder(config, CsrfTokenResolver(config.csrf, str))
            >>> builder.resolve_url("/users")
            'https://api.example.com//users'

            ```
        """
        base_url = self.config.base_url
        return f"{base_url}{path}" if base_url else path

    def build(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
        timeout: float | None = None,
    ) -> RequestDescriptor:
        """Build the descriptor for one attempt.

        Args:
            method: The HTTP method, in any case.
            path: Path appended to the base URL, or an absolute URL when no
                base URL is configured.
            headers: Caller headers. They override defaults and the CSRF
                header, case-insensitively.
            content: Optional request body.
            timeout: Per-call deadline override in seconds.

        Returns:
            The request descriptor.

        Raises:
            SecureFetchError: ``CSRF_ERROR`` if strict CSRF mode is on and no
                token is available for a state-changing method.
                ``VALIDATION_ERROR`` if the effective timeout is not > 0.
        """
        method = method.upper()
        url = self.resolve_url(path)
        effective_timeout = self.config.timeout if timeout is None else timeout
        if effective_timeout <= 0:
            raise create_error(
                f"timeout must be > 0, got {effective_timeout}",
                ErrorKind.VALIDATION_ERROR,
                {"url": url, "timeout": effective_timeout},
            )

        merged = httpx.Headers(self.config.default_headers)
        if self.config.csrf.enabled and method in STATE_CHANGING_METHODS:
            token = self.csrf_resolver.resolve()
            if token is not None:
                merged[self.config.csrf.header_name] = token
            elif self.config.csrf.strict:
                raise create_error(
                    f"CSRF token cookie {self.config.csrf.cookie_name!r} not found",
                    ErrorKind.CSRF_ERROR,
                    {"url": url, "method": method, "cookie_name": self.config.csrf.cookie_name},
                )
            else:
                logger.warning(
                    f"CSRF token cookie {self.config.csrf.cookie_name!r} not found; "
                    f"{method} request to {url} may be rejected by the server"
                )
        if headers:
            merged.update(headers)

        return RequestDescriptor(
            method=method,
            url=url,
            headers=merged,
            content=content,
            timeout=effective_timeout,
            credentials=self.config.credentials,
        )
