r"""Configuration dataclasses and defaults for SecureFetch.

This module provides configuration constants and the immutable
configuration objects shared by the request builder, the retry
executor and the SecureFetch client.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CSRF_COOKIE_NAME",
    "DEFAULT_CSRF_HEADER_NAME",
    "DEFAULT_HEADERS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "STATE_CHANGING_METHODS",
    "CredentialsPolicy",
    "CsrfConfig",
    "FetchConfig",
    "RetryConfig",
]

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from securefetch.core.validation import (
    validate_header_name,
    validate_retry_params,
    validate_timeout,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from securefetch.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo


# Default deadline in seconds for a single attempt
# Every retry gets a fresh deadline of the same length
DEFAULT_TIMEOUT = 10.0

# Default maximum number of additional attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Fixed delay in seconds between two attempts (no backoff growth)
DEFAULT_RETRY_DELAY = 1.0

DEFAULT_CSRF_COOKIE_NAME = "csrfToken"
DEFAULT_CSRF_HEADER_NAME = "X-CSRF-Token"

# Headers sent with every request unless overridden
DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Content-Type": "application/json",
        "X-Content-Type-Options": "nosniff",
    }
)

# Methods that receive the CSRF header
STATE_CHANGING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class CredentialsPolicy(str, enum.Enum):
    """How cookies from the client's jar are attached to a request.

    - ``OMIT``: never send jar cookies.
    - ``SAME_ORIGIN``: send jar cookies only to the ``base_url`` origin.
    - ``INCLUDE``: always send jar cookies.
    """

    OMIT = "omit"
    SAME_ORIGIN = "same-origin"
    INCLUDE = "include"


@dataclass(frozen=True)
class CsrfConfig:
    """CSRF token sourcing and delivery configuration.

    Args:
        enabled: Whether the token is read and attached at all.
        cookie_name: Name of the cookie holding the token.
        header_name: Name of the request header carrying the token.
        strict: If ``True``, a state-changing request without a token
            fails with ``CSRF_ERROR`` instead of being sent with a warning.

    Example:
        ```pycon
        >>> from securefetch.core.config import CsrfConfig
        >>> CsrfConfig().header_name
        'X-CSRF-Token'

        ```
    """

    enabled: bool = True
    cookie_name: str = DEFAULT_CSRF_COOKIE_NAME
    header_name: str = DEFAULT_CSRF_HEADER_NAME
    strict: bool = False

    def __post_init__(self) -> None:
        validate_header_name(self.cookie_name, "cookie_name")
        validate_header_name(self.header_name, "header_name")


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for the retry loop.

    Args:
        enabled: Whether failed attempts are retried at all. When
            ``False`` exactly one attempt is made.
        max_retries: Maximum number of additional attempts. Must be >= 0.
        retry_delay: Fixed delay in seconds between attempts. Must be >= 0.

    Example:
        ```pycon
        >>> from securefetch.core.config import RetryConfig
        >>> RetryConfig(enabled=True).attempts
        4
        >>> RetryConfig(enabled=False).attempts
        1

        ```
    """

    enabled: bool = False
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY

    def __post_init__(self) -> None:
        validate_retry_params(max_retries=self.max_retries, retry_delay=self.retry_delay)

    @property
    def effective_max_retries(self) -> int:
        """The number of retries actually allowed by this config."""
        return self.max_retries if self.enabled else 0

    @property
    def attempts(self) -> int:
        """The upper bound on transport calls for one logical request."""
        return self.effective_max_retries + 1


@dataclass(frozen=True)
class FetchConfig:
    """Immutable configuration of a SecureFetch client.

    All fields are optional. ``default_headers`` are merged on top of
    ``DEFAULT_HEADERS`` and exposed as a read-only mapping.

    Args:
        base_url: Prefix prepended to every request path. Empty means paths
            are used as-is.
        timeout: Default per-attempt deadline in seconds. Must be > 0.
        credentials: Policy for attaching jar cookies to requests.
        default_headers: Extra headers applied to every request.
        csrf: CSRF configuration.
        retry: Retry configuration.
        on_request: Optional callback called before each attempt.
        on_retry: Optional callback called before each retry delay.
        on_success: Optional callback called when a request succeeds.
        on_failure: Optional callback called when a request finally fails.

    Example:
        ```pycon
        >>> from securefetch.core.config import FetchConfig, RetryConfig
        >>> config = FetchConfig(base_url="https://api.example.com", retry=RetryConfig(enabled=True))
        >>> config.timeout
        10.0
        >>> config.default_headers["Content-Type"]
        'application/json'

        ```
    """

    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    credentials: CredentialsPolicy = CredentialsPolicy.SAME_ORIGIN
    default_headers: Mapping[str, str] = field(default_factory=dict)
    csrf: CsrfConfig = field(default_factory=CsrfConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate and normalize configuration after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_timeout(self.timeout)
        # frozen dataclass: normalized values go through object.__setattr__
        object.__setattr__(self, "credentials", CredentialsPolicy(self.credentials))
        overridden = {name.lower() for name in self.default_headers}
        headers = {k: v for k, v in DEFAULT_HEADERS.items() if k.lower() not in overridden}
        headers.update(self.default_headers)
        object.__setattr__(self, "default_headers", MappingProxyType(headers))
