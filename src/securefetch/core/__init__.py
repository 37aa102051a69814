r"""Core configuration shared by the builder, the engine and the
client."""

from __future__ import annotations

__all__ = [
    "DEFAULT_HEADERS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "STATE_CHANGING_METHODS",
    "CredentialsPolicy",
    "CsrfConfig",
    "FetchConfig",
    "RetryConfig",
    "validate_retry_params",
    "validate_timeout",
]

from securefetch.core.config import (
    DEFAULT_HEADERS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    STATE_CHANGING_METHODS,
    CredentialsPolicy,
    CsrfConfig,
    FetchConfig,
    RetryConfig,
)
from securefetch.core.validation import validate_retry_params, validate_timeout
