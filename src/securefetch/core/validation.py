r"""Parameter validation utilities for request configuration.

This module provides validation functions used by the configuration
dataclasses and the request builder to reject invalid values before
any request is issued.
"""

from __future__ import annotations

__all__ = ["validate_header_name", "validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float) -> None:
    """Validate a per-attempt deadline.

    Args:
        timeout: Maximum seconds a single attempt may take. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from securefetch.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(max_retries: int, retry_delay: float = 0.0) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of additional attempts after the first
            one. Must be >= 0. A value of 0 means a single attempt.
        retry_delay: Fixed delay in seconds between two attempts.
            Must be >= 0.

    Raises:
        ValueError: If max_retries or retry_delay are negative.

    Example:
        ```pycon
        >>> from securefetch.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3)
        >>> validate_retry_params(max_retries=0, retry_delay=0.5)

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if retry_delay < 0:
        msg = f"retry_delay must be >= 0, got {retry_delay}"
        raise ValueError(msg)


def validate_header_name(name: str, field_name: str) -> None:
    """Validate that a configured header or cookie name is usable.

    Args:
        name: The configured name.
        field_name: The configuration field, used in the error message.

    Raises:
        ValueError: If the name is empty or contains whitespace.
    """
    if not name or any(char.isspace() for char in name):
        msg = f"{field_name} must be a non-empty name without whitespace, got {name!r}"
        raise ValueError(msg)
