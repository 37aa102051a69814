r"""Structured error type raised by SecureFetch.

Every failure surfaced by the request engine or the body decoders is a
``SecureFetchError`` tagged with one ``ErrorKind``. Callers branch on
``error.kind`` rather than on exception subclasses.
"""

from __future__ import annotations

__all__ = ["ErrorKind", "SecureFetchError", "create_error"]

import enum
from datetime import datetime, timezone
from typing import Any, assert_never


class ErrorKind(str, enum.Enum):
    """The closed set of failure kinds.

    Example:
        ```pycon
        >>> from securefetch import ErrorKind
        >>> ErrorKind.TIMEOUT_ERROR.retryable
        True
        >>> ErrorKind.HTTP_ERROR.retryable
        False

        ```
    """

    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    ABORT_ERROR = "ABORT_ERROR"
    CSRF_ERROR = "CSRF_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    @property
    def retryable(self) -> bool:
        """Whether a failure of this kind may be retried."""
        match self:
            case ErrorKind.NETWORK_ERROR | ErrorKind.TIMEOUT_ERROR:
                return True
            case (
                ErrorKind.HTTP_ERROR
                | ErrorKind.ABORT_ERROR
                | ErrorKind.CSRF_ERROR
                | ErrorKind.VALIDATION_ERROR
            ):
                return False
            case _:
                assert_never(self)


class SecureFetchError(Exception):
    r"""Raised when a request or a body decode fails.

    Args:
        message: Human-readable summary.
        kind: The failure kind.
        details: Optional kind-specific context (status, url, underlying
            error text, ...).
        timestamp: ISO-8601 instant of creation. Defaults to now (UTC).

    Example:
        ```pycon
        >>> from securefetch import ErrorKind, SecureFetchError
        >>> error = SecureFetchError("boom", ErrorKind.NETWORK_ERROR, {"url": "/a"})
        >>> error.kind
        <ErrorKind.NETWORK_ERROR: 'NETWORK_ERROR'>
        >>> error.details
        {'url': '/a'}

        ```
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.NETWORK_ERROR,
        details: Any | None = None,
        timestamp: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = ErrorKind(kind)
        self.details = details
        self.timestamp = timestamp or datetime.now(timezone.utc).isoformat()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(kind={self.kind.value}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a plain mapping, e.g. for JSON logging."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp,
        }


def create_error(
    message: str,
    kind: ErrorKind = ErrorKind.NETWORK_ERROR,
    details: Any | None = None,
) -> SecureFetchError:
    """Create a structured error stamped with the current time.

    Args:
        message: Human-readable summary.
        kind: The failure kind. Defaults to ``NETWORK_ERROR``.
        details: Optional kind-specific context.

    Returns:
        The new error. It is returned, not raised.
    """
    return SecureFetchError(message=message, kind=kind, details=details)
