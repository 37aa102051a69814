r"""Structured (JSON) logging for securefetch.

Opt-in: attach ``StructuredFormatter`` to a handler on the
``securefetch`` logger. Retry and failure events are logged with extra
fields (``url``, ``method``, ``attempt``, ``kind``, ``wait_time``) that
the formatter emits as top-level JSON keys.

Example:
    ```python
    import logging
    from securefetch.utils.structured_logging import StructuredFormatter, correlation_scope

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("securefetch")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    with correlation_scope("checkout-42"):
        response = await client.post("/orders", {"sku": "A1"})
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "correlation_scope",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextlib
import contextvars
import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "securefetch_correlation_id", default=None
)

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, if any."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The ID lives in a context variable, so concurrent tasks each keep
    their own.
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id.set(None)


@contextlib.contextmanager
def correlation_scope(correlation_id: str) -> Iterator[None]:
    """Set a correlation ID for the duration of a ``with`` block.

    Example:
        ```pycon
        >>> from securefetch.utils.structured_logging import (
        ...     correlation_scope,
        ...     get_correlation_id,
        ... )
        >>> with correlation_scope("req-1"):
        ...     get_correlation_id()
        ...
        'req-1'
        >>> get_correlation_id() is None
        True

        ```
    """
    token = _correlation_id.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Output keys: ``timestamp`` (ISO-8601 UTC), ``level``, ``logger``,
    ``message``, ``module``, ``function``, ``line``, the correlation ID
    when set, ``exception`` when present, and every ``extra`` field.
    Values that are not JSON serializable are rendered with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value
        return json.dumps(log_data, default=str)

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None  # noqa: ARG002
    ) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log ``message`` with ``extra`` fields attached to the record.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.DEBUG).
        message: Log message.
        **extra: Structured fields included in JSON output.
    """
    logger.log(level, message, extra=extra)
