r"""Per-attempt deadline enforcement.

An ``AttemptDeadline`` arms a one-shot timer on the running event loop
when the attempt starts. If the timer fires, the awaited transport call
is cancelled and ``DeadlineExceeded`` is raised. The timer is disarmed as
soon as the attempt settles, whatever the outcome.
"""

from __future__ import annotations

__all__ = ["AttemptDeadline", "DeadlineExceeded"]

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from securefetch.core.validation import validate_timeout

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class DeadlineExceeded(TimeoutError):
    """Raised when an attempt did not settle before its deadline.

    Args:
        timeout: The deadline in seconds that was exceeded.
    """

    def __init__(self, timeout: float) -> None:
        super().__init__(f"attempt exceeded its deadline of {timeout}s")
        self.timeout = timeout


class AttemptDeadline:
    """One-shot deadline for a single attempt.

    Instances are single-use: each attempt creates its own.

    Args:
        timeout: Maximum seconds the attempt may take. Must be > 0.

    Example:
        ```pycon
        >>> import asyncio
        >>> from securefetch.deadline import AttemptDeadline, DeadlineExceeded
        >>> async def main():
        ...     deadline = AttemptDeadline(0.01)
        ...     try:
        ...         await deadline.run(asyncio.Event().wait())
        ...     except DeadlineExceeded:
        ...         return deadline.expired
        ...
        >>> asyncio.run(main())
        True

        ```
    """

    def __init__(self, timeout: float) -> None:
        validate_timeout(timeout)
        self.timeout = timeout
        self._scope: asyncio.Timeout | None = None

    @property
    def armed(self) -> bool:
        """Whether the timer is currently pending."""
        return self._scope is not None and self._scope.when() is not None and not self.expired

    @property
    def expired(self) -> bool:
        """Whether the timer fired and cancelled the attempt."""
        return self._scope is not None and self._scope.expired()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` under the deadline.

        Args:
            awaitable: The transport call for this attempt.

        Returns:
            The awaited result.

        Raises:
            DeadlineExceeded: If the deadline fired before the call settled.
            RuntimeError: If the deadline was already used.
        """
        if self._scope is not None:
            msg = "AttemptDeadline instances cannot be reused"
            raise RuntimeError(msg)
        try:
            async with asyncio.timeout(self.timeout) as scope:
                self._scope = scope
                try:
                    return await awaitable
                finally:
                    # disarm before the scope exits so a settled attempt never fires
                    if not scope.expired():
                        scope.reschedule(None)
        except TimeoutError as exc:
            # asyncio.timeout only converts the cancellation it caused itself
            if not self.expired:
                raise
            logger.debug(f"Attempt cancelled after exceeding its {self.timeout}s deadline")
            raise DeadlineExceeded(self.timeout) from exc
