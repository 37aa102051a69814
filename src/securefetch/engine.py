r"""Request engine: the single entry point behind every HTTP method.

For each attempt the engine builds a fresh descriptor, runs the transport
call under a fresh deadline and classifies the outcome. The retry
executor wraps the whole attempt.
"""

from __future__ import annotations

__all__ = ["RequestEngine"]

import logging
from typing import TYPE_CHECKING

from securefetch.classifier import ResponseClassifier
from securefetch.deadline import AttemptDeadline
from securefetch.retry import AsyncRetryExecutor, CallbackConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from securefetch.builder import RequestBuilder
    from securefetch.core.config import FetchConfig
    from securefetch.transport import Transport

logger: logging.Logger = logging.getLogger(__name__)


class RequestEngine:
    """Composes builder, deadline, transport, classifier and retry.

    Args:
        config: The client configuration.
        builder: Builds the descriptor of each attempt.
        transport: Async callable sending a descriptor.
        classifier: Maps attempt outcomes to a response or an error.
    """

    def __init__(
        self,
        config: FetchConfig,
        builder: RequestBuilder,
        transport: Transport,
        classifier: ResponseClassifier | None = None,
    ) -> None:
        self.config = config
        self.builder = builder
        self.transport = transport
        self.classifier = classifier or ResponseClassifier()

    async def attempt(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Perform exactly one attempt.

        Returns:
            The successful response.

        Raises:
            SecureFetchError: If the attempt failed for any reason.
        """
        descriptor = self.builder.build(
            method, url, headers=headers, content=content, timeout=timeout
        )
        deadline = AttemptDeadline(descriptor.timeout)
        outcome: httpx.Response | Exception | None
        try:
            outcome = await deadline.run(self.transport(descriptor.url, descriptor))
        except Exception as exc:  # noqa: BLE001
            outcome = exc
        return await self.classifier.classify(
            outcome, url=descriptor.url, timeout=descriptor.timeout
        )

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send a request, retrying retryable failures.

        Args:
            url: Path relative to the base URL, or a full URL.
            method: The HTTP method.
            headers: Caller headers, overriding defaults and CSRF header.
            content: Optional request body.
            timeout: Per-call deadline override in seconds, applied to
                every attempt.

        Returns:
            The successful response (status 2xx or 3xx).

        Raises:
            SecureFetchError: If the request failed.
        """
        method = method.upper()
        executor = AsyncRetryExecutor(self.config.retry, CallbackConfig.from_config(self.config))

        async def attempt() -> httpx.Response:
            return await self.attempt(
                method, url, headers=headers, content=content, timeout=timeout
            )

        return await executor.execute(
            attempt, url=self.builder.resolve_url(url), method=method
        )
