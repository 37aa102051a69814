r"""Shared test helpers: fake transports and response factories.

The fakes implement the transport contract ``(url, descriptor) ->
httpx.Response`` and record every call, so tests can assert on the
number of attempts and on the outgoing descriptors.
"""

from __future__ import annotations

__all__ = [
    "TEST_URL",
    "HangingTransport",
    "ScriptedTransport",
    "create_response",
]

import asyncio
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from securefetch.builder import RequestDescriptor

TEST_URL = "https://api.example.com/data"


def create_response(
    status_code: int = 200,
    *,
    json: Any = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
    url: str = TEST_URL,
) -> httpx.Response:
    """Create a real, fully read ``httpx.Response``."""
    request = httpx.Request("GET", url)
    if json is not None:
        return httpx.Response(status_code, json=json, headers=headers, request=request)
    return httpx.Response(status_code, text=text or "", headers=headers, request=request)


class ScriptedTransport:
    """Transport returning or raising the scripted outcomes in order.

    The last outcome is repeated once the script is exhausted.
    """

    def __init__(self, *outcomes: httpx.Response | Exception) -> None:
        self.outcomes = list(outcomes) or [create_response()]
        self.calls: list[tuple[str, RequestDescriptor]] = []
        self.call_times: list[float] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_descriptor(self) -> RequestDescriptor:
        return self.calls[-1][1]

    async def __call__(self, url: str, descriptor: RequestDescriptor) -> httpx.Response:
        self.calls.append((url, descriptor))
        self.call_times.append(asyncio.get_running_loop().time())
        index = min(len(self.calls), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class HangingTransport:
    """Transport that never settles on its own and records
    cancellation."""

    def __init__(self) -> None:
        self.calls = 0
        self.cancelled = 0

    async def __call__(self, url: str, descriptor: RequestDescriptor) -> httpx.Response:
        self.calls += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        msg = "unreachable"
        raise AssertionError(msg)
