from __future__ import annotations

import asyncio

import pytest

from securefetch.deadline import AttemptDeadline, DeadlineExceeded
from tests.helpers import HangingTransport

#####################################
#     Tests for AttemptDeadline     #
#####################################


async def _value(value: int) -> int:
    return value


async def _fail() -> int:
    msg = "transport failure"
    raise ConnectionError(msg)


@pytest.mark.asyncio
async def test_attempt_deadline_returns_result() -> None:
    deadline = AttemptDeadline(1.0)
    assert await deadline.run(_value(42)) == 42
    assert not deadline.expired
    assert not deadline.armed


@pytest.mark.asyncio
async def test_attempt_deadline_propagates_errors_and_disarms() -> None:
    deadline = AttemptDeadline(1.0)
    with pytest.raises(ConnectionError, match=r"transport failure"):
        await deadline.run(_fail())
    assert not deadline.expired
    assert not deadline.armed


@pytest.mark.asyncio
async def test_attempt_deadline_fires_and_cancels_call() -> None:
    transport = HangingTransport()
    deadline = AttemptDeadline(0.05)
    loop = asyncio.get_running_loop()
    start = loop.time()

    with pytest.raises(DeadlineExceeded) as exc_info:
        await deadline.run(transport("https://api.example.com", None))

    assert loop.time() - start >= 0.04
    assert exc_info.value.timeout == 0.05
    assert isinstance(exc_info.value, TimeoutError)
    assert deadline.expired
    assert transport.cancelled == 1


@pytest.mark.asyncio
async def test_attempt_deadline_timer_does_not_fire_after_settling() -> None:
    deadline = AttemptDeadline(0.02)
    assert await deadline.run(_value(1)) == 1
    # outlive the original deadline; the task must not be cancelled
    await asyncio.sleep(0.05)
    assert not deadline.expired


@pytest.mark.asyncio
async def test_attempt_deadline_armed_while_running() -> None:
    deadline = AttemptDeadline(1.0)
    observed: list[bool] = []

    async def call() -> int:
        observed.append(deadline.armed)
        return 1

    await deadline.run(call())
    assert observed == [True]
    assert not deadline.armed


@pytest.mark.asyncio
async def test_attempt_deadline_external_timeout_error_is_not_converted() -> None:
    async def call() -> int:
        msg = "socket timeout"
        raise TimeoutError(msg)

    deadline = AttemptDeadline(1.0)
    with pytest.raises(TimeoutError, match=r"socket timeout") as exc_info:
        await deadline.run(call())
    assert not isinstance(exc_info.value, DeadlineExceeded)


@pytest.mark.asyncio
async def test_attempt_deadline_caller_cancellation_propagates() -> None:
    transport = HangingTransport()
    deadline = AttemptDeadline(10.0)
    task = asyncio.ensure_future(deadline.run(transport("https://api.example.com", None)))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert not deadline.expired


@pytest.mark.asyncio
async def test_attempt_deadline_cannot_be_reused() -> None:
    deadline = AttemptDeadline(1.0)
    await deadline.run(_value(1))
    coro = _value(2)
    with pytest.raises(RuntimeError, match=r"cannot be reused"):
        await deadline.run(coro)
    coro.close()


@pytest.mark.parametrize("timeout", [0, -1])
def test_attempt_deadline_rejects_invalid_timeout(timeout: float) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        AttemptDeadline(timeout)
