from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, call

import pytest

from securefetch import ErrorKind, RetryConfig, SecureFetchError
from securefetch.callbacks import FailureInfo, ResponseInfo
from securefetch.retry import AsyncRetryExecutor, AttemptState, CallbackConfig
from tests.helpers import TEST_URL, create_response

if TYPE_CHECKING:
    from collections.abc import Callable


def network_error() -> SecureFetchError:
    return SecureFetchError("Network error: Connection refused", ErrorKind.NETWORK_ERROR)


def make_executor(
    max_retries: int = 3, retry_delay: float = 1.0, **callbacks: Callable
) -> AsyncRetryExecutor:
    return AsyncRetryExecutor(
        RetryConfig(enabled=True, max_retries=max_retries, retry_delay=retry_delay),
        CallbackConfig(**callbacks),
    )


########################################
#     Tests for AsyncRetryExecutor     #
########################################


@pytest.mark.asyncio
async def test_executor_success_first_attempt(mock_asleep: Mock) -> None:
    response = create_response()
    attempt = AsyncMock(return_value=response)
    executor = make_executor()

    assert await executor.execute(attempt, url=TEST_URL, method="GET") is response
    assert attempt.call_count == 1
    assert executor.attempts == 1
    assert executor.state is AttemptState.SUCCEEDED
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_executor_success_after_retries(mock_asleep: Mock) -> None:
    response = create_response()
    attempt = AsyncMock(side_effect=[network_error(), network_error(), response])
    executor = make_executor(retry_delay=0.5)

    assert await executor.execute(attempt, url=TEST_URL, method="GET") is response
    assert attempt.call_count == 3
    assert executor.attempts == 3
    assert mock_asleep.call_args_list == [call(0.5), call(0.5)]


@pytest.mark.asyncio
@pytest.mark.parametrize("max_retries", [0, 1, 3])
async def test_executor_exhausts_retries(mock_asleep: Mock, max_retries: int) -> None:
    error = network_error()
    attempt = AsyncMock(side_effect=error)
    executor = make_executor(max_retries=max_retries)

    with pytest.raises(SecureFetchError) as exc_info:
        await executor.execute(attempt, url=TEST_URL, method="GET")

    assert exc_info.value is error
    assert attempt.call_count == max_retries + 1
    assert mock_asleep.call_count == max_retries
    assert executor.state is AttemptState.FAILED


@pytest.mark.asyncio
async def test_executor_timeout_error_is_retried(mock_asleep: Mock) -> None:
    response = create_response()
    attempt = AsyncMock(
        side_effect=[SecureFetchError("Timeout", ErrorKind.TIMEOUT_ERROR), response]
    )
    assert await make_executor().execute(attempt, url=TEST_URL, method="GET") is response
    assert attempt.call_count == 2
    mock_asleep.assert_called_once_with(1.0)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind", [ErrorKind.HTTP_ERROR, ErrorKind.VALIDATION_ERROR, ErrorKind.CSRF_ERROR]
)
async def test_executor_does_not_retry_terminal_kinds(mock_asleep: Mock, kind: ErrorKind) -> None:
    attempt = AsyncMock(side_effect=SecureFetchError("terminal", kind))

    with pytest.raises(SecureFetchError) as exc_info:
        await make_executor().execute(attempt, url=TEST_URL, method="GET")

    assert exc_info.value.kind is kind
    assert attempt.call_count == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_executor_retry_disabled_makes_single_attempt(mock_asleep: Mock) -> None:
    attempt = AsyncMock(side_effect=network_error())
    executor = AsyncRetryExecutor(RetryConfig(enabled=False, max_retries=5))

    with pytest.raises(SecureFetchError):
        await executor.execute(attempt, url=TEST_URL, method="GET")

    assert executor.max_retries == 0
    assert attempt.call_count == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_executor_non_structured_errors_propagate(mock_asleep: Mock) -> None:
    attempt = AsyncMock(side_effect=RuntimeError("bug"))
    with pytest.raises(RuntimeError, match=r"bug"):
        await make_executor().execute(attempt, url=TEST_URL, method="GET")
    assert attempt.call_count == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_executor_invokes_callbacks(mock_asleep: Mock) -> None:
    on_request, on_retry, on_success, on_failure = Mock(), Mock(), Mock(), Mock()
    response = create_response()
    attempt = AsyncMock(side_effect=[network_error(), response])
    executor = make_executor(
        max_retries=2,
        on_request=on_request,
        on_retry=on_retry,
        on_success=on_success,
        on_failure=on_failure,
    )

    await executor.execute(attempt, url=TEST_URL, method="POST")

    assert [c.args[0].attempt for c in on_request.call_args_list] == [1, 2]
    assert on_retry.call_count == 1
    assert on_retry.call_args.args[0].attempt == 2
    assert on_retry.call_args.args[0].max_retries == 2
    info = on_success.call_args.args[0]
    assert isinstance(info, ResponseInfo)
    assert info.attempt == 2
    assert info.method == "POST"
    on_failure.assert_not_called()


@pytest.mark.asyncio
async def test_executor_failure_callback_called_once(mock_asleep: Mock) -> None:
    on_failure = Mock()
    attempt = AsyncMock(side_effect=network_error())
    executor = make_executor(max_retries=2, on_failure=on_failure)

    with pytest.raises(SecureFetchError):
        await executor.execute(attempt, url=TEST_URL, method="GET")

    on_failure.assert_called_once()
    info = on_failure.call_args.args[0]
    assert isinstance(info, FailureInfo)
    assert info.attempt == 3
    assert info.error.kind is ErrorKind.NETWORK_ERROR


@pytest.mark.asyncio
async def test_executor_state_is_retrying_during_delay() -> None:
    executor = make_executor(max_retries=1, retry_delay=0.0)
    observed: list[AttemptState] = []

    async def attempt() -> object:
        observed.append(executor.state)
        if len(observed) == 1:
            raise network_error()
        return create_response()

    def on_retry(info: object) -> None:
        observed.append(executor.state)

    executor.callbacks.callbacks = CallbackConfig(on_retry=on_retry)
    await executor.execute(attempt, url=TEST_URL, method="GET")

    assert observed == [AttemptState.ATTEMPTING, AttemptState.RETRYING, AttemptState.ATTEMPTING]
    assert executor.state is AttemptState.SUCCEEDED
