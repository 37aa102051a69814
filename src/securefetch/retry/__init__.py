r"""Retry package.

Public API:
    - AsyncRetryExecutor: Bounded, fixed-delay retry loop
    - AttemptState: States of the retry loop
    - RetryDecider: Logic for deciding whether to retry
    - CallbackConfig: Configuration for callbacks
    - CallbackManager: Manager for callback invocations
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "AttemptState",
    "CallbackConfig",
    "CallbackManager",
    "RetryDecider",
]

from securefetch.retry.decider import RetryDecider
from securefetch.retry.executor_async import AsyncRetryExecutor, AttemptState
from securefetch.retry.manager import CallbackConfig, CallbackManager
