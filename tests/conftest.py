from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from securefetch.core.config import CsrfConfig, FetchConfig, RetryConfig

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make retry tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def retry_config() -> FetchConfig:
    """Configuration retrying up to 3 times with a 1s delay."""
    return FetchConfig(retry=RetryConfig(enabled=True, max_retries=3, retry_delay=1.0))


@pytest.fixture
def csrf_config() -> FetchConfig:
    """Configuration with CSRF enabled and a base URL."""
    return FetchConfig(base_url="https://api.example.com", csrf=CsrfConfig(enabled=True))


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()
