from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from supercast.core.config import ClientConfig, reset_config
from tests.helpers import StubTransport

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_config() -> Generator[None, None, None]:
    """Restore the default process-wide configuration after each test."""
    yield
    reset_config()


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def config() -> ClientConfig:
    """Create a configuration with an API key and two network retries."""
    return ClientConfig(api_key="sk_test_123", max_network_retries=2)


@pytest.fixture
def transport() -> StubTransport:
    """Create a transport answering 200 with an episode."""
    return StubTransport()
