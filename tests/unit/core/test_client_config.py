r"""Unit tests for ClientConfig and the process-wide configuration."""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError

import pytest

from supercast.core.config import (
    DEFAULT_API_BASE,
    ClientConfig,
    configure,
    get_config,
    reset_config,
)


def test_client_config_defaults() -> None:
    config = ClientConfig()
    assert config.api_base == DEFAULT_API_BASE
    assert config.api_version == "v1"
    assert config.api_key is None
    assert config.verify_ssl_certs
    assert config.max_network_retries == 0
    assert config.initial_network_retry_delay == 0.5
    assert config.max_network_retry_delay == 2.0
    assert config.open_timeout == 30.0
    assert config.read_timeout == 80.0
    assert config.log_level is None


def test_client_config_is_immutable() -> None:
    config = ClientConfig()
    with pytest.raises(FrozenInstanceError):
        config.api_key = "sk_test"  # type: ignore[misc]


def test_client_config_merge() -> None:
    config = ClientConfig(api_key="sk_test", max_network_retries=1)
    merged = config.merge(max_network_retries=3, api_key=None)
    assert merged.max_network_retries == 3
    assert merged.api_key == "sk_test"
    assert config.max_network_retries == 1


def test_client_config_accepts_logger() -> None:
    logger = logging.getLogger("custom")
    assert ClientConfig(logger=logger).logger is logger


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"max_network_retries": -1}, r"max_network_retries must be >= 0"),
        ({"initial_network_retry_delay": 0}, r"initial_network_retry_delay must be > 0"),
        (
            {"initial_network_retry_delay": 1.0, "max_network_retry_delay": 0.5},
            r"max_network_retry_delay must be >= initial_network_retry_delay",
        ),
        ({"open_timeout": 0}, r"open_timeout must be > 0"),
        ({"read_timeout": -1.0}, r"read_timeout must be > 0"),
        ({"log_level": "verbose"}, r"log_level must be one of"),
    ],
)
def test_client_config_validation(kwargs: dict, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        ClientConfig(**kwargs)


def test_configure_replaces_process_config() -> None:
    original = get_config()
    updated = configure(api_key="sk_test", max_network_retries=2)
    assert get_config() is updated
    assert updated.api_key == "sk_test"
    assert updated.max_network_retries == 2
    assert original.api_key is None


def test_configure_keeps_previous_values() -> None:
    configure(api_key="sk_test")
    configure(max_network_retries=1)
    assert get_config().api_key == "sk_test"


def test_configure_invalid_value_keeps_config() -> None:
    configure(api_key="sk_test")
    with pytest.raises(ValueError, match=r"max_network_retries"):
        configure(max_network_retries=-2)
    assert get_config().max_network_retries == 0


def test_reset_config() -> None:
    configure(api_key="sk_test")
    assert reset_config() == ClientConfig()
    assert get_config().api_key is None
