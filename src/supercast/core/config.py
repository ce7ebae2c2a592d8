r"""Configuration dataclass and defaults for the Supercast client.

This module provides the configuration constants, a dataclass-based
configuration object, and the process-wide configuration snapshot read
by every client that is not given an explicit configuration.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_API_BASE",
    "DEFAULT_API_VERSION",
    "DEFAULT_INITIAL_NETWORK_RETRY_DELAY",
    "DEFAULT_MAX_NETWORK_RETRIES",
    "DEFAULT_MAX_NETWORK_RETRY_DELAY",
    "DEFAULT_OPEN_TIMEOUT",
    "DEFAULT_READ_TIMEOUT",
    "ClientConfig",
    "configure",
    "get_config",
    "reset_config",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from supercast.core.validation import (
    validate_log_level,
    validate_retry_params,
    validate_timeout,
)

if TYPE_CHECKING:
    import logging

DEFAULT_API_BASE = "https://api.supercast.com"
DEFAULT_API_VERSION = "v1"

# Seconds to wait for the TCP/TLS handshake and for the response
DEFAULT_OPEN_TIMEOUT = 30.0
DEFAULT_READ_TIMEOUT = 80.0

# Network failures are not retried unless asked for
DEFAULT_MAX_NETWORK_RETRIES = 0

# Backoff bounds in seconds
DEFAULT_INITIAL_NETWORK_RETRY_DELAY = 0.5
DEFAULT_MAX_NETWORK_RETRY_DELAY = 2.0


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for a Supercast client.

    Instances are immutable: use :meth:`merge` to derive a copy with some
    values overridden.

    Args:
        api_base: Base URL of the API.
        api_version: API version, sent as the ``Supercast-Version`` header
            and used as the first path segment.
        api_key: Secret API key sent as a bearer token.
        proxy: Optional proxy URL.
        verify_ssl_certs: Whether TLS certificates are verified.
        ca_bundle_path: Optional path to a custom CA bundle used when
            verifying certificates.
        open_timeout: Seconds to wait for a connection to open.
        read_timeout: Seconds to wait for the response.
        max_network_retries: Maximum number of retries of a request that
            failed at the network level.
        initial_network_retry_delay: Minimum delay in seconds before a retry.
        max_network_retry_delay: Maximum delay in seconds before a retry.
        log_level: Optional log level (``"debug"``, ``"info"`` or
            ``"error"``). When set, request logs are written to stderr.
        logger: Optional logger receiving the request logs instead of
            the ``supercast`` logger.

    Example:
        ```pycon
        >>> from supercast.core.config import ClientConfig
        >>> config = ClientConfig(api_key="sk_test")
        >>> config.max_network_retries
        0
        >>> config.merge(max_network_retries=2).max_network_retries
        2

        ```
    """

    api_base: str = DEFAULT_API_BASE
    api_version: str | None = DEFAULT_API_VERSION
    api_key: str | None = None
    proxy: str | None = None
    verify_ssl_certs: bool = True
    ca_bundle_path: str | None = None
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_network_retries: int = DEFAULT_MAX_NETWORK_RETRIES
    initial_network_retry_delay: float = DEFAULT_INITIAL_NETWORK_RETRY_DELAY
    max_network_retry_delay: float = DEFAULT_MAX_NETWORK_RETRY_DELAY
    log_level: str | None = None
    logger: logging.Logger | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_timeout("open_timeout", self.open_timeout)
        validate_timeout("read_timeout", self.read_timeout)
        validate_retry_params(
            max_network_retries=self.max_network_retries,
            initial_network_retry_delay=self.initial_network_retry_delay,
            max_network_retry_delay=self.max_network_retry_delay,
        )
        validate_log_level(self.log_level)

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from supercast.core.config import ClientConfig
            >>> config = ClientConfig(api_key="sk_test")
            >>> config.merge(api_key=None, api_version="v2").api_key
            'sk_test'

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


_config = ClientConfig()


def get_config() -> ClientConfig:
    r"""Return the process-wide configuration snapshot."""
    return _config


def configure(**overrides: Any) -> ClientConfig:
    r"""Replace the process-wide configuration with an updated copy.

    The configuration is meant to be set once at startup. Changing it while
    requests are in flight is not supported.

    Args:
        **overrides: Keyword arguments forwarded to :meth:`ClientConfig.merge`.

    Returns:
        The new process-wide configuration.

    Example:
        ```pycon
        >>> from supercast.core.config import configure, get_config, reset_config
        >>> _ = configure(api_key="sk_test", max_network_retries=2)
        >>> get_config().max_network_retries
        2
        >>> _ = reset_config()

        ```
    """
    global _config  # noqa: PLW0603
    _config = _config.merge(**overrides)
    return _config


def reset_config() -> ClientConfig:
    r"""Restore the default process-wide configuration."""
    global _config  # noqa: PLW0603
    _config = ClientConfig()
    return _config
