r"""Parameter validation utilities for the client configuration.

This module provides validation functions for the retry, timeout and
logging parameters to ensure they meet the required constraints before
being used to build a client.
"""

from __future__ import annotations

__all__ = ["LOG_LEVELS", "validate_log_level", "validate_retry_params", "validate_timeout"]

# Log levels accepted by ``ClientConfig.log_level``
LOG_LEVELS = ("debug", "info", "error")


def validate_timeout(name: str, timeout: float) -> None:
    """Validate a timeout parameter.

    Args:
        name: The parameter name, used in the error message.
        timeout: Maximum seconds to wait. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from supercast.core.validation import validate_timeout
        >>> validate_timeout("read_timeout", 80.0)
        >>> validate_timeout("read_timeout", 0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: read_timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_network_retries: int,
    initial_network_retry_delay: float,
    max_network_retry_delay: float,
) -> None:
    """Validate retry parameters.

    Args:
        max_network_retries: Maximum number of retries of a request that
            failed at the network level. Must be >= 0. A value of 0 means
            no retries (only the initial attempt).
        initial_network_retry_delay: Minimum delay in seconds before a
            retry. Must be > 0.
        max_network_retry_delay: Maximum delay in seconds before a retry.
            Must be >= initial_network_retry_delay.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from supercast.core.validation import validate_retry_params
        >>> validate_retry_params(2, 0.5, 2.0)
        >>> validate_retry_params(-1, 0.5, 2.0)  # doctest: +SKIP

        ```
    """
    if max_network_retries < 0:
        msg = f"max_network_retries must be >= 0, got {max_network_retries}"
        raise ValueError(msg)
    if initial_network_retry_delay <= 0:
        msg = f"initial_network_retry_delay must be > 0, got {initial_network_retry_delay}"
        raise ValueError(msg)
    if max_network_retry_delay < initial_network_retry_delay:
        msg = (
            f"max_network_retry_delay must be >= initial_network_retry_delay "
            f"({initial_network_retry_delay}), got {max_network_retry_delay}"
        )
        raise ValueError(msg)


def validate_log_level(log_level: str | None) -> None:
    """Validate the log level.

    Args:
        log_level: ``None`` to leave logging untouched, or one of
            ``"debug"``, ``"info"`` and ``"error"``.

    Raises:
        ValueError: If the log level is not supported.
    """
    if log_level is not None and log_level not in LOG_LEVELS:
        msg = f"log_level must be one of {LOG_LEVELS}, got {log_level!r}"
        raise ValueError(msg)
