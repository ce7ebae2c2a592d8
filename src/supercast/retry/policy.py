r"""Retry policy for requests that failed at the network level.

Only failures that never produced a response are retried: timeouts and
refused or reset connections. A completed response, whatever its status
code, is never retried by this policy.
"""

from __future__ import annotations

__all__ = ["RETRYABLE_FAILURES", "RetryPolicy"]

import logging
from typing import TYPE_CHECKING

from supercast.backoff import ExponentialBackoff
from supercast.transport import FailureKind, TransportError

if TYPE_CHECKING:
    from supercast.backoff import BaseBackoffStrategy
    from supercast.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)

RETRYABLE_FAILURES = frozenset({FailureKind.TIMEOUT, FailureKind.CONNECTION_FAILED})


class RetryPolicy:
    """Decide whether a failed request is retried, and when.

    Args:
        max_retries: Maximum number of retries of one logical call.
        backoff_strategy: The strategy computing the delay before a retry.

    Example:
        ```pycon
        >>> from supercast.retry import RetryPolicy
        >>> from supercast.transport import FailureKind, TransportError
        >>> policy = RetryPolicy(max_retries=1)
        >>> policy.should_retry(TransportError(FailureKind.TIMEOUT, "timed out"), 0)
        True
        >>> policy.should_retry(TransportError(FailureKind.TIMEOUT, "timed out"), 1)
        False

        ```
    """

    def __init__(
        self,
        max_retries: int,
        backoff_strategy: BaseBackoffStrategy | None = None,
    ) -> None:
        if max_retries < 0:
            msg = f"max_retries must be >= 0, got {max_retries}"
            raise ValueError(msg)
        self.max_retries = max_retries
        self.backoff_strategy: BaseBackoffStrategy = backoff_strategy or ExponentialBackoff()

    @classmethod
    def from_config(cls, config: ClientConfig) -> RetryPolicy:
        r"""Create the policy described by a client configuration."""
        return cls(
            max_retries=config.max_network_retries,
            backoff_strategy=ExponentialBackoff(
                initial_delay=config.initial_network_retry_delay,
                max_delay=config.max_network_retry_delay,
            ),
        )

    def should_retry(self, error: Exception, num_retries: int) -> bool:
        """Determine whether a failed request should be retried.

        Args:
            error: The failure.
            num_retries: The number of retries already made.

        Returns:
            ``True`` if the failure is a timeout or a connection failure
            and retries remain.
        """
        if num_retries >= self.max_retries:
            return False
        return isinstance(error, TransportError) and error.kind in RETRYABLE_FAILURES

    def sleep_time(self, num_retries: int) -> float:
        """Compute the delay before a retry.

        Args:
            num_retries: The number of the retry about to be made
                (1-indexed).

        Returns:
            The delay in seconds.
        """
        sleep_seconds = self.backoff_strategy.calculate(num_retries)
        logger.debug(f"Waiting {sleep_seconds:.2f}s before retry {num_retries}/{self.max_retries}")
        return sleep_seconds
