r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before retrying a
    request that failed at the network level.
    """

    @abstractmethod
    def calculate(self, num_retries: int) -> float:
        """Calculate the backoff delay before a retry.

        Args:
            num_retries: The number of the retry about to be made
            (1-indexed). For example, num_retries=1 is the first retry.

        Returns:
            The delay in seconds before the retry.
        """
