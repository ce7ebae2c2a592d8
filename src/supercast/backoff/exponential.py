r"""Exponential backoff strategy with jitter."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import random

from supercast.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with jitter.

    The delay before retry ``n`` is computed as follows:

    1. ``delay = min(initial_delay * 2 ** (n - 1), max_delay)``
    2. ``delay *= uniform(0.5, 1.0)`` to spread out retries
    3. ``delay = max(delay, initial_delay)`` so the delay never drops below
       the configured minimum

    The delay always falls within ``[initial_delay, max_delay]``.

    Args:
        initial_delay: The delay before the first retry, and the minimum
            delay.
        max_delay: The maximum delay.
        rng: Optional random number generator, mainly for tests.

    Example:
        ```pycon
        >>> from supercast.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(initial_delay=0.5, max_delay=2.0)
        >>> 0.5 <= backoff.calculate(3) <= 2.0
        True
        >>> backoff.calculate(1)
        0.5

        ```
    """

    def __init__(
        self,
        initial_delay: float = 0.5,
        max_delay: float = 2.0,
        rng: random.Random | None = None,
    ) -> None:
        if initial_delay <= 0:
            msg = f"initial_delay must be positive, got {initial_delay}"
            raise ValueError(msg)
        if max_delay < initial_delay:
            msg = f"max_delay must be >= initial_delay ({initial_delay}), got {max_delay}"
            raise ValueError(msg)

        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self._rng = rng or random.Random()  # noqa: S311

    def calculate(self, num_retries: int) -> float:
        """Calculate the jittered exponential backoff delay.

        Args:
            num_retries: The number of the retry about to be made
                (1-indexed).

        Returns:
            The delay in seconds, within ``[initial_delay, max_delay]``.
        """
        delay = min(self.initial_delay * (2 ** (num_retries - 1)), self.max_delay)
        delay *= 0.5 * (1 + self._rng.random())
        return max(self.initial_delay, delay)
