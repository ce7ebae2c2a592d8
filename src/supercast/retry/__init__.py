r"""Retry policy for network failures."""

from __future__ import annotations

__all__ = ["RETRYABLE_FAILURES", "RetryPolicy"]

from supercast.retry.policy import RETRYABLE_FAILURES, RetryPolicy
