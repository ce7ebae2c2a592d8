r"""Backoff strategies for network retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from supercast.backoff.base import BaseBackoffStrategy
from supercast.backoff.exponential import ExponentialBackoff
