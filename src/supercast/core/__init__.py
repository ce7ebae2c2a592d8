r"""Configuration and validation shared by every client."""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "configure",
    "get_config",
    "reset_config",
    "validate_log_level",
    "validate_retry_params",
    "validate_timeout",
]

from supercast.core.config import ClientConfig, configure, get_config, reset_config
from supercast.core.validation import (
    validate_log_level,
    validate_retry_params,
    validate_timeout,
)
