r"""Utility functions for building requests and handling their failures.

This package provides the parameter encoding helpers, the classification
of failed requests into typed errors, the structured logging helpers and
the user agent information sent with every request.
"""

from __future__ import annotations

__all__ = [
    "SystemProfiler",
    "check_api_key",
    "encode_parameters",
    "flatten_params",
    "general_api_error",
    "handle_error_response",
    "log_debug",
    "log_error",
    "log_info",
    "merge_path_query",
    "network_error",
    "normalize_headers",
    "objects_to_ids",
    "specific_api_error",
]

from supercast.utils.exceptions import (
    check_api_key,
    general_api_error,
    handle_error_response,
    network_error,
    specific_api_error,
)
from supercast.utils.params import (
    encode_parameters,
    flatten_params,
    merge_path_query,
    normalize_headers,
    objects_to_ids,
)
from supercast.utils.structured_logging import log_debug, log_error, log_info
from supercast.utils.user_agent import SystemProfiler
