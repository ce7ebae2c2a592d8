r"""supercast - Python bindings for the Supercast API.

This package executes requests against the Supercast API: it encodes
parameters, sends requests over reusable connections, retries network
failures with exponential backoff, and raises typed errors for failed
calls. Built on top of the httpx library.

Key Features:
    - Nested parameters encoded with bracket notation (``a[b]=1``, ``a[0]=x``)
    - Retries of timeouts and connection failures with jittered backoff
    - Idempotency keys on side-effecting requests when retries are enabled
    - Typed errors for every failure (authentication, permission, invalid
      request, rate limit, API and connection errors)
    - Per-thread clients and connections, and scoped active clients
    - Structured request logs

Example:
    ```pycon
    >>> import supercast
    >>> from supercast.resource import APIResource
    >>> class Episode(APIResource):
    ...     OBJECT_NAME = "episode"
    ...
    >>> _ = supercast.configure(api_key="sk_test", max_network_retries=2)
    >>> episode = Episode.retrieve(1)  # doctest: +SKIP
    >>> # Recover the raw response along with the resource
    >>> episode, response = supercast.SupercastClient().request(Episode.retrieve, 1)  # doctest: +SKIP
    >>> _ = supercast.reset_config()

    ```
"""

from __future__ import annotations

__all__ = [
    "APIConnectionError",
    "APIError",
    "APIResource",
    "AuthenticationError",
    "ClientConfig",
    "InvalidRequestError",
    "PermissionDeniedError",
    "RateLimitError",
    "SupercastClient",
    "SupercastError",
    "SupercastResponse",
    "__version__",
    "client_scope",
    "configure",
    "get_config",
    "reset_config",
    "run_scoped",
]

from supercast.client import SupercastClient
from supercast.core.config import ClientConfig, configure, get_config, reset_config
from supercast.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    InvalidRequestError,
    PermissionDeniedError,
    RateLimitError,
    SupercastError,
)
from supercast.resource import APIResource
from supercast.response import SupercastResponse
from supercast.scope import client_scope, run_scoped
from supercast.version import __version__
