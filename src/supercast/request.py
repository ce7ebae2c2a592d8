r"""Execution of a request with retries of network failures.

This module contains the loop that sends a request, logs every attempt,
retries timeouts and connection failures with backoff, and turns any
other failure into a typed error.
"""

from __future__ import annotations

__all__ = [
    "execute_request_with_rescues",
    "log_request",
    "log_response",
    "log_response_error",
]

import time
from typing import TYPE_CHECKING

from supercast.transport import TransportError
from supercast.utils.exceptions import handle_error_response, network_error
from supercast.utils.structured_logging import log_debug, log_error, log_info

if TYPE_CHECKING:
    from collections.abc import Callable

    from supercast.context import RequestContext
    from supercast.core.config import ClientConfig
    from supercast.retry import RetryPolicy
    from supercast.transport import TransportResponse


def execute_request_with_rescues(
    send: Callable[[], TransportResponse],
    context: RequestContext,
    *,
    policy: RetryPolicy,
    api_base: str,
    config: ClientConfig | None = None,
) -> TransportResponse:
    """Send a request, retrying network failures.

    The request is sent through ``send``. A response with a status below
    400 is returned. A 4xx or 5xx response is never retried: it is
    classified and raised as an :class:`~supercast.exceptions.APIError`.
    A failure without response is retried while ``policy`` allows it,
    sleeping between attempts, and is then raised as an
    :class:`~supercast.exceptions.APIConnectionError`. Retries are strictly
    sequential.

    Args:
        send: The function sending one attempt of the request.
        context: The context of the request, used for logging.
        policy: The retry policy.
        api_base: The base URL, reported in timeout errors.
        config: The configuration providing the logger.

    Returns:
        The successful response.

    Raises:
        APIError: If the server responded with a 4xx or 5xx status.
        APIConnectionError: If no response was received.
    """
    num_retries = 0
    while True:
        request_start = time.time()
        log_request(context, num_retries, config)
        try:
            response = send()
            if response.is_error:
                raise TransportError.from_response(response)
        except TransportError as exc:
            # A copy keeps the context of the next attempt untouched
            if exc.response is not None:
                error_context = context.dup_from_response(exc.response.headers)
                log_response(
                    error_context, request_start, exc.response.status, exc.response.body, config
                )
            else:
                error_context = context
                log_response_error(error_context, request_start, exc, config)

            if policy.should_retry(exc, num_retries):
                num_retries += 1
                time.sleep(policy.sleep_time(num_retries))
                continue

            if exc.response is not None:
                handle_error_response(exc.response, error_context, config)
            raise network_error(exc, error_context, num_retries, api_base, config) from exc

        context = context.dup_from_response(response.headers)
        log_response(context, request_start, response.status, response.body, config)
        return response


def log_request(
    context: RequestContext, num_retries: int, config: ClientConfig | None = None
) -> None:
    r"""Log an attempt of a request before it is sent."""
    log_info(
        "Request to Supercast API",
        config=config,
        account=context.account,
        api_version=context.api_version,
        idempotency_key=context.idempotency_key,
        method=context.method,
        num_retries=num_retries,
        path=context.path,
    )
    log_debug(
        "Request details",
        config=config,
        body=context.body,
        idempotency_key=context.idempotency_key,
        query_params=context.query_params,
    )


def log_response(
    context: RequestContext,
    request_start: float,
    status: int,
    body: str,
    config: ClientConfig | None = None,
) -> None:
    r"""Log a response received for an attempt of a request."""
    log_info(
        "Response from Supercast API",
        config=config,
        account=context.account,
        api_version=context.api_version,
        elapsed=time.time() - request_start,
        idempotency_key=context.idempotency_key,
        method=context.method,
        path=context.path,
        status=status,
    )
    log_debug(
        "Response details",
        config=config,
        body=body,
        idempotency_key=context.idempotency_key,
    )


def log_response_error(
    context: RequestContext,
    request_start: float,
    error: TransportError,
    config: ClientConfig | None = None,
) -> None:
    r"""Log an attempt of a request that received no response."""
    log_error(
        "Request error",
        config=config,
        elapsed=time.time() - request_start,
        error_message=error.message,
        idempotency_key=context.idempotency_key,
        method=context.method,
        path=context.path,
    )
