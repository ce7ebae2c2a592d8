r"""Classification of failed requests into typed errors.

This module maps completed error responses onto the :class:`APIError`
family according to their status code, and failures that never produced
a response onto :class:`APIConnectionError`. Every error is logged before
it is handed back to the caller.
"""

from __future__ import annotations

__all__ = [
    "STATUS_ERRORS",
    "check_api_key",
    "general_api_error",
    "handle_error_response",
    "network_error",
    "specific_api_error",
]

from typing import TYPE_CHECKING, NoReturn

from supercast.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    InvalidRequestError,
    PermissionDeniedError,
    RateLimitError,
)
from supercast.response import SupercastResponse
from supercast.transport import FailureKind, TransportError
from supercast.utils.structured_logging import log_error

if TYPE_CHECKING:
    from supercast.context import RequestContext
    from supercast.core.config import ClientConfig
    from supercast.transport import TransportResponse

# Error raised for each status code. Any other status raises APIError.
STATUS_ERRORS: dict[int, type[APIError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: InvalidRequestError,
    422: InvalidRequestError,
    429: RateLimitError,
}

_CONNECTION_FAILED_MESSAGE = (
    "Unexpected error communicating when trying to connect to Supercast. "
    "You may be seeing this message because your DNS is not working. "
    "To check, try running `host supercast.com` from the command line."
)
_TLS_FAILURE_MESSAGE = (
    "Could not establish a secure connection to Supercast, you may need to "
    "upgrade your OpenSSL version. To check, try running "
    "`openssl s_client -connect api.supercast.com:443` from the command line."
)
_TIMEOUT_MESSAGE = (
    "Could not connect to Supercast ({api_base}). Please check your internet "
    "connection and try again. If this problem persists, you should check "
    "Supercast's service status at https://status.supercast.com, or let us "
    "know at support@supercast.com."
)
_GENERIC_NETWORK_MESSAGE = (
    "Unexpected error communicating with Supercast. If this problem persists, "
    "let us know at support@supercast.com."
)


def check_api_key(api_key: str | None, config: ClientConfig | None = None) -> None:
    """Validate an API key before any request is sent.

    Args:
        api_key: The API key.
        config: The configuration providing the logger.

    Raises:
        AuthenticationError: If the API key is missing or contains
            whitespace.
    """
    if not api_key:
        message = (
            "No API key provided. Set your API key using "
            '"supercast.configure(api_key=<API-KEY>)". You can generate API keys '
            "from the Supercast web interface. See "
            "https://docs.supercast.tech/docs/access-tokens for details, or email "
            "support@supercast.com if you have any questions."
        )
    elif any(char.isspace() for char in api_key):
        message = (
            "Your API key is invalid, as it contains whitespace. (HINT: You can "
            "double-check your API key from the Supercast web interface. See "
            "https://docs.supercast.tech/docs/access-tokens for details, or email "
            "support@supercast.com if you have any questions.)"
        )
    else:
        return
    log_error("Supercast API key error", config=config, error_message=message)
    raise AuthenticationError(message)


def general_api_error(
    response: TransportResponse,
    context: RequestContext,
    config: ClientConfig | None = None,
) -> APIError:
    """Create the error raised for a response that could not be decoded.

    Args:
        response: The undecodable response.
        context: The context of the request.
        config: The configuration providing the logger.

    Returns:
        An :class:`APIError` reporting the status code, the headers and
        the raw body.
    """
    message = (
        f"Invalid response object from API: {response.body!r} "
        f"(HTTP response code was {response.status})"
    )
    log_error(
        "Supercast API error",
        config=config,
        status=response.status,
        error_message=message,
        idempotency_key=context.idempotency_key,
    )
    return APIError(
        message,
        http_status=response.status,
        http_body=response.body,
        http_headers=response.headers,
    )


def specific_api_error(
    response: SupercastResponse,
    context: RequestContext,
    config: ClientConfig | None = None,
) -> APIError:
    """Create the error matching the status code of a decoded response.

    Args:
        response: The decoded error response.
        context: The context of the request.
        config: The configuration providing the logger.

    Returns:
        The typed error. Its ``response`` attribute is set.

    Example:
        ```pycon
        >>> from supercast.context import RequestContext
        >>> from supercast.response import SupercastResponse
        >>> from supercast.utils.exceptions import specific_api_error
        >>> error = specific_api_error(
        ...     SupercastResponse(http_status=422, data={"message": "bad"}),
        ...     RequestContext(method="post", path="/episodes"),
        ... )
        >>> type(error).__name__, error.message
        ('InvalidRequestError', 'bad')

        ```
    """
    data = response.data
    message = data.get("message") if isinstance(data, dict) else None
    log_error(
        "Supercast API error",
        config=config,
        status=response.http_status,
        error_code=response.http_status,
        error_message=message,
        idempotency_key=context.idempotency_key,
    )
    error_class = STATUS_ERRORS.get(response.http_status, APIError)
    error = error_class(
        message,
        http_body=response.http_body,
        http_headers=response.http_headers,
        http_status=response.http_status,
        json_body=data,
        code=response.http_status,
    )
    error.response = response
    return error


def handle_error_response(
    response: TransportResponse,
    context: RequestContext,
    config: ClientConfig | None = None,
) -> NoReturn:
    """Raise the typed error for a completed non-2xx response.

    The body is decoded first. A body that is not valid JSON raises a
    generic :class:`APIError` with the raw status and body instead.

    Args:
        response: The error response.
        context: The context of the request.
        config: The configuration providing the logger.

    Raises:
        APIError: Always, or one of its subclasses.
    """
    try:
        decoded = SupercastResponse.from_transport(response)
    except TransportError as exc:
        raise general_api_error(response, context, config) from exc
    raise specific_api_error(decoded, context, config)


def network_error(
    error: TransportError,
    context: RequestContext,
    num_retries: int,
    api_base: str,
    config: ClientConfig | None = None,
) -> APIConnectionError:
    """Create the error raised for a request that received no response.

    Args:
        error: The transport failure.
        context: The context of the request.
        num_retries: The number of retries already made.
        api_base: The base URL the request was sent to.
        config: The configuration providing the logger.

    Returns:
        An :class:`APIConnectionError` with a remediation hint matching
        the failure, the number of retries and the original message.

    Example:
        ```pycon
        >>> from supercast.context import RequestContext
        >>> from supercast.transport import FailureKind, TransportError
        >>> from supercast.utils.exceptions import network_error
        >>> error = network_error(
        ...     TransportError(FailureKind.TIMEOUT, "read timed out"),
        ...     RequestContext(method="get", path="/episodes"),
        ...     num_retries=2,
        ...     api_base="https://api.supercast.com",
        ... )
        >>> "Request was retried 2 times." in error.message
        True

        ```
    """
    log_error(
        "Supercast network error",
        config=config,
        error_message=error.message,
        idempotency_key=context.idempotency_key,
    )
    if error.kind is FailureKind.CONNECTION_FAILED:
        message = _CONNECTION_FAILED_MESSAGE
    elif error.kind is FailureKind.TLS_FAILURE:
        message = _TLS_FAILURE_MESSAGE
    elif error.kind is FailureKind.TIMEOUT:
        message = _TIMEOUT_MESSAGE.format(api_base=api_base)
    else:
        message = _GENERIC_NETWORK_MESSAGE

    if num_retries > 0:
        message += f" Request was retried {num_retries} times."
    return APIConnectionError(f"{message}\n\n(Network error: {error.message})")
