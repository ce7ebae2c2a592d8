r"""Exception hierarchy raised by the Supercast client.

All exceptions inherit from :class:`SupercastError`. Errors raised for a
completed HTTP response derive from :class:`APIError`, while failures that
never produced a response are raised as :class:`APIConnectionError`::

    SupercastError
    +-- APIError                  (any other status, undecodable body)
    |   +-- AuthenticationError   (missing/invalid API key, 401)
    |   +-- PermissionDeniedError (403)
    |   +-- InvalidRequestError   (400, 404, 422)
    |   +-- RateLimitError        (429)
    +-- APIConnectionError        (timeout, refused/reset connection, TLS)
"""

from __future__ import annotations

__all__ = [
    "APIConnectionError",
    "APIError",
    "AuthenticationError",
    "InvalidRequestError",
    "PermissionDeniedError",
    "RateLimitError",
    "SupercastError",
]

from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

    from supercast.response import SupercastResponse


class SupercastError(Exception):
    """Base exception for all Supercast errors.

    Args:
        message: Human-readable error description.
        http_body: The raw body of the response, if any.
        http_status: The HTTP status code of the response, if any.
        json_body: The decoded error payload, if any.
        http_headers: The headers of the response, if any. Lookups are
            case-insensitive.
        code: A stable error code. The API reports errors by status, so
            this is the status code for errors built from a response.

    Example:
        ```pycon
        >>> from supercast.exceptions import InvalidRequestError
        >>> error = InvalidRequestError("bad", http_status=422)
        >>> str(error)
        '(Status 422) bad'
        >>> error.message
        'bad'

        ```
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        http_body: str | None = None,
        http_status: int | None = None,
        json_body: Any = None,
        http_headers: Mapping[str, str] | None = None,
        code: int | str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_body = http_body
        self.http_status = http_status
        self.json_body = json_body
        self.http_headers = httpx.Headers(http_headers or {})
        self.code = code
        self.response: SupercastResponse | None = None

    def __str__(self) -> str:
        message = self.message or "<empty message>"
        if self.http_status is None:
            return message
        return f"(Status {self.http_status}) {message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"http_status={self.http_status!r}, code={self.code!r})"
        )


class APIError(SupercastError):
    """Raised for an unexpected status code or an undecodable response."""


class AuthenticationError(APIError):
    """Raised when the API key is missing, malformed or rejected (401)."""


class PermissionDeniedError(APIError):
    """Raised when the API key lacks access to the resource (403)."""


class InvalidRequestError(APIError):
    """Raised for invalid parameters or unknown resources (400, 404, 422)."""


class RateLimitError(APIError):
    """Raised when too many requests hit the API too quickly (429)."""


class APIConnectionError(SupercastError):
    """Raised when the request failed before a response was received.

    The message carries a remediation hint specific to the failure and
    the number of retries already attempted.
    """
