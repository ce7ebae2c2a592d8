r"""Request context used to log a request and its retries."""

from __future__ import annotations

__all__ = ["RequestContext"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

# Response headers that are more authoritative than the local values
_HEADER_FIELDS = {
    "account": "Supercast-Account",
    "api_version": "Supercast-Version",
    "idempotency_key": "Idempotency-Key",
}


@dataclass(frozen=True)
class RequestContext:
    """Information about a request, kept for logging.

    A context is never mutated: :meth:`dup_from_response` derives a new
    one, so the values logged for a retry are never altered by a response
    to a previous attempt.

    Attributes:
        method: The HTTP method.
        path: The request path, without query string.
        account: The account the request is made on behalf of, if any.
        api_key: The API key used. Never logged.
        api_version: The API version.
        body: The encoded body, if any.
        query_params: The encoded query string, if any.
        idempotency_key: The idempotency key, if any.
    """

    method: str
    path: str
    account: str | None = None
    api_key: str | None = None
    api_version: str | None = None
    body: str | None = None
    query_params: str | None = None
    idempotency_key: str | None = None

    def dup_from_response(self, headers: Mapping[str, str] | None) -> RequestContext:
        """Return a copy updated from the headers of a response.

        The server echoes the account, version and idempotency key it
        actually used, so these values replace the local ones. Headers
        missing from the response leave the local values untouched.

        Args:
            headers: The response headers, or ``None`` if no response
                was received.

        Returns:
            The updated context, or ``self`` if there are no headers.

        Example:
            ```pycon
            >>> from supercast.context import RequestContext
            >>> context = RequestContext(method="get", path="/episodes", api_version="v1")
            >>> context.dup_from_response({"Supercast-Version": "v2"}).api_version
            'v2'
            >>> context.api_version
            'v1'

            ```
        """
        if headers is None:
            return self
        changes = {
            name: headers[header] for name, header in _HEADER_FIELDS.items() if header in headers
        }
        return replace(self, **changes)
