r"""Decoded response returned by the client."""

from __future__ import annotations

__all__ = ["SupercastResponse"]

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from supercast.transport import FailureKind, TransportError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from supercast.transport import TransportResponse


@dataclass(frozen=True)
class SupercastResponse:
    """A response from the Supercast API.

    Attributes:
        http_status: The HTTP status code.
        http_headers: The response headers.
        http_body: The raw response body.
        data: The decoded JSON body.
    """

    http_status: int
    http_headers: Mapping[str, str] = field(default_factory=dict)
    http_body: str = ""
    data: Any = None

    @property
    def request_id(self) -> str | None:
        r"""Return the request identifier assigned by the API, if any."""
        return self.http_headers.get("Request-Id")

    @classmethod
    def from_transport(cls, response: TransportResponse) -> SupercastResponse:
        """Build a response from a transport response.

        Args:
            response: The transport response.

        Returns:
            The decoded response.

        Raises:
            TransportError: A ``DECODE_FAILURE`` if the body is not valid
                JSON.

        Example:
            ```pycon
            >>> from supercast.response import SupercastResponse
            >>> from supercast.transport import TransportResponse
            >>> response = SupercastResponse.from_transport(
            ...     TransportResponse(status=200, body='{"id": 1}')
            ... )
            >>> response.data
            {'id': 1}

            ```
        """
        try:
            data = json.loads(response.body)
        except ValueError as exc:
            raise TransportError(
                FailureKind.DECODE_FAILURE,
                f"could not decode the response body: {exc}",
                response=response,
            ) from exc
        return cls(
            http_status=response.status,
            http_headers=response.headers,
            http_body=response.body,
            data=data,
        )
