r"""Shared test helpers for the client tests.

This module contains a scripted transport that records the requests it
receives, and helpers to create transport responses.
"""

from __future__ import annotations

__all__ = ["Episode", "RecordedRequest", "StubTransport", "create_transport_response", "timeout_error"]

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from supercast.resource import APIResource
from supercast.transport import FailureKind, Transport, TransportError, TransportResponse

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Episode(APIResource):
    OBJECT_NAME = "episode"


@dataclass
class RecordedRequest:
    """A request received by :class:`StubTransport`."""

    method: str
    url: str
    headers: dict[str, Any]
    content: str | None = None
    data: Mapping[str, Any] | None = None
    files: Mapping[str, Any] | None = None


def create_transport_response(
    status: int = 200,
    data: Any = None,
    *,
    body: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> TransportResponse:
    """Create a transport response with a JSON body.

    Args:
        status: The HTTP status code.
        data: The data encoded as JSON body. Defaults to ``{"id": 1}``.
        body: A raw body, used instead of ``data``.
        headers: The response headers.
    """
    if body is None:
        body = json.dumps({"id": 1} if data is None else data)
    return TransportResponse(status=status, headers=headers or {}, body=body)


def timeout_error() -> TransportError:
    return TransportError(FailureKind.TIMEOUT, "read timed out")


class StubTransport(Transport):
    """Transport returning or raising scripted outcomes in order.

    Args:
        outcomes: Responses to return or exceptions to raise. When the
            outcomes are exhausted, a 200 response with ``{"id": 1}`` is
            returned.
    """

    def __init__(self, outcomes: Iterable[TransportResponse | Exception] = ()) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[RecordedRequest] = []
        self.closed = False

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: str | None = None,
        data: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> TransportResponse:
        self.calls.append(
            RecordedRequest(
                method=method,
                url=url,
                headers=dict(headers or {}),
                content=content,
                data=data,
                files=files,
            )
        )
        outcome = self.outcomes.pop(0) if self.outcomes else create_transport_response()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True
