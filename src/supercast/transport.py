r"""Transport layer used by the client to send HTTP requests.

A transport turns an already encoded request into a
:class:`TransportResponse`, the one canonical ``{status, headers, body}``
shape the rest of the library works with. Failures that never produced a
response are raised as :class:`TransportError`, tagged with a
:class:`FailureKind` so that the retry policy and the error classifier
never have to inspect transport-specific exception types.

:class:`HttpxTransport` is the default implementation. It keeps a
long-lived ``httpx.Client`` so that connections are reused across
requests.
"""

from __future__ import annotations

__all__ = [
    "FailureKind",
    "HttpxTransport",
    "Transport",
    "TransportError",
    "TransportResponse",
    "build_http_client",
]

import enum
import logging
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from supercast.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)

# Substrings identifying a TLS failure in a connection error message
_TLS_MARKERS = ("ssl", "tls", "certificate")

_verify_ssl_warned = False


class FailureKind(enum.Enum):
    """Kind of failure raised by a transport or detected on a response."""

    TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection_failed"
    TLS_FAILURE = "tls_failure"
    HTTP_ERROR = "http_error"
    DECODE_FAILURE = "decode_failure"
    OTHER = "other"


@dataclass(frozen=True)
class TransportResponse:
    """A completed HTTP response.

    Attributes:
        status: The HTTP status code.
        headers: The response headers. Lookups are case-insensitive.
        body: The raw response body.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", httpx.Headers(self.headers))

    @property
    def is_error(self) -> bool:
        r"""Whether the status is a client or server error (4xx or 5xx)."""
        return self.status >= 400


class TransportError(Exception):
    """Raised when a request failed.

    Args:
        kind: The kind of failure.
        message: Description of the underlying failure.
        response: The response, for failures detected on a completed
            response (``HTTP_ERROR``) or on an undecodable body
            (``DECODE_FAILURE``).
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        response: TransportResponse | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.response = response

    @classmethod
    def from_response(cls, response: TransportResponse) -> TransportError:
        r"""Create an ``HTTP_ERROR`` failure for a 4xx or 5xx response."""
        return cls(
            FailureKind.HTTP_ERROR,
            f"the server responded with status {response.status}",
            response=response,
        )


class Transport(ABC):
    """Abstract base class for transports.

    A transport is used by one thread at a time. It may be reused for many
    sequential requests.
    """

    @abstractmethod
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
        """Send a request.

        The URL already contains the encoded query string, and ``content``
        is an already encoded body. ``data`` and ``files`` are only used
        for multipart bodies.

        Args:
            method: The HTTP method.
            url: The absolute URL, including the query string.
            headers: The request headers.
            content: The encoded request body.
            data: The form fields of a multipart body.
            files: The files of a multipart body.

        Returns:
            The response, whatever its status code.

        Raises:
            TransportError: If no response was received.
        """

    def close(self) -> None:
        r"""Release the resources held by the transport."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def build_http_client(config: ClientConfig) -> httpx.Client:
    r"""Create an ``httpx.Client`` configured for the Supercast API.

    Args:
        config: The configuration providing the proxy, TLS and timeout
            settings.

    Returns:
        A new ``httpx.Client``.
    """
    global _verify_ssl_warned  # noqa: PLW0603
    verify: bool | ssl.SSLContext
    if config.verify_ssl_certs:
        verify = (
            ssl.create_default_context(cafile=config.ca_bundle_path)
            if config.ca_bundle_path
            else True
        )
    else:
        verify = False
        if not _verify_ssl_warned:
            _verify_ssl_warned = True
            logger.warning(
                "Running without SSL cert verification. You should never do this in "
                "production. Use `supercast.configure(verify_ssl_certs=True)` to enable "
                "verification."
            )
    return httpx.Client(
        proxy=config.proxy,
        verify=verify,
        timeout=httpx.Timeout(config.read_timeout, connect=config.open_timeout),
    )


def _is_tls_failure(exc: Exception) -> bool:
    cause = exc.__cause__ or exc.__context__
    if isinstance(cause, ssl.SSLError):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _TLS_MARKERS)


class HttpxTransport(Transport):
    """Transport sending requests through an ``httpx.Client``.

    Args:
        client: Optional ``httpx.Client``. If ``None``, a client is built
            from ``config``. A client passed in is not closed by
            :meth:`close`.
        config: Configuration used to build the client when none is given.

    Example:
        ```pycon
        >>> from supercast.core.config import ClientConfig
        >>> from supercast.transport import HttpxTransport
        >>> with HttpxTransport(config=ClientConfig()) as transport:  # doctest: +SKIP
        ...     response = transport.request("GET", "https://api.supercast.com/v1/episodes")
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        config: ClientConfig | None = None,
    ) -> None:
        if client is None:
            if config is None:
                from supercast.core.config import get_config

                config = get_config()
            client = build_http_client(config)
            self._close_client = True
        else:
            self._close_client = False
        self._client = client

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
        try:
            response = self._client.request(
                method.upper(),
                url,
                headers=headers,
                content=content,
                data=data,
                files=files,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(FailureKind.TIMEOUT, str(exc) or type(exc).__name__) from exc
        except (httpx.NetworkError, httpx.ProtocolError, httpx.ProxyError) as exc:
            kind = FailureKind.TLS_FAILURE if _is_tls_failure(exc) else FailureKind.CONNECTION_FAILED
            raise TransportError(kind, str(exc) or type(exc).__name__) from exc
        except httpx.HTTPError as exc:
            raise TransportError(FailureKind.OTHER, str(exc) or type(exc).__name__) from exc

        return TransportResponse(
            status=response.status_code,
            headers=response.headers,
            body=response.text,
        )

    def close(self) -> None:
        if self._close_client:
            self._client.close()
            self._close_client = False
