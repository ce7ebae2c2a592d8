r"""Client executing requests against the Supercast API.

:class:`SupercastClient` builds a request from an operation (method, path,
parameters), sends it through a reusable transport, and returns the
decoded response or raises a typed error. A client can also be made the
active client of a block of code so that resource classes use it
implicitly, which gives the caller access to the raw response of the call.
"""

from __future__ import annotations

__all__ = ["SupercastClient"]

import logging
import threading
import uuid
from typing import TYPE_CHECKING, Any

from supercast.context import RequestContext
from supercast.core.config import ClientConfig, get_config
from supercast.encoding import ParamsEncoder
from supercast.request import execute_request_with_rescues
from supercast.response import SupercastResponse
from supercast.retry import RetryPolicy
from supercast.scope import get_active_client, get_default_client, run_scoped
from supercast.transport import HttpxTransport, Transport, TransportError
from supercast.utils.exceptions import check_api_key, general_api_error
from supercast.utils.params import (
    flatten_params,
    is_multipart,
    merge_path_query,
    normalize_headers,
    objects_to_ids,
    stringify,
)
from supercast.utils.structured_logging import setup_logging
from supercast.utils.user_agent import SystemProfiler, user_agent_headers

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType
    from typing import Self

    from supercast.transport import TransportResponse

logger: logging.Logger = logging.getLogger(__name__)

# Parameters of these methods are sent in the query string, not the body
QUERY_METHODS = ("get", "head", "delete")

# Methods with side effects, made safe to retry with an idempotency key
IDEMPOTENCY_KEY_METHODS = ("post", "delete")

_thread_defaults = threading.local()


class SupercastClient:
    r"""Client for the Supercast API.

    A client owns a transport and reuses its connections across requests.
    A client must only be used by one thread or task at a time.

    Args:
        transport: Optional transport. If ``None`` and no ``config`` is
            given, the default transport of the current thread is shared.
            If ``None`` and a ``config`` is given, a transport is built
            from the configuration and closed with the client.
        config: Optional configuration. If ``None``, the process-wide
            configuration is read at every request.

    Example:
        ```pycon
        >>> from supercast import SupercastClient
        >>> from supercast.core.config import ClientConfig
        >>> with SupercastClient(config=ClientConfig(api_key="sk_test")) as client:  # doctest: +SKIP
        ...     response, api_key = client.execute_request("get", "/episodes/1")
        ...     response.data
        ...

        ```
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        config: ClientConfig | None = None,
    ) -> None:
        self._config = config
        self._close_transport = False
        if transport is None:
            if config is None:
                transport = self.default_transport()
            else:
                transport = HttpxTransport(config=config)
                self._close_transport = True
        self.transport = transport
        self._last_response: SupercastResponse | None = None
        self._system_profiler = SystemProfiler()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        r"""Close the transport if this client created it."""
        if self._close_transport:
            self.transport.close()
            self._close_transport = False

    @property
    def config(self) -> ClientConfig:
        r"""The configuration used by the next request."""
        return self._config or get_config()

    @property
    def last_response(self) -> SupercastResponse | None:
        r"""The last response received since :meth:`request` was called."""
        return self._last_response

    def reset_last_response(self) -> None:
        self._last_response = None

    @staticmethod
    def active_client() -> SupercastClient:
        r"""Return the client active for the current thread or task."""
        return get_active_client()

    @staticmethod
    def default_client() -> SupercastClient:
        r"""Return the default client of the current thread."""
        return get_default_client()

    @staticmethod
    def default_transport() -> Transport:
        r"""Return the default transport of the current thread.

        Connections are kept open for reuse, so every thread gets its own
        transport, built from the process-wide configuration on first use.
        """
        transport = getattr(_thread_defaults, "transport", None)
        if transport is None:
            transport = HttpxTransport(config=get_config())
            _thread_defaults.transport = transport
        return transport

    def request(
        self, func: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> tuple[Any, SupercastResponse | None]:
        """Call ``func`` with this client as the active client.

        Usage looks like::

            client = SupercastClient()
            episode, response = client.request(Episode.retrieve, 1)

        Args:
            func: The function to call, typically a resource class method.
            *args: Positional arguments passed to ``func``.
            **kwargs: Keyword arguments passed to ``func``.

        Returns:
            The value returned by ``func``, and the last response received
            during the call.
        """
        return run_scoped(self, func, *args, **kwargs)

    def execute_request(
        self,
        method: str,
        path: str,
        *,
        api_base: str | None = None,
        api_version: str | None = None,
        api_key: str | None = None,
        headers: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> tuple[SupercastResponse, str]:
        """Execute one logical API call.

        Parameters of ``GET``, ``HEAD`` and ``DELETE`` requests are sent in
        the query string, the others in a form-encoded (or multipart)
        body. Query parameters embedded in ``path`` are merged with the
        explicit ones, which take precedence.

        Args:
            method: The HTTP method.
            path: The request path, relative to the API version.
            api_base: Overrides the configured base URL.
            api_version: Overrides the configured API version.
            api_key: Overrides the configured API key.
            headers: Additional request headers.
            params: The request parameters. Resource objects are sent as
                their identifiers.

        Returns:
            The decoded response and the API key used.

        Raises:
            AuthenticationError: If no valid API key is available. No
                request is sent in that case.
            APIError: If the server responded with an error, or with a
                body that could not be decoded.
            APIConnectionError: If no response was received.
        """
        config = self.config
        if config.log_level is not None:
            setup_logging(config.log_level)
        api_base = api_base or config.api_base
        api_version = api_version or config.api_version
        api_key = api_key or config.api_key
        params = objects_to_ids(params or {})

        check_api_key(api_key, config)

        method = method.lower()
        body: dict[str, Any] | None = None
        query_params: dict[str, Any] | None = None
        if method in QUERY_METHODS:
            query_params = params
        else:
            body = params

        # Parameters appended to the path would otherwise be lost
        path, query_params = merge_path_query(path, query_params)

        request_headers = self._request_headers(api_key, api_version, method, config)
        request_headers.update(normalize_headers(headers))
        multipart = is_multipart(body)
        if multipart:
            # The transport sets the content type with its boundary
            request_headers.pop("Content-Type", None)
        params_encoder = ParamsEncoder(multipart=multipart)

        url = self._api_url(path, api_base, api_version)
        if query_params:
            url = f"{url}?{params_encoder.encode(query_params)}"

        context = RequestContext(
            method=method,
            path=path,
            account=request_headers.get("Supercast-Account"),
            api_key=api_key,
            api_version=request_headers.get("Supercast-Version"),
            body=params_encoder.encode(body) if body is not None else None,
            query_params=params_encoder.encode(query_params) if query_params else None,
            idempotency_key=request_headers.get("Idempotency-Key"),
        )

        def send() -> TransportResponse:
            if multipart:
                data, files = _split_multipart(body or {})
                return self.transport.request(
                    method, url, headers=request_headers, data=data, files=files
                )
            return self.transport.request(
                method,
                url,
                headers=request_headers,
                content=params_encoder.encode(body) if body is not None else None,
            )

        http_resp = execute_request_with_rescues(
            send,
            context,
            policy=RetryPolicy.from_config(config),
            api_base=api_base,
            config=config,
        )

        try:
            resp = SupercastResponse.from_transport(http_resp)
        except TransportError as exc:
            raise general_api_error(
                http_resp, context.dup_from_response(http_resp.headers), config
            ) from exc

        self._last_response = resp
        return resp, api_key

    @staticmethod
    def _api_url(path: str, api_base: str, api_version: str | None) -> str:
        if api_version:
            return f"{api_base}/{api_version}{path}"
        return f"{api_base}{path}"

    def _request_headers(
        self, api_key: str, api_version: str | None, method: str, config: ClientConfig
    ) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        # Retrying a request with side effects is only safe with an idempotency key
        if method in IDEMPOTENCY_KEY_METHODS and config.max_network_retries > 0:
            headers["Idempotency-Key"] = str(uuid.uuid4())
        if api_version:
            headers["Supercast-Version"] = api_version
        headers.update(user_agent_headers(self._system_profiler))
        return headers


def _split_multipart(params: Mapping[str, Any]) -> tuple[dict[str, str], dict[str, Any]]:
    data: dict[str, str] = {}
    files: dict[str, Any] = {}
    for key, value in flatten_params(params):
        if hasattr(value, "read"):
            files[key] = value
        else:
            data[key] = stringify(value)
    return data, files
