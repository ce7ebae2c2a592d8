r"""Binding of the active client to the calling thread or task.

Resource classes do not receive a client explicitly: they use the client
that is active for the current thread or task. A client becomes active for
the duration of :func:`client_scope` (or :func:`run_scoped`), and the
previously active client is restored on every exit path. When no client
is active, a default client is lazily created for the current thread and
reused by its later calls.

Example:
    ```pycon
    >>> from supercast import SupercastClient
    >>> from supercast.resource import APIResource
    >>> client = SupercastClient()
    >>> episode, response = client.request(APIResource.retrieve, 1)  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["client_scope", "get_active_client", "get_default_client", "run_scoped"]

import contextvars
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from supercast.client import SupercastClient
    from supercast.response import SupercastResponse

T = TypeVar("T")

# Client bound by client_scope; copied into new tasks, isolated per thread
_active_client: contextvars.ContextVar[SupercastClient | None] = contextvars.ContextVar(
    "supercast_active_client", default=None
)

_thread_defaults = threading.local()


def get_default_client() -> SupercastClient:
    r"""Return the default client of the current thread, creating it on
    first use."""
    client = getattr(_thread_defaults, "client", None)
    if client is None:
        from supercast.client import SupercastClient

        client = SupercastClient(transport=SupercastClient.default_transport())
        _thread_defaults.client = client
    return client


def get_active_client() -> SupercastClient:
    r"""Return the client bound to the current thread or task, or the
    default client of the thread if none is bound."""
    return _active_client.get() or get_default_client()


@contextmanager
def client_scope(client: SupercastClient) -> Generator[SupercastClient, None, None]:
    """Make ``client`` the active client within a ``with`` block.

    Scopes can be nested. The client active before the block is restored
    when the block exits, including when it raises.

    Args:
        client: The client to bind.

    Yields:
        The bound client.
    """
    token = _active_client.set(client)
    try:
        yield client
    finally:
        _active_client.reset(token)


def run_scoped(
    client: SupercastClient,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> tuple[T, SupercastResponse | None]:
    """Call ``func`` with ``client`` as the active client.

    Args:
        client: The client to bind during the call.
        func: The function to call, typically a resource class method.
        *args: Positional arguments passed to ``func``.
        **kwargs: Keyword arguments passed to ``func``.

    Returns:
        The value returned by ``func``, and the last response received by
        ``client`` during the call (``None`` if it made no request).
    """
    client.reset_last_response()
    with client_scope(client):
        result = func(*args, **kwargs)
    return result, client.last_response
