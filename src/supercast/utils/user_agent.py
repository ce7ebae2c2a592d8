r"""System information sent with every request to help debug
integrations."""

from __future__ import annotations

__all__ = ["SystemProfiler", "user_agent_headers"]

import json
import logging
import platform
import socket
from typing import Any

from supercast.version import __version__

logger: logging.Logger = logging.getLogger(__name__)


class SystemProfiler:
    """Collect information about the system the library runs on.

    The ``uname`` string is computed once per profiler, the rest of the
    information every time :meth:`user_agent` is called.
    """

    def __init__(self) -> None:
        self.uname = self.get_uname()

    @staticmethod
    def get_uname() -> str:
        r"""Return a description of the operating system."""
        try:
            return " ".join(part for part in platform.uname() if part)
        except OSError:
            return "uname lookup failed"

    def user_agent(self) -> dict[str, Any]:
        """Return the client user agent information.

        Returns:
            The library version, the interpreter version, implementation
            and platform, and the host name. ``None`` values are dropped.
        """
        info = {
            "bindings_version": __version__,
            "lang": "python",
            "lang_version": platform.python_version(),
            "platform": platform.platform(),
            "engine": platform.python_implementation(),
            "publisher": "supercast",
            "uname": self.uname,
            "hostname": socket.gethostname(),
        }
        return {key: value for key, value in info.items() if value is not None}


def user_agent_headers(profiler: SystemProfiler) -> dict[str, str]:
    """Build the user agent headers of a request.

    Args:
        profiler: The profiler describing the system.

    Returns:
        The ``User-Agent`` header and the JSON-encoded client information
        in ``X-Supercast-Client-User-Agent``. If the information cannot be
        encoded, its ``repr`` is sent as ``X-Supercast-Client-Raw-User-Agent``
        along with the encoding error.
    """
    headers = {"User-Agent": f"Supercast PythonBindings/{__version__}"}
    user_agent = profiler.user_agent()
    try:
        headers["X-Supercast-Client-User-Agent"] = json.dumps(user_agent)
    except (TypeError, ValueError) as exc:
        logger.debug(f"Could not encode the client user agent: {exc}")
        headers["X-Supercast-Client-Raw-User-Agent"] = repr(user_agent)
        headers["Error"] = f"{exc} ({type(exc).__name__})"
    return headers
