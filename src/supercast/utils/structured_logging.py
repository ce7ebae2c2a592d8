r"""Structured logging utilities for request logs.

Request logs are emitted with the standard :mod:`logging` module. The
structured fields of a record (method, path, status, idempotency key...)
are attached through ``extra`` so that :class:`StructuredFormatter` can
render them as JSON. Logging is opt-in: set ``log_level`` in the client
configuration to write the logs to stderr, or pass your own logger.

Example:
    ```python
    import supercast

    supercast.configure(api_key="sk_test", log_level="info")
    ```
"""

from __future__ import annotations

__all__ = [
    "ROOT_LOGGER_NAME",
    "StructuredFormatter",
    "log_debug",
    "log_error",
    "log_info",
    "log_structured",
    "setup_logging",
]

import json
import logging
import sys
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import TextIO

    from supercast.core.config import ClientConfig

ROOT_LOGGER_NAME = "supercast"

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "error": logging.ERROR}

# Attributes every LogRecord has, never rendered as extra fields
_RECORD_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record is rendered as one JSON object with the fields
    ``timestamp``, ``level``, ``logger`` and ``message``, followed by the
    fields passed through ``extra``.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from supercast.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("formatter_example")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("Response from Supercast API", extra={"status": 200})
        >>> '"status": 200' in stream.getvalue()
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value
        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the timestamp as ISO 8601 with millisecond precision."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def setup_logging(log_level: str, stream: TextIO | None = None) -> logging.Logger:
    """Write the ``supercast`` logs at ``log_level`` to a stream.

    Calling this function again updates the level of the existing
    handler instead of adding a new one. Its stream is only replaced when
    ``stream`` is given.

    Args:
        log_level: One of ``"debug"``, ``"info"`` and ``"error"``.
        stream: The stream to write to. Defaults to stderr for a new
            handler, and to the current stream of an existing one.

    Returns:
        The ``supercast`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_LEVELS[log_level])
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and isinstance(
            handler.formatter, StructuredFormatter
        ):
            if stream is not None:
                handler.setStream(stream)
            return logger
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    return logger


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    r"""Log a message with structured fields. ``None`` fields are dropped."""
    logger.log(level, message, extra={k: v for k, v in extra.items() if v is not None})


def _get_logger(config: ClientConfig | None) -> logging.Logger:
    if config is not None and config.logger is not None:
        return config.logger
    return logging.getLogger(ROOT_LOGGER_NAME)


def log_debug(message: str, *, config: ClientConfig | None = None, **fields: Any) -> None:
    r"""Log a debug message with structured fields."""
    log_structured(_get_logger(config), logging.DEBUG, message, **fields)


def log_info(message: str, *, config: ClientConfig | None = None, **fields: Any) -> None:
    r"""Log an info message with structured fields."""
    log_structured(_get_logger(config), logging.INFO, message, **fields)


def log_error(message: str, *, config: ClientConfig | None = None, **fields: Any) -> None:
    r"""Log an error message with structured fields."""
    log_structured(_get_logger(config), logging.ERROR, message, **fields)
