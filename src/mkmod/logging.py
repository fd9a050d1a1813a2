"""Structured logging helpers for mkmod.

This module provides a LoggerAdapter that merges structured fields
(operation, status, path, module) into every record, a JSON formatter, and
module-level loggers with NullHandler so that library use stays silent until
an application calls :func:`setup_logging`.

Examples
--------
>>> from mkmod.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Super file resolved", extra={"operation": "resolve", "path": "src/lib.rs"})
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping
    from types import TracebackType

__all__ = [
    "JsonFormatter",
    "LoggerAdapter",
    "get_logger",
    "setup_logging",
    "with_fields",
]

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Standard LogRecord attributes; extra fields may not reuse these names
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "asctime",
        "stack_info",
    }
)


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Formats log records as one JSON object per line with timestamp, level,
    logger name, message, and every JSON-serializable extra field.

    Examples
    --------
    >>> import logging
    >>> handler = logging.StreamHandler()
    >>> handler.setFormatter(JsonFormatter())
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format. May include extra fields in ``record.__dict__``.

        Returns
        -------
        str
            JSON-encoded log entry.
        """
        data: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if (
                key not in _RESERVED_ATTRS
                and key not in data
                and not key.startswith("_")
                and value is not None
                and isinstance(value, (str, int, float, bool, list, dict))
            ):
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def _safe_key(key: str) -> str:
    return f"field_{key}" if key in _RESERVED_ATTRS else key


class LoggerAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter that injects structured context fields.

    Fields bound on the adapter (via :func:`with_fields`) are merged into the
    ``extra`` mapping of each call without overriding per-call values.
    ``operation`` and ``status`` are always present. Keys that collide with
    built-in :class:`logging.LogRecord` attributes (``module``, ``name``, ...)
    are renamed with a ``field_`` prefix.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> logger.info("Module created", extra={"operation": "create", "path": "src/foo.rs"})
    """

    logger: logging.Logger

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Merge bound fields into the call's ``extra`` mapping.

        Parameters
        ----------
        msg : Any
            Log message.
        kwargs : MutableMapping[str, Any]
            Keyword arguments from the logging call.

        Returns
        -------
        tuple[Any, MutableMapping[str, Any]]
            Message and kwargs with the merged ``extra`` mapping.
        """
        extra = {_safe_key(key): value for key, value in (kwargs.get("extra") or {}).items()}
        if self.extra:
            for key, value in self.extra.items():
                extra.setdefault(_safe_key(key), value)
        extra.setdefault("operation", "unknown")
        extra.setdefault("status", "ok")
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    """Get a logger adapter with structured logging support.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__`` of the calling module).

    Returns
    -------
    LoggerAdapter
        Adapter wrapping ``logging.getLogger(name)``.
    """
    logger = logging.getLogger(name)

    # NullHandler keeps library use silent until setup_logging() runs
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return LoggerAdapter(logger, {})


def setup_logging(level: int | str = logging.WARNING, *, json_format: bool = False) -> None:
    """Configure the root logger to write to stderr.

    Standard output is left untouched so a successful CLI run prints nothing.

    Parameters
    ----------
    level : int | str, optional
        Logging level threshold, numeric or by name (``"DEBUG"``).
        Defaults to ``logging.WARNING``.
    json_format : bool, optional
        Emit JSON lines instead of plain text. Defaults to False.

    Examples
    --------
    >>> setup_logging("DEBUG", json_format=True)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)


class _WithFieldsContext(AbstractContextManager[LoggerAdapter]):
    """Context manager implementation for :func:`with_fields`."""

    def __init__(
        self, logger: logging.Logger | LoggerAdapter, fields: Mapping[str, object]
    ) -> None:
        self._logger = logger
        self._fields = dict(fields)

    def __enter__(self) -> LoggerAdapter:
        if isinstance(self._logger, LoggerAdapter):
            base_logger = self._logger.logger
            merged = dict(self._logger.extra or {})
            merged.update(self._fields)
        else:
            base_logger = self._logger
            merged = self._fields
        return LoggerAdapter(base_logger, merged)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        del exc_type, exc_value, exc_tb


def with_fields(
    logger: logging.Logger | LoggerAdapter,
    **fields: object,
) -> AbstractContextManager[LoggerAdapter]:
    """Context manager for attaching structured fields to log entries.

    Parameters
    ----------
    logger : logging.Logger | LoggerAdapter
        Base logger to wrap (may already be an adapter; its fields are kept).
    **fields : object
        Structured fields to inject into all log entries made through the
        yielded adapter.

    Returns
    -------
    AbstractContextManager[LoggerAdapter]
        Context manager yielding a LoggerAdapter with bound fields.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> with with_fields(logger, operation="insert", path="src/lib.rs") as log:
    ...     log.debug("Inserting module")
    """
    return _WithFieldsContext(logger, fields)
