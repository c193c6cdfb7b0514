# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Logger implementation for ddd_common.

This module provides the default logger implementation based on Python's
standard logging module, enhanced with structured context: keyword arguments
given to a log call, values bound with ``bind`` and values set through
``context`` all end up on the record as ``ddd_context``.
"""

from __future__ import annotations

import contextlib
import datetime
import enum
import json
import logging
import sys
import threading
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from ddd_common.logging.config import LoggingSettings, LogLevel

if TYPE_CHECKING:
    from collections.abc import Iterator

ROOT_LOGGER_NAME = "ddd_common"

_log_context: ContextVar[dict[str, Any]] = ContextVar("ddd_log_context", default={})
_configure_lock = threading.Lock()
_configured = False


class ContextJsonEncoder(json.JSONEncoder):
    """JSON encoder with graceful fallbacks for values found in log context."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return obj.isoformat()
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, type):
            return obj.__qualname__
        if hasattr(obj, "model_dump"):
            return obj.model_dump()
        if isinstance(obj, BaseException):
            to_dict = getattr(obj, "to_dict", None)
            return to_dict() if callable(to_dict) else str(obj)
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formatter that renders the ``ddd_context`` of a record as text or JSON."""

    def __init__(self, json_format: bool = False, include_timestamp: bool = True) -> None:
        self.json_format = json_format
        self.include_timestamp = include_timestamp

        fmt = "%(name)s [%(levelname)s] %(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = dict(getattr(record, "ddd_context", {}) or {})
        if self.json_format:
            return self._format_json(record, context)
        message = super().format(record)
        if not context:
            return message
        pairs = " ".join(f"{k}={self._format_value(v)}" for k, v in context.items())
        return f"{message} {pairs}"

    def _format_json(self, record: logging.LogRecord, context: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "level": record.levelname,
            "name": record.name,
            **context,
        }
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, cls=ContextJsonEncoder, ensure_ascii=False)

    def _format_value(self, value: Any) -> str:
        if isinstance(value, str):
            return f'"{value}"' if " " in value else value
        try:
            return json.dumps(value, cls=ContextJsonEncoder)
        except (TypeError, ValueError):
            return str(value)


def configure_logging(settings: LoggingSettings | None = None, force: bool = False) -> None:
    """Attach the structured handler(s) to the ``ddd_common`` root logger.

    Safe to call repeatedly; only the first call (or a forced call) installs
    handlers.
    """
    global _configured
    with _configure_lock:
        if _configured and not force:
            return
        settings = settings or LoggingSettings()
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)

        formatter = StructuredFormatter(
            json_format=settings.json_format,
            include_timestamp=settings.include_timestamp,
        )
        if settings.console_enabled:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(formatter)
            root.addHandler(console)
        if settings.file_path:
            file_handler = logging.FileHandler(settings.file_path)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        root.setLevel(settings.level.stdlib_level)
        for name, level in settings.logger_levels.items():
            logging.getLogger(name).setLevel(level.stdlib_level)
        _configured = True


class DddLogger:
    """Default logger implementation wrapping a stdlib logger."""

    def __init__(self, name: str, bound_context: dict[str, Any] | None = None) -> None:
        self.name = name
        self._logger = logging.getLogger(name)
        self._bound_context: dict[str, Any] = dict(bound_context or {})

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        stack_info = kwargs.pop("stack_info", False)
        context = {**self._bound_context, **_log_context.get(), **kwargs}
        self._logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=3,
            extra={"ddd_context": context},
        )

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, *args, **kwargs)

    def structured_log(self, level: LogLevel | str | int, msg: str, **kwargs: Any) -> None:
        """Log a message at a level given as LogLevel, level name or number."""
        self._log(LogLevel.parse(level).stdlib_level, msg, **kwargs)

    def set_level(self, level: LogLevel | str | int) -> None:
        self._logger.setLevel(LogLevel.parse(level).stdlib_level)

    def bind(self, **kwargs: Any) -> DddLogger:
        """Create a new logger with additional bound context values."""
        return DddLogger(self.name, {**self._bound_context, **kwargs})

    @staticmethod
    @contextlib.contextmanager
    def context(**kwargs: Any) -> Iterator[None]:
        """Add context to every log record emitted inside the block.

        The context lives in a ContextVar, so it follows the current task.
        """
        token = _log_context.set({**_log_context.get(), **kwargs})
        try:
            yield
        finally:
            _log_context.reset(token)


def get_logger(name: str, level: LogLevel | str | int | None = None) -> DddLogger:
    """Get a logger for the specified name (typically ``__name__``)."""
    configure_logging()
    logger = DddLogger(name)
    if level is not None:
        logger.set_level(level)
    return logger
