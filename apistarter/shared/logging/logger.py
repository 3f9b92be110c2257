# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup shared by the app factory, the middleware and the tests.

Every record carries ``extra["correlation_id"]`` (the current request id or
``"-"``) and is scrubbed by :func:`sanitize_record` before it reaches a sink.
Development output is colourised text; production output is one JSON object
per line.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)
_NO_CORRELATION = "-"
_QUIET_LOGGERS = {"werkzeug": logging.INFO, "sqlalchemy.engine": logging.WARNING}

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default=_NO_CORRELATION)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that binds the current correlation id at call time."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(correlation_id=_CORRELATION_ID.get()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or _NO_CORRELATION)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set(_NO_CORRELATION)


def _patch_record(record) -> None:
    record["extra"].setdefault("correlation_id", _CORRELATION_ID.get())
    sanitize_record(record)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    *,
    json_logs: bool = False,
) -> None:
    level = level.upper()

    _logger.remove()
    _logger.configure(patcher=_patch_record, extra={"correlation_id": _NO_CORRELATION})

    if json_logs:
        _logger.add(sys.stdout, level=level, serialize=True, backtrace=False, diagnose=False)
    else:
        _logger.add(
            sys.stderr,
            level=level,
            format=_TEXT_FORMAT,
            colorize=True,
            backtrace=False,
            diagnose=False,
        )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_file,
            level=level,
            serialize=json_logs,
            format=_TEXT_FORMAT,
            colorize=False,
            backtrace=False,
            diagnose=False,
            enqueue=True,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, stdlib_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(stdlib_level)


logger = ContextualLogger()

__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
