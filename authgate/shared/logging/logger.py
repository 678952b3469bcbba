"""loguru setup shared by the server, the CLI and the reaper thread."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

NO_REQUEST = "-"

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>req={extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

# stdlib loggers that are chatty at DEBUG
_LIBRARY_LEVELS = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}

_REQUEST_ID: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST)


class _StdlibBridge(logging.Handler):
    """Forward stdlib records (werkzeug, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(
            request_id=_REQUEST_ID.get()
        ).log(level, record.getMessage())


class ContextualLogger:
    """loguru proxy binding the current request id on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(request_id=_REQUEST_ID.get()), name)


def set_request_id(value: str | None) -> None:
    _REQUEST_ID.set(value or NO_REQUEST)


def get_request_id() -> str:
    return _REQUEST_ID.get()


def clear_request_id() -> None:
    _REQUEST_ID.set(NO_REQUEST)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Route everything through loguru at ``level``.

    Messages are scrubbed by :func:`sanitize_record` before any sink sees
    them. ``log_file`` adds a rotating plain-text sink.
    """
    level = level.upper()
    sink_options = {"level": level, "format": _FMT, "backtrace": False, "diagnose": False}

    _logger.remove()
    _logger.configure(extra={"request_id": NO_REQUEST}, patcher=sanitize_record)
    _logger.add(sys.stderr, colorize=True, **sink_options)
    if log_file:
        _logger.add(
            log_file,
            colorize=False,
            enqueue=True,
            encoding="utf-8",
            rotation="10 MB",
            retention=5,
            **sink_options,
        )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, library_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(library_level)


logger = ContextualLogger()

__all__ = [
    "NO_REQUEST",
    "clear_request_id",
    "get_request_id",
    "logger",
    "set_request_id",
    "setup_logging",
]
