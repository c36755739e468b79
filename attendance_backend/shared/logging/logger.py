"""loguru setup with a per-request correlation id."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_DEFAULT_LOG_FILE = Path(__file__).resolve().parents[2] / "instance" / "app.log"
_QUIET_LIBRARIES = ("httpx", "httpcore", "urllib3")

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


def _inject_correlation_id(record) -> None:
    record["extra"].setdefault("correlation_id", _CORRELATION_ID.get())


def _log_file() -> Path | None:
    # LOG_FILE="" turns the file sink off.
    configured = os.getenv("LOG_FILE")
    if configured is None:
        return _DEFAULT_LOG_FILE
    return Path(configured) if configured else None


class _InterceptHandler(logging.Handler):
    """Routes stdlib logging (werkzeug, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()

    _logger.remove()
    _logger.configure(patcher=_inject_correlation_id)
    sink_options = {
        "level": level,
        "format": _FMT,
        "backtrace": False,
        "diagnose": False,
        "filter": sanitize_record,
    }
    _logger.add(sys.stderr, colorize=True, **sink_options)

    log_file = _log_file()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(str(log_file), enqueue=True, encoding="utf-8", **sink_options)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = _logger.patch(_inject_correlation_id)

__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
