"""Coloured console logging for the ORM, with a process-wide level switch."""

from __future__ import annotations

import logging
import sys
import threading

INFO_LEVEL = 0
ERROR_LEVEL = 1
DISABLED = 2

_FORMAT = "%(asctime)s %(filename)s:%(lineno)d: %(message)s"
_DATEFMT = "%Y/%m/%d %H:%M:%S"


class _StdoutHandler(logging.StreamHandler):
    """A handler that always writes to the current ``sys.stdout``."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stdout
        super().emit(record)


def _make_logger(name: str, prefix: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.handlers.clear()
    handler = _StdoutHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(prefix + _FORMAT, _DATEFMT))
    logger.addHandler(handler)
    return logger


_error_log = _make_logger("myorm.error", "\033[31m[error]\033[0m ")
_info_log = _make_logger("myorm.info", "\033[34m[info ]\033[0m ")
_lock = threading.Lock()


def _join(args: tuple) -> str:
    return " ".join(str(arg) for arg in args)


def error(*args) -> None:
    """Log the arguments, separated by spaces, as an error."""
    _error_log.error(_join(args), stacklevel=2)


def info(*args) -> None:
    """Log the arguments, separated by spaces, as information."""
    _info_log.info(_join(args), stacklevel=2)


def set_level(level: int) -> None:
    """Show messages at ``level`` and above; ``DISABLED`` silences everything."""
    with _lock:
        _error_log.disabled = ERROR_LEVEL < level
        _info_log.disabled = INFO_LEVEL < level