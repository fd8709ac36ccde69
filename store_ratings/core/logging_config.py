"""
Central logging configuration.
Console handler always, file handler when LOG_FILE_PATH is set.
Adds a TRACE level below DEBUG for very chatty per-call messages.
"""
from __future__ import annotations

import functools
import inspect
import logging
import os
import time
from typing import Any, Callable, Optional, TypeVar

from store_ratings.core.config import settings

F = TypeVar("F", bound=Callable[..., Any])

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LEVEL_NAMES = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def trace(self: logging.Logger, message: str, *args, **kwargs) -> None:
    """Emit a TRACE-level message on the logger instance."""
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace  # type: ignore[attr-defined]


class LogLevelFilter(logging.Filter):
    """Only let through records whose level is in the allowed set."""

    def __init__(self, allowed_levels: set[int]) -> None:
        super().__init__()
        self._allowed_levels = allowed_levels

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in self._allowed_levels


def parse_allowed_levels(raw: Optional[str]) -> set[int]:
    """Turn a comma separated list such as ``"INFO,ERROR"`` into level numbers.

    Unknown names are ignored; an empty or fully unknown list falls back to
    TRACE, INFO, WARNING and ERROR.
    """
    default_levels = {TRACE_LEVEL, logging.INFO, logging.WARNING, logging.ERROR}
    if not raw:
        return default_levels

    levels: set[int] = set()
    for level_name in raw.split(","):
        level = _LEVEL_NAMES.get(level_name.strip().upper())
        if level is not None:
            levels.add(level)
    return levels or default_levels


def resolve_level(level_name: Optional[str]) -> int:
    """Resolve the configured log level string to its numeric value."""
    if not level_name:
        return logging.INFO
    return _LEVEL_NAMES.get(level_name.strip().upper(), logging.INFO)


def configure_logging() -> None:
    """Configure the root logger with console + optional file handlers."""
    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(settings.LOG_LEVEL))
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    level_filter = LogLevelFilter(parse_allowed_levels(settings.LOG_LEVELS))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(level_filter)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE_PATH:
        log_dir = os.path.dirname(settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(settings.LOG_FILE_PATH)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(level_filter)
        root_logger.addHandler(file_handler)


SENSITIVE_ARGS = frozenset({"password_hash", "token", "reset_token"})


def _format_args(signature: inspect.Signature, args: tuple, kwargs: dict) -> str:
    try:
        bound = signature.bind(*args, **kwargs)
    except TypeError:
        return "?"
    parts = []
    for name, value in bound.arguments.items():
        if name == "self":
            continue
        if name in SENSITIVE_ARGS:
            value = "***"
        elif isinstance(value, dict):
            value = {k: "***" if k in SENSITIVE_ARGS else v for k, v in value.items()}
        parts.append(f"{name}={value}")
    return ", ".join(parts)


def log_db_timing(func: F) -> F:
    """
    Decorator for repository methods.
    Logs the qualified method name, the call arguments (without ``self``,
    secrets masked) and the duration in milliseconds. Failures are logged at
    ERROR and re-raised unchanged.
    """
    logger = logging.getLogger(func.__module__)
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        args_str = _format_args(signature, args, kwargs)

        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "DB_OP | %s | duration=%.3fms | args=(%s) | error=%s",
                func.__qualname__,
                elapsed_ms,
                args_str,
                exc,
            )
            raise
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "DB_OP | %s | duration=%.3fms | args=(%s)",
            func.__qualname__,
            elapsed_ms,
            args_str,
        )
        return result

    return wrapper  # type: ignore[return-value]
