"""Structured logging for enhancer-core.

This module provides structured logging functions on top of the standard
library ``logging`` package. Every function takes a message plus optional
structured fields, which are normalized to strings, attached to the record
as ``record.fields`` and appended to the rendered message.

The enhancer log level (OFF, ERROR, WARNING, INFO) only gates whether
diagnostics are surfaced. It never changes resolution semantics.

Example:
    >>> from enhancer_core import log_info, log_error
    >>>
    >>> log_info("Resolution started", {
    ...     "target_type": "int",
    ...     "strategies": "3"
    ... })
    >>>
    >>> try:
    ...     run()
    ... except Exception as e:
    ...     log_error(f"Run failed: {e}", {
    ...         "error_type": type(e).__name__
    ...     })
"""

from __future__ import annotations

import logging
from typing import Any

from .types import EnhancerLogLevel, LogContext

LOGGER_NAME = "enhancer_core"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_MAP: dict[EnhancerLogLevel, int] = {
    EnhancerLogLevel.OFF: logging.CRITICAL + 10,
    EnhancerLogLevel.ERROR: logging.ERROR,
    EnhancerLogLevel.WARNING: logging.WARNING,
    EnhancerLogLevel.INFO: logging.INFO,
}

_logger = logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    """Return the package logger."""
    return _logger


def configure_logging(level: EnhancerLogLevel | str = EnhancerLogLevel.OFF) -> None:
    """Apply an enhancer log level to the package logger.

    OFF disables the package logger entirely. The other levels map onto the
    standard library levels of the same name. A stream handler is attached
    once if the logger has none, using the same format as the worker server.

    Args:
        level: Enhancer log level or its string value.
    """
    level = EnhancerLogLevel(level)
    _logger.disabled = level is EnhancerLogLevel.OFF
    _logger.setLevel(_LEVEL_MAP[level])

    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        _logger.addHandler(handler)


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for rejections that a caller chose to treat as fatal.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.
    """
    _log(logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Use this for very verbose logging, like per-strategy attempts.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(TRACE, message, fields)


def _log(level: int, message: str, fields: dict[str, Any] | LogContext | None) -> None:
    if not _logger.isEnabledFor(level):
        return
    fields_dict = _normalize_fields(fields)
    if fields_dict:
        rendered = " ".join(f"{k}={v}" for k, v in fields_dict.items())
        message = f"{message} [{rendered}]"
    _logger.log(level, message, extra={"fields": fields_dict or {}})


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "LOGGER_NAME",
    "TRACE",
    "configure_logging",
    "get_logger",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
