"""Shared enums and pydantic models for enhancer-core."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class EnhancerLogLevel(str, Enum):
    """Enhancer log levels.

    Only these four levels are available. They gate whether diagnostic
    output is surfaced, never how values are resolved.
    """

    OFF = "off"
    """Logging is turned off (the default)."""

    ERROR = "error"
    """Errors only."""

    WARNING = "warning"
    """Errors and warnings."""

    INFO = "info"
    """Everything at informational level and above."""


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(
        ...     proxy_point="parameter.accept",
        ...     target_type="list[int]",
        ... )
        >>> log_info("Accepting parameter", context)
    """

    proxy_point: str | None = Field(
        default=None,
        description="Extension point currently being invoked.",
    )
    target_type: str | None = Field(
        default=None,
        description="Type descriptor being resolved.",
    )
    strategy: str | None = Field(
        default=None,
        description="Fully-qualified strategy name.",
    )
    parameter_index: int | None = Field(
        default=None,
        description="Positional index of the parameter being accepted.",
    )
    operation: str | None = Field(
        default=None,
        description="Operation name.",
    )

    model_config = {"extra": "forbid"}


__all__ = ["EnhancerLogLevel", "LogContext"]
