"""Custom exceptions for enhancer-core.

This module provides a hierarchy of exceptions for error handling
in the strategy resolution engine and its collaborators.

Only precondition violations and unresolvable top-level type descriptors
propagate out of the engine. Failures raised by individual strategies are
captured as tracers and never surface as exceptions unless the caller asks
for it via ``ResolutionResult.unwrap()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .result import ResolutionResult


class EnhancerError(Exception):
    """Base exception for all enhancer-core errors.

    All exceptions raised by enhancer-core inherit from this class,
    making it easy to catch all enhancer-related errors.

    Example:
        >>> try:
        ...     value = acceptor.accept(int, "abc").unwrap()
        ... except EnhancerError as e:
        ...     print(f"Enhancer error: {e}")
    """

    pass


class PreconditionViolationError(EnhancerError, ValueError):
    """Raised when a required input (registry, list, type) is absent.

    Always fatal. The engine never catches this error.
    """

    pass


class TypeResolutionError(EnhancerError, ValueError):
    """Raised when a type descriptor cannot be reduced to a raw class.

    Example:
        >>> raw_type(int | str)
        Traceback (most recent call last):
        ...
        TypeResolutionError: Cannot obtain raw type: int | str
    """

    pass


class StrategySetNotFoundError(EnhancerError):
    """Raised when neither an exact entry nor the universal bucket applies."""

    pass


class StrategyStubError(EnhancerError, NotImplementedError):
    """Raised by the default ``Strategizable.accept`` implementation.

    Every concrete strategy variant must override ``accept``.
    """

    pass


class ResolutionStateError(EnhancerError):
    """Raised when reading the value of a rejected resolution result."""

    pass


class ResolutionRejectedError(EnhancerError):
    """Raised when a caller converts a rejected result into a failure.

    The message defaults to the full rendered diagnostic of the rejection;
    nested rejections pass the one-line summary instead. The result itself is
    kept for programmatic inspection.

    Attributes:
        result: The rejected ResolutionResult.
    """

    def __init__(self, result: ResolutionResult, message: str | None = None) -> None:
        super().__init__(message if message is not None else result.render())
        self.result = result

    @property
    def original_input(self) -> Any:
        """Return the value that could not be resolved."""
        return self.result.original_input


class ConfigurationError(EnhancerError):
    """Raised when enhancer configuration is invalid.

    Common causes:
    - Strategy class path cannot be imported
    - Configured object is not a strategy or interceptor
    - YAML document has the wrong shape
    """

    pass


class InputExhaustedError(EnhancerError):
    """Raised when the input provider runs out before all parameters are read."""

    pass


def assert_true(flag: bool, message: str) -> None:
    """Raise PreconditionViolationError with ``message`` unless ``flag``."""
    if not flag:
        raise PreconditionViolationError(message)


def assert_not_none(value: Any, message: str) -> None:
    """Raise PreconditionViolationError with ``message`` if ``value`` is None."""
    assert_true(value is not None, message)


__all__ = [
    "EnhancerError",
    "PreconditionViolationError",
    "TypeResolutionError",
    "StrategySetNotFoundError",
    "StrategyStubError",
    "ResolutionStateError",
    "ResolutionRejectedError",
    "ConfigurationError",
    "InputExhaustedError",
    "assert_true",
    "assert_not_none",
]
