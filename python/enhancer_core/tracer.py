"""Diagnostic tracer for failed strategy attempts.

Every strategy that raises during a resolution call leaves one
StrategyExceptionTracer behind: the strategy identity plus the exception it
raised. A failed lookup (no applicable strategy set, or an unresolvable
target type) leaves a single tracer whose strategy is ``None``.

Rendering a tracer produces a block like::

    <StrategyExceptionTracer> - IntegerAcceptStrategy
     -- Strategy:
    enhancer_core.strategy.defaults.IntegerAcceptStrategy
     -- Error:
    ValueError: invalid literal for int() with base 10: 'abc'
     -- Detail:
    Traceback (most recent call last):
      ...
"""

from __future__ import annotations

import traceback

from .exceptions import EnhancerError, ResolutionRejectedError


class StrategyExceptionTracer(EnhancerError):
    """Record of one failed strategy attempt.

    The captured exception is chained as ``__cause__`` so that rendering
    (and ``traceback``) shows the full cause chain.

    Attributes:
        strategy: Fully-qualified strategy name, or None for a lookup failure.
        cause: The exception raised by the attempt.
    """

    def __init__(self, strategy: str | None, cause: BaseException) -> None:
        super().__init__(_describe(cause))
        self.strategy = strategy
        self.cause = cause
        self.__cause__ = cause

    @property
    def short_name(self) -> str | None:
        """Strategy name without its module path."""
        if self.strategy is None:
            return None
        return self.strategy.rsplit(".", 1)[-1]

    @property
    def is_lookup_failure(self) -> bool:
        """True if no strategy was attempted (lookup itself failed)."""
        return self.strategy is None

    @property
    def message(self) -> str:
        """Message of the captured exception, prefixed with its type."""
        return str(self)

    def detail(self) -> str:
        """Traceback of the captured exception, preceded by its causes.

        The captured exception's own message is left to the ``Error``
        section. A nested rejection is followed by its rendered tracers, so
        each level of nesting is rendered exactly once.
        """
        cause = self.cause
        parts: list[str] = []
        chained = cause.__cause__
        if chained is not None:
            parts.extend(traceback.format_exception(type(chained), chained, chained.__traceback__))
            parts.append(_CAUSE_HEADER)
        elif cause.__context__ is not None and not cause.__suppress_context__:
            context = cause.__context__
            parts.extend(traceback.format_exception(type(context), context, context.__traceback__))
            parts.append(_CONTEXT_HEADER)
        if cause.__traceback__ is not None:
            parts.append("Traceback (most recent call last):\n")
            parts.extend(traceback.format_tb(cause.__traceback__))
        if isinstance(cause, ResolutionRejectedError):
            parts.append(cause.result.render() + "\n")
        return "".join(parts)

    def render(self) -> str:
        """Render the tracer as a human-readable block."""
        return (
            f"<StrategyExceptionTracer> - {self.short_name}\n"
            f" -- Strategy: \n{self.strategy}\n"
            f" -- Error: \n{self.message}\n"
            f" -- Detail: \n{self.detail()}"
        )

    def __repr__(self) -> str:
        return f"StrategyExceptionTracer(strategy={self.strategy!r}, cause={self.cause!r})"


_CAUSE_HEADER = "\nThe above exception was the direct cause of the following exception:\n\n"
_CONTEXT_HEADER = "\nDuring handling of the above exception, another exception occurred:\n\n"


def _describe(cause: BaseException) -> str:
    text = str(cause)
    name = type(cause).__name__
    return f"{name}: {text}" if text else name


__all__ = ["StrategyExceptionTracer"]
