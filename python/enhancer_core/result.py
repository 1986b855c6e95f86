"""Tagged outcome of a resolution call.

A ResolutionResult is either ACCEPTED (carrying the output of the first
strategy that succeeded) or REJECTED (carrying the original input and one
tracer per failed attempt, in attempt order). Rejection is an ordinary value
that the caller must inspect; ``unwrap()`` converts it into an exception for
callers that want to treat it as fatal.

Example:
    >>> result = acceptor.accept(int, "42")
    >>> if result.is_accepted:
    ...     print(result.value)
    42
    >>>
    >>> result = acceptor.accept(int, "abc")
    >>> print(result.render())   # most recent failure first
"""

from __future__ import annotations

import reprlib
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .exceptions import ResolutionRejectedError, ResolutionStateError
from .tracer import StrategyExceptionTracer


class ResolutionStatus(str, Enum):
    """Resolution outcome tag."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ResolutionResult(BaseModel):
    """Result of resolving a value against a strategy registry.

    Exactly one side is meaningful: ``output`` for ACCEPTED results,
    ``original_input`` plus ``tracers`` for REJECTED ones. Reading ``value``
    on a rejected result raises ResolutionStateError. Accepted results may
    still carry the tracers of strategies that failed before the winner.
    """

    status: ResolutionStatus = Field(description="Outcome tag.")
    output: Any = Field(
        default=None,
        description="Accepted output (accepted case).",
    )
    original_input: Any = Field(
        default=None,
        description="The input that could not be resolved (rejected case).",
    )
    tracers: tuple[StrategyExceptionTracer, ...] = Field(
        default=(),
        description="One tracer per failed attempt, in attempt order.",
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @classmethod
    def accept(
        cls,
        output: Any,
        tracers: list[StrategyExceptionTracer] | tuple[StrategyExceptionTracer, ...] = (),
    ) -> ResolutionResult:
        """Create an accepted result.

        Args:
            output: The accepted output.
            tracers: Failed attempts that preceded the accepting strategy.

        Returns:
            A ResolutionResult with status ACCEPTED.
        """
        return cls(status=ResolutionStatus.ACCEPTED, output=output, tracers=tuple(tracers))

    @classmethod
    def reject(
        cls,
        original_input: Any,
        tracers: list[StrategyExceptionTracer] | tuple[StrategyExceptionTracer, ...],
    ) -> ResolutionResult:
        """Create a rejected result.

        Args:
            original_input: The value that could not be resolved.
            tracers: Failed attempts, in attempt order.

        Returns:
            A ResolutionResult with status REJECTED.
        """
        return cls(
            status=ResolutionStatus.REJECTED,
            original_input=original_input,
            tracers=tuple(tracers),
        )

    @property
    def is_accepted(self) -> bool:
        """True if a strategy accepted the value."""
        return self.status is ResolutionStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        """True if every strategy declined (or none applied)."""
        return self.status is ResolutionStatus.REJECTED

    @property
    def value(self) -> Any:
        """Return the accepted output.

        Raises:
            ResolutionStateError: If the result was rejected.
        """
        if not self.is_accepted:
            raise ResolutionStateError(
                f"Cannot read the value of a rejected result for input {self.original_input!r}"
            )
        return self.output

    def unwrap(self, message: str | None = None) -> Any:
        """Return the accepted output or raise the rejection diagnostic.

        Args:
            message: Exception message. Defaults to the full ``render()``.

        Raises:
            ResolutionRejectedError: If the result was rejected.
        """
        if self.is_rejected:
            raise ResolutionRejectedError(self, message)
        return self.output

    def value_or(self, default: Any) -> Any:
        """Return the accepted output, or default if rejected."""
        return self.output if self.is_accepted else default

    @property
    def attempted_strategies(self) -> list[str | None]:
        """Strategy identities of the failed attempts, in attempt order."""
        return [tracer.strategy for tracer in self.tracers]

    def summary(self) -> str:
        """One-line description of the result without its tracers."""
        if self.is_accepted:
            return f"ResolutionResult: accepted, accepted object: {reprlib.repr(self.output)}"
        count = len(self.tracers)
        return (
            f"ResolutionResult: rejected, object: {reprlib.repr(self.original_input)}, "
            f"{count} failed attempt{'' if count == 1 else 's'}"
        )

    def render(self) -> str:
        """Render the result for humans.

        Rejected results echo the input once and then render tracers in
        reverse attempt order, so the most recent failure comes first.
        """
        if self.is_accepted:
            return f"ResolutionResult: accepted, accepted object: {self.output!r}"

        lines = [
            f"ResolutionResult: rejected, object: {self.original_input!r}, "
            f"accepting tracer stack: "
        ]
        lines.extend(tracer.render() for tracer in reversed(self.tracers))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


__all__ = ["ResolutionResult", "ResolutionStatus"]
