"""Strategy resolution engine: priority-ordered, first-match-wins.

The engine orchestrates resolution by trying the strategies registered for
a target type in priority order until one accepts the value.

Resolution Contract:
1. Reduce the target type descriptor to its raw class
2. Look up the strategy set for that class (falling back to the universal
   bucket); a failed lookup leaves one tracer with no strategy identity
3. Call each strategy in order; the first one that returns without raising
   wins and no further strategies are tried
4. Every exception raised by a strategy is captured as a tracer, never
   propagated; if nobody accepts, the result is REJECTED with all tracers

Only precondition violations (``None`` registry or type descriptor) raise.

Usage:
    # One-off resolution
    result = resolve(registry, list[int], [1, "2", 3])

    # Bound to a frozen registry
    engine = StrategyResolutionEngine(registry)
    result = engine.resolve(int, "42")
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from .capability import Strategizable, find_strategy_set
from .event_bridge import EventNames, publish_if_active
from .exceptions import assert_not_none
from .logging import log_debug, log_trace
from .result import ResolutionResult
from .tracer import StrategyExceptionTracer
from .type_resolution import raw_type

S = TypeVar("S", bound=Strategizable[Any])


def resolve(
    registry: Mapping[type, Sequence[S]],
    type_descriptor: Any,
    value: Any,
) -> ResolutionResult:
    """Resolve a value for a target type against a strategy registry.

    Args:
        registry: Mapping of raw class to priority-ordered strategies.
        type_descriptor: Target type descriptor (class or typing construct).
        value: The value to resolve.

    Returns:
        ACCEPTED with the first successful output, or REJECTED with the
        original value and one tracer per failed attempt.

    Raises:
        PreconditionViolationError: If registry or type_descriptor is None.
    """
    assert_not_none(registry, "The strategy registry cannot be None.")
    assert_not_none(type_descriptor, "The type descriptor cannot be None.")

    tracers: list[StrategyExceptionTracer] = []

    try:
        strategies: Sequence[S] = find_strategy_set(raw_type(type_descriptor), registry)
    except Exception as e:
        log_trace(f"StrategyResolutionEngine: lookup failed for {type_descriptor!r}: {e}")
        tracers.append(StrategyExceptionTracer(None, e))
        strategies = ()

    for strategy in strategies:
        try:
            output = strategy.accept(type_descriptor, value, registry)
        except Exception as e:
            log_trace(
                f"StrategyResolutionEngine: '{strategy.name}' declined {value!r}",
                {"error_type": type(e).__name__},
            )
            tracers.append(StrategyExceptionTracer(strategy.name, e))
            continue

        log_debug(
            f"StrategyResolutionEngine: Resolved {value!r} via '{strategy.name}'",
            {"target_type": type_descriptor, "attempts": len(tracers) + 1},
        )
        result = ResolutionResult.accept(output, tracers)
        publish_if_active(EventNames.RESOLUTION_ACCEPTED, type_descriptor, result)
        return result

    log_debug(
        f"StrategyResolutionEngine: No strategy could accept {value!r}",
        {"target_type": type_descriptor, "attempts": len(tracers)},
    )
    result = ResolutionResult.reject(value, tracers)
    publish_if_active(EventNames.RESOLUTION_REJECTED, type_descriptor, result)
    return result


class StrategyResolutionEngine(Generic[S]):
    """Resolution engine bound to one frozen registry.

    Attributes:
        registry: Mapping of raw class to priority-ordered strategies.
    """

    def __init__(self, registry: Mapping[type, Sequence[S]]) -> None:
        """Bind the engine to a registry.

        Raises:
            PreconditionViolationError: If registry is None.
        """
        assert_not_none(registry, "The strategy registry cannot be None.")
        self._registry = registry

    @property
    def registry(self) -> Mapping[type, Sequence[S]]:
        """Return the bound registry."""
        return self._registry

    def resolve(self, type_descriptor: Any, value: Any) -> ResolutionResult:
        """Resolve a value for a target type (see module-level resolve)."""
        return resolve(self._registry, type_descriptor, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(registry={self._registry!r})"


__all__ = ["StrategyResolutionEngine", "resolve"]
