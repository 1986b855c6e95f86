"""Frozen, priority-ordered strategy registry.

The StrategyRegistry groups strategies by the raw class of their
``acceptable_type`` and orders each group by priority (lower = first, ties
in registration order). It is built once from a list of strategies and is
read-only afterwards, which is what lets any number of resolution calls
share it without locking.

Example:
    >>> registry = StrategyRegistry([IntegerStrategy(), FallbackStrategy()])
    >>> registry[int]
    (IntegerStrategy(acceptable_type=<class 'int'>, priority=0),)
    >>> registry.registered_types()
    [<class 'int'>, <class 'object'>]

Combining registries (e.g. user strategies ahead of the defaults) always
produces a new registry:

    >>> combined = user_registry.merged(default_registry)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from .capability import UNIVERSAL_TYPE, Strategizable
from .exceptions import PreconditionViolationError, assert_not_none
from .logging import log_debug
from .ordering import sort_by_order

S = TypeVar("S", bound=Strategizable[Any])


class StrategyRegistry(Mapping[type, tuple[S, ...]], Generic[S]):
    """Immutable mapping of raw class to priority-ordered strategies.

    Bucket membership and order are fixed at construction from each
    strategy's registry key and priority at that moment.

    Attributes:
        strategies: Every registered strategy, in registration order.
    """

    __slots__ = ("_buckets", "_strategies", "_frozen")

    def __init__(self, strategies: Iterable[S] | None = ()) -> None:
        """Build and freeze the registry.

        Args:
            strategies: Strategies to register.

        Raises:
            PreconditionViolationError: If strategies is None or contains
                something that is not a Strategizable.
        """
        assert_not_none(strategies, "The strategy list cannot be None.")

        collected: list[S] = []
        buckets: dict[type, list[S]] = {}
        for strategy in strategies:  # type: ignore[union-attr]
            if not isinstance(strategy, Strategizable):
                raise PreconditionViolationError(
                    f"Cannot register {strategy!r}: not a Strategizable"
                )
            collected.append(strategy)
            buckets.setdefault(strategy.registry_key, []).append(strategy)

        self._strategies: tuple[S, ...] = tuple(collected)
        self._buckets: Mapping[type, tuple[S, ...]] = MappingProxyType(
            {key: tuple(sort_by_order(bucket)) for key, bucket in buckets.items()}
        )
        self._frozen = True
        log_debug(
            "StrategyRegistry: frozen",
            {"strategies": len(self._strategies), "types": len(self._buckets)},
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__name__} is frozen; cannot set {name!r}")
        super().__setattr__(name, value)

    def __getitem__(self, key: type) -> tuple[S, ...]:
        return self._buckets[key]

    def __iter__(self) -> Iterator[type]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    @property
    def strategies(self) -> tuple[S, ...]:
        """Return all strategies in registration order."""
        return self._strategies

    @property
    def universal_strategies(self) -> tuple[S, ...]:
        """Return the catch-all bucket (empty if none registered)."""
        return self._buckets.get(UNIVERSAL_TYPE, ())

    def registered_types(self) -> list[type]:
        """Return the raw classes that have a bucket."""
        return list(self._buckets)

    def merged(self, other: Iterable[S]) -> StrategyRegistry[S]:
        """Return a new registry with ``other`` registered after this one.

        Args:
            other: Another registry or iterable of strategies.

        Returns:
            A new frozen registry; neither input is modified.
        """
        extra = other.strategies if isinstance(other, StrategyRegistry) else tuple(other)
        return type(self)(self._strategies + extra)

    def registry_info(self) -> list[dict[str, Any]]:
        """Get registry info for debugging.

        Returns:
            List of strategy info dicts in lookup order.
        """
        return [
            {
                "type": key.__qualname__,
                "strategy": strategy.name,
                "priority": strategy.priority,
            }
            for key, bucket in self._buckets.items()
            for strategy in bucket
        ]

    def __repr__(self) -> str:
        """Return a string representation of the registry."""
        types_ = ", ".join(key.__qualname__ for key in self._buckets)
        return f"{type(self).__name__}(types=[{types_}], strategies={len(self._strategies)})"


__all__ = ["StrategyRegistry"]
