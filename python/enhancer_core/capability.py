"""Capability resolution protocol shared by all strategy variants.

A strategy registry maps a raw runtime class to the ordered strategies that
accept it. Looking up a value works on exact classes only:

1. Compute ``object_type(value)``
2. Use the registry entry for that class if present
3. Otherwise fall back to the universal bucket (keyed by ``object``)
4. Otherwise fail with StrategySetNotFoundError

There is no MRO walk: a ``bool`` value does not find strategies registered
for ``int``. Subclass handling, if wanted, is a catch-all strategy's job.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar, get_origin

from .exceptions import StrategySetNotFoundError, StrategyStubError, assert_not_none
from .type_resolution import NoneType, is_type_descriptor, raw_type

UNIVERSAL_TYPE: type = object
"""Registry key of the catch-all bucket."""

NULL_TYPE: type = NoneType
"""Object type reported for a ``None`` value."""

S = TypeVar("S", bound="Strategizable[Any]")
Output = TypeVar("Output")

StrategyMap = Mapping[type, Sequence[S]]


def object_type(value: Any) -> type:
    """Get the lookup type of a value.

    Args:
        value: The value to be accepted. May itself be a class or a typing
            construct, in which case its raw type is used.

    Returns:
        NoneType for None, the class for a class, the raw type for a type
        descriptor, and ``type(value)`` for anything else.
    """
    if value is None:
        return NULL_TYPE
    if isinstance(value, type) and get_origin(value) is None:
        return value
    if is_type_descriptor(value):
        return raw_type(value)
    return type(value)


def find_strategy_set(value: Any, registry: StrategyMap[S]) -> Sequence[S]:
    """Find the most appropriate strategy set for a value.

    Args:
        value: The value (or type) to be accepted.
        registry: Mapping of raw class to priority-ordered strategies.

    Returns:
        The ordered strategies for the exact class, or the universal bucket.

    Raises:
        PreconditionViolationError: If registry is None.
        StrategySetNotFoundError: If no applicable set exists.
    """
    assert_not_none(registry, "The strategy registry cannot be None.")

    strategies = registry.get(object_type(value))
    if strategies is None:
        strategies = registry.get(UNIVERSAL_TYPE)
    if not strategies:
        raise StrategySetNotFoundError(
            f"Cannot find any appropriate accepted strategy set for the object: {value!r}"
        )
    return strategies


class Strategizable(ABC, Generic[Output]):
    """Base class for every resolution strategy.

    A strategy declares the type it accepts and a priority (lower = tried
    first), and implements ``accept``. Registries share instances across
    resolution calls and read ``priority`` and ``acceptable_type`` only
    when they are built: changing either on a registered strategy does not
    move it to another bucket or reorder its bucket.

    Class Attributes:
        acceptable_type: Type descriptor this strategy accepts. ``object``
            (or ``Any``) registers it in the universal bucket.
        priority: Resolution priority (lower = tried first, default 0).
    """

    acceptable_type: ClassVar[Any] = object
    priority: int = 0

    @property
    def name(self) -> str:
        """Fully-qualified strategy identity used in diagnostics."""
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    @property
    def registry_key(self) -> type:
        """Raw class this strategy is registered under."""
        return raw_type(self.acceptable_type)

    def object_type(self, value: Any) -> type:
        """Get the lookup type of a value (see module-level object_type)."""
        return object_type(value)

    def find_strategy_set(self, value: Any, registry: StrategyMap[S]) -> Sequence[S]:
        """Find the strategy set for a value (see module-level find_strategy_set)."""
        return find_strategy_set(value, registry)

    def accept(self, type_descriptor: Any, value: Any, registry: StrategyMap[Any]) -> Output:
        """Accept a value for a target type.

        Args:
            type_descriptor: Target type descriptor.
            value: The value to accept.
            registry: Full registry, available for nested resolution.

        Returns:
            The accepted output.

        Raises:
            StrategyStubError: Always, unless a variant overrides this method.
        """
        raise StrategyStubError(f"Stub! {self.name} does not implement accept()")

    def __repr__(self) -> str:
        """Return a string representation of the strategy."""
        return (
            f"{self.__class__.__name__}(acceptable_type={self.acceptable_type!r}, "
            f"priority={self.priority!r})"
        )


__all__ = [
    "UNIVERSAL_TYPE",
    "NULL_TYPE",
    "StrategyMap",
    "Strategizable",
    "object_type",
    "find_strategy_set",
]
