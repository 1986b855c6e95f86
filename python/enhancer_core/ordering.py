"""Priority ordering for strategies and interceptors.

Anything exposing an integer ``priority`` can be ordered here. Lower
priority values come first in ascending order. Sorting is always stable,
so entities with equal priority keep their registration order in both
directions.

Example:
    >>> from enhancer_core.ordering import SortDirection, sort_by_order
    >>>
    >>> ordered = sort_by_order(strategies)
    >>> reverse = sort_by_order(strategies, SortDirection.DESC)
    >>>
    >>> # Or reuse the keys directly
    >>> strategies.sort(key=ASC_ORDER_KEY)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from operator import attrgetter
from typing import Any, Protocol, TypeVar, runtime_checkable

from .exceptions import assert_not_none


@runtime_checkable
class Ordered(Protocol):
    """Protocol for entities that carry a priority (lower = tried first)."""

    @property
    def priority(self) -> int: ...


O = TypeVar("O", bound=Ordered)


class SortDirection(str, Enum):
    """Sort direction for ordered entities."""

    ASC = "asc"
    DESC = "desc"


def _descending_priority(entity: Ordered) -> int:
    # Negated key instead of reverse=True keeps ties in registration order.
    return -entity.priority


ASC_ORDER_KEY: Callable[[Any], int] = attrgetter("priority")
DESC_ORDER_KEY: Callable[[Any], int] = _descending_priority


def compare_asc(left: Ordered, right: Ordered) -> int:
    """Three-way comparison for ascending order (``functools.cmp_to_key``)."""
    return (left.priority > right.priority) - (left.priority < right.priority)


def compare_desc(left: Ordered, right: Ordered) -> int:
    """Three-way comparison for descending order."""
    return compare_asc(right, left)


_KEYS: dict[SortDirection, Callable[[Any], int]] = {
    SortDirection.ASC: ASC_ORDER_KEY,
    SortDirection.DESC: DESC_ORDER_KEY,
}


def order_key(direction: SortDirection | str = SortDirection.ASC) -> Callable[[Any], int]:
    """Return the reusable sort key for a direction."""
    return _KEYS[SortDirection(direction)]


def sort_by_order(
    entities: Iterable[O] | None,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[O]:
    """Return a new stably sorted list of ordered entities.

    Args:
        entities: Priority-bearing entities.
        direction: ASC (lower priority first) or DESC.

    Returns:
        A new list in the requested order.

    Raises:
        PreconditionViolationError: If entities is None.
    """
    assert_not_none(entities, "The entities to sort cannot be None.")
    return sorted(entities, key=order_key(direction))  # type: ignore[arg-type]


def asc_sort(entities: list[O] | None) -> None:
    """Sort a list in place in ascending priority order."""
    assert_not_none(entities, "The list cannot be None.")
    entities.sort(key=ASC_ORDER_KEY)  # type: ignore[union-attr]


def desc_sort(entities: list[O] | None) -> None:
    """Sort a list in place in descending priority order."""
    assert_not_none(entities, "The list cannot be None.")
    entities.sort(key=DESC_ORDER_KEY)  # type: ignore[union-attr]


__all__ = [
    "Ordered",
    "SortDirection",
    "ASC_ORDER_KEY",
    "DESC_ORDER_KEY",
    "compare_asc",
    "compare_desc",
    "order_key",
    "sort_by_order",
    "asc_sort",
    "desc_sort",
]
