"""Built-in parameter acceptance and printing strategies.

These strategies are registered after any user strategies and use
priority 100, so a user strategy for the same type (default priority 0) is
always tried first.

Parameter acceptance (target type -> strategy):
- int: ints (not bools), integral floats, decimal text
- float: ints, floats, numeric text
- bool: bools, "true"/"false" text
- str: strings only, no coercion
- list / tuple / dict: element-wise nested acceptance
- NoneType: None only
- object: pass-through (universal bucket)

Printing (value class -> text):
- None -> ``null``, bools -> ``true``/``false``, strings -> JSON quoted,
  numbers -> ``str()``, lists/tuples -> ``[a,b]``, dicts -> ``{k:v}``,
  anything else -> ``str()``
"""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, get_args

from ..type_resolution import NoneType, element_type
from .parameter import BaseParameterAcceptStrategy, ParameterRegistry
from .printing import BasePrintingStrategy, PrintingRegistry

DEFAULT_STRATEGY_PRIORITY = 100

_BOOL_TEXT = {"true": True, "false": False}

# (id, thread) of containers currently being printed
_PRINTING: set[tuple[int, int]] = set()


def _require_sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"Expected a sequence, got {type(value).__name__}")
    return value


@contextmanager
def _cycle_guard(container: Any) -> Iterator[bool]:
    """Yield True if ``container`` is already being printed on this thread."""
    key = (id(container), threading.get_ident())
    if key in _PRINTING:
        yield True
        return
    _PRINTING.add(key)
    try:
        yield False
    finally:
        _PRINTING.discard(key)


# =============================================================================
# Parameter acceptance
# =============================================================================


class IntegerAcceptStrategy(BaseParameterAcceptStrategy[int]):
    """Accept ints, integral floats and decimal text as int."""

    acceptable_type = int
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> int:
        if isinstance(value, bool):
            raise TypeError("bool is not accepted as int")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            return int(value.strip())
        raise TypeError(f"Cannot accept {type(value).__name__} as int")


class FloatAcceptStrategy(BaseParameterAcceptStrategy[float]):
    acceptable_type = float
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> float:
        if isinstance(value, bool):
            raise TypeError("bool is not accepted as float")
        if isinstance(value, (int, float, str)):
            return float(value)
        raise TypeError(f"Cannot accept {type(value).__name__} as float")


class BooleanAcceptStrategy(BaseParameterAcceptStrategy[bool]):
    acceptable_type = bool
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _BOOL_TEXT:
            return _BOOL_TEXT[value.strip().lower()]
        raise ValueError(f"Cannot accept {value!r} as bool")


class StringAcceptStrategy(BaseParameterAcceptStrategy[str]):
    acceptable_type = str
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> str:
        if not isinstance(value, str):
            raise TypeError(f"Cannot accept {type(value).__name__} as str")
        return value


class NoneAcceptStrategy(BaseParameterAcceptStrategy[None]):
    acceptable_type = NoneType
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> None:
        if value is not None:
            raise TypeError(f"Cannot accept {value!r} as None")
        return None


class ListAcceptStrategy(BaseParameterAcceptStrategy[list]):
    """Accept a sequence as a list, accepting each element for the element type."""

    acceptable_type = list
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> list:
        items = _require_sequence(value)
        item_type = element_type(type_descriptor)
        return [self.accept_nested(item_type, item, registry) for item in items]


class TupleAcceptStrategy(BaseParameterAcceptStrategy[tuple]):
    """Accept a sequence as a tuple.

    ``tuple[X, ...]`` accepts every element as X; fixed-shape tuples like
    ``tuple[int, str]`` require a matching length and accept positionally.
    """

    acceptable_type = tuple
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> tuple:
        items = _require_sequence(value)
        args = get_args(type_descriptor)

        if args and not (len(args) == 2 and args[1] is Ellipsis):
            if len(args) != len(items):
                raise ValueError(f"Expected {len(args)} elements, got {len(items)}")
            return tuple(
                self.accept_nested(arg, item, registry) for arg, item in zip(args, items)
            )

        item_type = element_type(type_descriptor)
        return tuple(self.accept_nested(item_type, item, registry) for item in items)


class DictAcceptStrategy(BaseParameterAcceptStrategy[dict]):
    """Accept a mapping as a dict, accepting keys and values for ``dict[K, V]``."""

    acceptable_type = dict
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> dict:
        if not isinstance(value, Mapping):
            raise TypeError(f"Cannot accept {type(value).__name__} as dict")

        args = get_args(type_descriptor)
        if len(args) != 2:
            return dict(value)

        key_type, value_type = args
        return {
            self.accept_nested(key_type, key, registry): self.accept_nested(value_type, item, registry)
            for key, item in value.items()
        }


class ObjectAcceptStrategy(BaseParameterAcceptStrategy[Any]):
    """Universal fallback: pass the value through unchanged."""

    acceptable_type = object
    priority = DEFAULT_STRATEGY_PRIORITY

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: ParameterRegistry) -> Any:
        return value


# =============================================================================
# Printing
# =============================================================================


class NonePrintingStrategy(BasePrintingStrategy[None]):
    acceptable_type = NoneType
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        return "null"


class BooleanPrintingStrategy(BasePrintingStrategy[bool]):
    acceptable_type = bool
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        return "true" if output else "false"


class StringPrintingStrategy(BasePrintingStrategy[str]):
    acceptable_type = str
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        return json.dumps(output, ensure_ascii=False)


class IntegerPrintingStrategy(BasePrintingStrategy[int]):
    acceptable_type = int
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        return str(output)


class FloatPrintingStrategy(BasePrintingStrategy[float]):
    acceptable_type = float
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        return repr(output)


class ListPrintingStrategy(BasePrintingStrategy[list]):
    """Print ``[a,b,c]``, printing each element with the same registry.

    A container that contains itself prints as ``[...]`` where it recurs.
    """

    acceptable_type = list
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        with _cycle_guard(output) as recursive:
            if recursive:
                return "[...]"
            return "[" + ",".join(self.print_nested(item, registry) for item in output) + "]"


class TuplePrintingStrategy(ListPrintingStrategy):
    acceptable_type = tuple


class DictPrintingStrategy(BasePrintingStrategy[dict]):
    acceptable_type = dict
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        with _cycle_guard(output) as recursive:
            if recursive:
                return "{...}"
            entries = (
                f"{self.print_nested(key, registry)}:{self.print_nested(item, registry)}"
                for key, item in output.items()
            )
            return "{" + ",".join(entries) + "}"


class ObjectPrintingStrategy(BasePrintingStrategy[Any]):
    """Universal fallback: ``str(value)``."""

    acceptable_type = object
    priority = DEFAULT_STRATEGY_PRIORITY

    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        return str(output)


def default_parameter_strategies() -> list[BaseParameterAcceptStrategy[Any]]:
    """Return fresh instances of the built-in parameter acceptance strategies."""
    return [
        IntegerAcceptStrategy(),
        FloatAcceptStrategy(),
        BooleanAcceptStrategy(),
        StringAcceptStrategy(),
        NoneAcceptStrategy(),
        ListAcceptStrategy(),
        TupleAcceptStrategy(),
        DictAcceptStrategy(),
        ObjectAcceptStrategy(),
    ]


def default_printing_strategies() -> list[BasePrintingStrategy[Any]]:
    """Return fresh instances of the built-in printing strategies."""
    return [
        NonePrintingStrategy(),
        BooleanPrintingStrategy(),
        StringPrintingStrategy(),
        IntegerPrintingStrategy(),
        FloatPrintingStrategy(),
        ListPrintingStrategy(),
        TuplePrintingStrategy(),
        DictPrintingStrategy(),
        ObjectPrintingStrategy(),
    ]


__all__ = [
    "DEFAULT_STRATEGY_PRIORITY",
    "IntegerAcceptStrategy",
    "FloatAcceptStrategy",
    "BooleanAcceptStrategy",
    "StringAcceptStrategy",
    "NoneAcceptStrategy",
    "ListAcceptStrategy",
    "TupleAcceptStrategy",
    "DictAcceptStrategy",
    "ObjectAcceptStrategy",
    "NonePrintingStrategy",
    "BooleanPrintingStrategy",
    "StringPrintingStrategy",
    "IntegerPrintingStrategy",
    "FloatPrintingStrategy",
    "ListPrintingStrategy",
    "TuplePrintingStrategy",
    "DictPrintingStrategy",
    "ObjectPrintingStrategy",
    "default_parameter_strategies",
    "default_printing_strategies",
]
