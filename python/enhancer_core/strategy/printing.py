"""Printing strategies.

Printing turns a call result into display text. Strategies are looked up by
the runtime class of the value being printed and always produce a ``str``.
Composite printers call ``print_nested`` on their elements, which runs the
same engine against the same registry.

Example:
    >>> class PercentPrintingStrategy(BasePrintingStrategy[float]):
    ...     acceptable_type = float
    ...
    ...     def print_output(self, output, registry):
    ...         return f"{output:.0%}"
    ...
    >>> printer = OutputPrinter.from_strategies([PercentPrintingStrategy()])
    >>> printer.print(0.25).value
    '25%'
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from ..capability import Strategizable, object_type
from ..engine import StrategyResolutionEngine, resolve
from ..registry import StrategyRegistry
from ..result import ResolutionResult

Output = TypeVar("Output")

PrintingRegistry = Mapping[type, Sequence["BasePrintingStrategy[Any]"]]


class BasePrintingStrategy(Strategizable[str], Generic[Output]):
    """Abstract base class for printing strategies.

    Subclasses set ``acceptable_type`` and implement ``print_output``.
    """

    @abstractmethod
    def print_output(self, output: Any, registry: PrintingRegistry) -> str:
        """Render a value as display text.

        Args:
            output: The value to print.
            registry: Full registry, for printing nested elements.

        Returns:
            The printed text.
        """
        ...

    def accept(self, type_descriptor: Any, value: Any, registry: PrintingRegistry) -> str:
        text = self.print_output(value, registry)
        if not isinstance(text, str):
            raise TypeError(
                f"{self.name}.print_output() must return str, got {type(text).__name__}"
            )
        return text

    def print_nested(self, value: Any, registry: PrintingRegistry) -> str:
        """Print a nested value (e.g. a list element) with the same registry.

        Raises:
            ResolutionRejectedError: If no strategy can print the element.
        """
        result = print_output(registry, value)
        return result.unwrap(result.summary())


def print_output(registry: PrintingRegistry, value: Any) -> ResolutionResult:
    """Print a value using the strategies registered for its runtime class.

    Args:
        registry: Printing registry.
        value: The value to print.

    Returns:
        ResolutionResult with the printed text or the rejection trace.
    """
    return resolve(registry, object_type(value), value)


class OutputPrinter(StrategyResolutionEngine[BasePrintingStrategy[Any]]):
    """Printing engine bound to a frozen registry."""

    @classmethod
    def from_strategies(
        cls,
        strategies: Iterable[BasePrintingStrategy[Any]] | None = None,
        include_defaults: bool = True,
    ) -> OutputPrinter:
        """Build a printer from user strategies plus the built-in defaults."""
        registry: StrategyRegistry[BasePrintingStrategy[Any]] = StrategyRegistry(
            strategies or ()
        )
        if include_defaults:
            from .defaults import default_printing_strategies

            registry = registry.merged(default_printing_strategies())
        return cls(registry)

    def print(self, value: Any) -> ResolutionResult:
        """Print a value (see module-level print_output)."""
        return print_output(self.registry, value)


__all__ = [
    "BasePrintingStrategy",
    "OutputPrinter",
    "print_output",
]
