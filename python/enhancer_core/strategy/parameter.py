"""Parameter acceptance strategies.

Parameter acceptance turns an already-decoded external value (parsed text,
JSON scalars and lists...) into a value suitable to pass as an argument of a
declared type. Strategies are looked up by the raw class of the *target*
type, so ``list[int]`` and ``list[str]`` both reach the strategies
registered for ``list``; the full descriptor is passed on so strategies can
resolve element types with ``accept_nested``.

Example:
    >>> class HexIntegerStrategy(BaseParameterAcceptStrategy[int]):
    ...     acceptable_type = int
    ...     priority = 0
    ...
    ...     def accept_parameter(self, value, type_descriptor, registry):
    ...         return int(value, 16)
    ...
    >>> acceptor = ParameterAcceptor.from_strategies([HexIntegerStrategy()])
    >>> acceptor.accept(int, "ff").value
    255
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar, get_args

from ..capability import Strategizable
from ..engine import StrategyResolutionEngine, resolve
from ..registry import StrategyRegistry
from ..result import ResolutionResult
from ..type_resolution import NoneType, TypeKind, classify

Parameter = TypeVar("Parameter")

ParameterRegistry = Mapping[type, Sequence["BaseParameterAcceptStrategy[Any]"]]


class BaseParameterAcceptStrategy(Strategizable[Parameter]):
    """Abstract base class for parameter acceptance strategies.

    Subclasses set ``acceptable_type`` (and optionally ``priority``) and
    implement ``accept_parameter``. Raising any exception declines the value;
    the engine records it and moves on to the next strategy.

    For ``Optional[X]`` targets, ``None`` is accepted before the subclass is
    consulted and any other value is passed on with ``X`` as its type.
    """

    @abstractmethod
    def accept_parameter(
        self,
        value: Any,
        type_descriptor: Any,
        registry: ParameterRegistry,
    ) -> Parameter:
        """Convert a raw value into a parameter of the target type.

        Args:
            value: The decoded external value.
            type_descriptor: The declared parameter type.
            registry: Full registry, for nested resolution.

        Returns:
            The accepted parameter.

        Raises:
            Any exception to decline the value.
        """
        ...

    def accept(self, type_descriptor: Any, value: Any, registry: ParameterRegistry) -> Parameter:
        if classify(type_descriptor) is TypeKind.OPTIONAL:
            if value is None:
                return None  # type: ignore[return-value]
            (type_descriptor,) = [arg for arg in get_args(type_descriptor) if arg is not NoneType]
        return self.accept_parameter(value, type_descriptor, registry)

    def accept_nested(self, type_descriptor: Any, value: Any, registry: ParameterRegistry) -> Any:
        """Accept a nested value (e.g. a list element) with the same registry.

        Raises:
            ResolutionRejectedError: If the nested value is rejected, so that
                the outer attempt fails with the nested diagnostic as cause.
                Its message is the one-line summary; the nested tracers are
                rendered once by the outer tracer.
        """
        result = resolve(registry, type_descriptor, value)
        return result.unwrap(result.summary())


def accept_parameter(registry: ParameterRegistry, type_descriptor: Any, value: Any) -> ResolutionResult:
    """Accept a value for a declared parameter type.

    Args:
        registry: Parameter acceptance registry.
        type_descriptor: The declared parameter type.
        value: The decoded external value.

    Returns:
        ResolutionResult with the accepted parameter or the rejection trace.
    """
    return resolve(registry, type_descriptor, value)


class ParameterAcceptor(StrategyResolutionEngine[BaseParameterAcceptStrategy[Any]]):
    """Parameter acceptance engine bound to a frozen registry."""

    @classmethod
    def from_strategies(
        cls,
        strategies: Iterable[BaseParameterAcceptStrategy[Any]] | None = None,
        include_defaults: bool = True,
    ) -> ParameterAcceptor:
        """Build an acceptor from user strategies plus the built-in defaults.

        User strategies are registered first, so on equal priority they are
        tried before the defaults.
        """
        registry: StrategyRegistry[BaseParameterAcceptStrategy[Any]] = StrategyRegistry(
            strategies or ()
        )
        if include_defaults:
            from .defaults import default_parameter_strategies

            registry = registry.merged(default_parameter_strategies())
        return cls(registry)

    def accept(self, type_descriptor: Any, value: Any) -> ResolutionResult:
        """Accept a value for a declared parameter type."""
        return self.resolve(type_descriptor, value)


__all__ = [
    "BaseParameterAcceptStrategy",
    "ParameterAcceptor",
    "accept_parameter",
]
