"""
Enhancer Core

This package provides a pluggable, priority-ordered strategy resolution
engine and the enhancer built on it: raw external input is accepted as
typed call arguments, a payload callable is invoked, and its result is
printed back as text. Every failed strategy attempt is kept as a chained
diagnostic so rejections explain themselves.

Example:
    >>> import enhancer_core
    >>> acceptor = enhancer_core.ParameterAcceptor.from_strategies()
    >>> acceptor.accept(list[int], [1, "2", 3.0]).value
    [1, 2, 3]

    >>> # Rejection is a value, not an exception
    >>> result = acceptor.accept(int, "abc")
    >>> result.is_rejected
    True
    >>> print(result.render())  # most recent failure first

    >>> # Custom strategies (lower priority = tried first)
    >>> from enhancer_core import BaseParameterAcceptStrategy
    >>> class HexIntegerStrategy(BaseParameterAcceptStrategy[int]):
    ...     acceptable_type = int
    ...     def accept_parameter(self, value, type_descriptor, registry):
    ...         return int(value, 16)

    >>> # Run a payload against line-based input
    >>> from enhancer_core import Enhancer, EnhancerConfig, StringInputProvider
    >>> def add(a: int, b: int) -> int:
    ...     return a + b
    >>> config = EnhancerConfig(payload=add, input_provider=StringInputProvider("1\\n2\\n"))
    >>> Enhancer(config).run()
    ['3']
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _package_version

# Input/output adapters
from enhancer_core.adapters import (
    BufferOutputConsumer,
    ConsoleInputProvider,
    ConsoleOutputConsumer,
    FileInputProvider,
    FileOutputConsumer,
    HttpInputProvider,
    InputProvider,
    OutputConsumer,
    StringInputProvider,
)

# Capability resolution protocol
from enhancer_core.capability import (
    NULL_TYPE,
    UNIVERSAL_TYPE,
    Strategizable,
    find_strategy_set,
    object_type,
)

# Configuration
from enhancer_core.config import EnhancerConfig

# Enhancer run loop
from enhancer_core.enhancer import Enhancer, ProxyPoints

# Resolution engine
from enhancer_core.engine import StrategyResolutionEngine, resolve

# Event bridge
from enhancer_core.event_bridge import EventBridge, EventNames

# Exceptions
from enhancer_core.exceptions import (
    ConfigurationError,
    EnhancerError,
    InputExhaustedError,
    PreconditionViolationError,
    ResolutionRejectedError,
    ResolutionStateError,
    StrategySetNotFoundError,
    StrategyStubError,
    TypeResolutionError,
)

# Extension-point interception
from enhancer_core.interception import (
    InterceptorRegistry,
    ProxyPointInterceptor,
    ProxyPointParameterView,
)

# Logging
from enhancer_core.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)

# Ordering
from enhancer_core.ordering import SortDirection, asc_sort, desc_sort, sort_by_order

# Registry and results
from enhancer_core.registry import StrategyRegistry
from enhancer_core.result import ResolutionResult, ResolutionStatus

# Strategy variants
from enhancer_core.strategy import (
    DEFAULT_STRATEGY_PRIORITY,
    BaseParameterAcceptStrategy,
    BasePrintingStrategy,
    OutputPrinter,
    ParameterAcceptor,
    accept_parameter,
    default_parameter_strategies,
    default_printing_strategies,
    print_output,
)
from enhancer_core.tracer import StrategyExceptionTracer

# Type resolution
from enhancer_core.type_resolution import TypeKind, classify, element_type, raw_type
from enhancer_core.types import EnhancerLogLevel, LogContext

try:
    __version__ = _package_version("enhancer-core")
except PackageNotFoundError:
    __version__ = "0.0.0"


def version() -> str:
    """Return the installed package version."""
    return __version__


__all__ = [
    # Version info
    "__version__",
    "version",
    # Ordering
    "SortDirection",
    "sort_by_order",
    "asc_sort",
    "desc_sort",
    # Type resolution
    "TypeKind",
    "classify",
    "raw_type",
    "element_type",
    # Capability resolution
    "Strategizable",
    "UNIVERSAL_TYPE",
    "NULL_TYPE",
    "object_type",
    "find_strategy_set",
    # Registry and engine
    "StrategyRegistry",
    "StrategyResolutionEngine",
    "resolve",
    # Results and diagnostics
    "ResolutionResult",
    "ResolutionStatus",
    "StrategyExceptionTracer",
    # Strategy variants
    "BaseParameterAcceptStrategy",
    "ParameterAcceptor",
    "accept_parameter",
    "BasePrintingStrategy",
    "OutputPrinter",
    "print_output",
    "DEFAULT_STRATEGY_PRIORITY",
    "default_parameter_strategies",
    "default_printing_strategies",
    # Interception
    "ProxyPointInterceptor",
    "ProxyPointParameterView",
    "InterceptorRegistry",
    # Enhancer
    "Enhancer",
    "EnhancerConfig",
    "ProxyPoints",
    # Adapters
    "InputProvider",
    "FileInputProvider",
    "StringInputProvider",
    "ConsoleInputProvider",
    "HttpInputProvider",
    "OutputConsumer",
    "FileOutputConsumer",
    "ConsoleOutputConsumer",
    "BufferOutputConsumer",
    # Events
    "EventBridge",
    "EventNames",
    # Logging
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    # Types
    "EnhancerLogLevel",
    "LogContext",
    # Exceptions
    "EnhancerError",
    "PreconditionViolationError",
    "TypeResolutionError",
    "StrategySetNotFoundError",
    "StrategyStubError",
    "ResolutionStateError",
    "ResolutionRejectedError",
    "ConfigurationError",
    "InputExhaustedError",
]
