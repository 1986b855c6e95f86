"""Strategy variants built on the resolution engine.

- Parameter acceptance: raw external value + declared type -> argument
- Printing: call result -> display text

Custom strategies extend BaseParameterAcceptStrategy or
BasePrintingStrategy, set ``acceptable_type`` and ``priority``, and raise
any exception to decline a value.
"""

from __future__ import annotations

from .defaults import (
    DEFAULT_STRATEGY_PRIORITY,
    default_parameter_strategies,
    default_printing_strategies,
)
from .parameter import BaseParameterAcceptStrategy, ParameterAcceptor, accept_parameter
from .printing import BasePrintingStrategy, OutputPrinter, print_output

__all__ = [
    # Parameter acceptance
    "BaseParameterAcceptStrategy",
    "ParameterAcceptor",
    "accept_parameter",
    # Printing
    "BasePrintingStrategy",
    "OutputPrinter",
    "print_output",
    # Built-ins
    "DEFAULT_STRATEGY_PRIORITY",
    "default_parameter_strategies",
    "default_printing_strategies",
]
