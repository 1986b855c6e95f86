"""Enhancer: read inputs, accept parameters, invoke the payload, print results.

The Enhancer wires the two strategy variants together around a payload
callable. One round works like this:

1. Read one input line per positional parameter of the payload
2. Decode each line as JSON (raw text if it is not valid JSON)
3. Accept each value for the declared parameter type   [parameter.accept]
4. Invoke the payload with the accepted arguments      [payload.invoke]
5. Print the result                                     [output.print]
6. Hand the printed text to the output consumer

Each bracketed step runs through the proxy point of that name, so
interceptors can observe or rewrite arguments and results. Rounds repeat
until the input is exhausted.

Example:
    >>> def two_sum(nums: list[int], target: int) -> list[int]:
    ...     ...
    >>> config = EnhancerConfig(
    ...     payload=two_sum,
    ...     input_provider=StringInputProvider("[2,7,11,15]\\n9\\n"),
    ...     output_consumer=BufferOutputConsumer(),
    ... )
    >>> Enhancer(config).run()
    ['[0,1]']
"""

from __future__ import annotations

import inspect
import json
import typing
from collections.abc import Callable
from typing import Any

from .adapters import ConsoleInputProvider, ConsoleOutputConsumer, InputProvider, OutputConsumer
from .config import EnhancerConfig
from .exceptions import ConfigurationError, InputExhaustedError, ResolutionRejectedError
from .interception import InterceptorRegistry
from .logging import configure_logging, log_error, log_info
from .strategy.parameter import ParameterAcceptor
from .strategy.printing import OutputPrinter
from .types import LogContext


class ProxyPoints:
    """Names of the proxy points an Enhancer invokes.

    Attributes:
        PARAMETER_ACCEPT: Accepting one parameter; args (type, value).
        PAYLOAD_INVOKE: Calling the payload; args are the accepted parameters.
        OUTPUT_PRINT: Printing the payload result; args (value,).
    """

    PARAMETER_ACCEPT = "parameter.accept"
    PAYLOAD_INVOKE = "payload.invoke"
    OUTPUT_PRINT = "output.print"


_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class Enhancer:
    """Runs a payload callable against decoded inputs.

    Registries are built and frozen once, in the constructor, from the
    configuration. The Enhancer itself is handed to every interceptor hook.
    """

    def __init__(self, config: EnhancerConfig | None = None) -> None:
        """Initialize the Enhancer.

        Args:
            config: Enhancer configuration; defaults to an empty one.
        """
        self._config = config or EnhancerConfig()
        configure_logging(self._config.log_level)

        include_defaults = self._config.include_default_strategies
        self._acceptor = ParameterAcceptor.from_strategies(
            self._config.parameter_accept_strategies, include_defaults
        )
        self._printer = OutputPrinter.from_strategies(
            self._config.printing_strategies, include_defaults
        )
        self._interceptors = InterceptorRegistry(self._config.interceptors)
        self._input_provider: InputProvider = (
            self._config.input_provider or ConsoleInputProvider()
        )
        self._output_consumer: OutputConsumer = (
            self._config.output_consumer or ConsoleOutputConsumer()
        )

    @property
    def config(self) -> EnhancerConfig:
        return self._config

    @property
    def acceptor(self) -> ParameterAcceptor:
        return self._acceptor

    @property
    def printer(self) -> OutputPrinter:
        return self._printer

    @property
    def interceptors(self) -> InterceptorRegistry:
        return self._interceptors

    @staticmethod
    def parameter_types(payload: Callable[..., Any]) -> list[Any]:
        """Return the declared types of the payload's positional parameters.

        Unannotated parameters are typed as ``Any``.

        Raises:
            ConfigurationError: If the annotations cannot be evaluated.
        """
        try:
            hints = typing.get_type_hints(payload)
        except Exception as e:
            raise ConfigurationError(f"Cannot read parameter types of {payload!r}: {e}") from e

        return [
            hints.get(parameter.name, Any)
            for parameter in inspect.signature(payload).parameters.values()
            if parameter.kind in _POSITIONAL_KINDS
        ]

    @staticmethod
    def decode(line: str) -> Any:
        """Decode an input line as JSON, or return it unchanged."""
        try:
            return json.loads(line)
        except json.JSONDecodeError:
            return line

    def accept_parameter(self, type_descriptor: Any, value: Any) -> Any:
        """Accept one parameter through the ``parameter.accept`` proxy point.

        Raises:
            ResolutionRejectedError: If no strategy accepts the value.
        """
        result = self._interceptors.invoke(
            ProxyPoints.PARAMETER_ACCEPT,
            self._acceptor.accept,
            (type_descriptor, value),
            enhancer=self,
        )
        if result.is_rejected:
            log_error(
                f"Parameter cannot be accepted:\n{result.render()}",
                LogContext(proxy_point=ProxyPoints.PARAMETER_ACCEPT, target_type=repr(type_descriptor)),
            )
            raise ResolutionRejectedError(result)
        return result.value

    def print_output(self, value: Any) -> str:
        """Print a value through the ``output.print`` proxy point.

        Raises:
            ResolutionRejectedError: If no strategy can print the value.
        """
        result = self._interceptors.invoke(
            ProxyPoints.OUTPUT_PRINT, self._printer.print, (value,), enhancer=self
        )
        if result.is_rejected:
            log_error(
                f"Output cannot be printed:\n{result.render()}",
                LogContext(proxy_point=ProxyPoints.OUTPUT_PRINT),
            )
            raise ResolutionRejectedError(result)
        return result.value

    def invoke_payload(self, payload: Callable[..., Any], arguments: list[Any]) -> str:
        """Invoke the payload, print its result and hand it to the consumer."""
        output = self._interceptors.invoke(
            ProxyPoints.PAYLOAD_INVOKE, payload, arguments, enhancer=self
        )
        text = self.print_output(output)
        self._output_consumer.consume(text)
        return text

    def run_once(self, payload: Callable[..., Any]) -> str | None:
        """Run one round: read, accept, invoke, print.

        Returns:
            The printed output, or None if the input was already exhausted.

        Raises:
            InputExhaustedError: If the input ends in the middle of a round.
            ResolutionRejectedError: If a parameter or the result is rejected.
        """
        types = self.parameter_types(payload)
        arguments: list[Any] = []

        for index, type_descriptor in enumerate(types):
            line = self._input_provider.provide_next_input()
            if line is None:
                if index == 0:
                    return None
                raise InputExhaustedError(
                    f"Input ended after {index} of {len(types)} parameters"
                )
            arguments.append(self.accept_parameter(type_descriptor, self.decode(line)))

        return self.invoke_payload(payload, arguments)

    def run(self, payload: Callable[..., Any] | None = None) -> list[str]:
        """Run rounds until the input is exhausted.

        A payload without positional parameters runs exactly once.

        Args:
            payload: Callable to run; defaults to the configured payload.

        Returns:
            The printed outputs, in order.

        Raises:
            ConfigurationError: If no payload is given or configured.
        """
        payload = payload or self._config.payload
        if payload is None:
            raise ConfigurationError("No payload to run")

        name = getattr(payload, "__qualname__", repr(payload))
        log_info(f"Enhancer: running {name}", LogContext(operation="run"))

        if not self.parameter_types(payload):
            return [self.invoke_payload(payload, [])]

        outputs: list[str] = []
        while (text := self.run_once(payload)) is not None:
            outputs.append(text)

        log_info(f"Enhancer: {name} finished", {"rounds": len(outputs)})
        return outputs

    def close(self) -> None:
        """Close the input provider and output consumer."""
        self._input_provider.close()
        self._output_consumer.close()

    def __enter__(self) -> Enhancer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["Enhancer", "ProxyPoints"]
