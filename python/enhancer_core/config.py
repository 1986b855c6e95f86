"""Enhancer configuration.

EnhancerConfig holds everything an Enhancer needs: strategy lists,
interceptors, input/output adapters, the payload callable and the log level.
It can be built in code or loaded from YAML, where strategies, interceptors
and the payload are given as dotted import paths.

YAML layout::

    log_level: info
    include_default_strategies: true
    payload: myapp.solutions.two_sum
    parameter_accept_strategies:
      - myapp.strategies.HexIntegerStrategy
      - class: myapp.strategies.BoundedIntegerStrategy
        config: {maximum: 100}
    printing_strategies: []
    interceptors:
      - myapp.hooks.TimingInterceptor
    input: {file: input.txt}      # or {text: "..."}, {url: ...}, console
    output: {file: output.txt}    # or console

The ``ENHANCER_LOG_LEVEL`` environment variable overrides ``log_level``.
"""

from __future__ import annotations

import importlib
import os
import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from .adapters import (
    ConsoleInputProvider,
    ConsoleOutputConsumer,
    FileInputProvider,
    FileOutputConsumer,
    HttpInputProvider,
    InputProvider,
    OutputConsumer,
    StringInputProvider,
)
from .exceptions import ConfigurationError
from .interception import ProxyPointInterceptor
from .logging import log_debug
from .strategy.parameter import BaseParameterAcceptStrategy
from .strategy.printing import BasePrintingStrategy
from .types import EnhancerLogLevel

LOG_LEVEL_ENV = "ENHANCER_LOG_LEVEL"

# module.path.ClassName: at least one dot, capitalized last component
CLASS_PATTERN = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)*\.[A-Z][a-zA-Z0-9_]*$"
)
OBJECT_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)+$")

_DOCUMENT_KEYS = frozenset(
    {
        "log_level",
        "include_default_strategies",
        "parameter_accept_strategies",
        "printing_strategies",
        "interceptors",
        "payload",
        "input",
        "output",
    }
)


class EnhancerConfig(BaseModel):
    """Configuration for an Enhancer.

    Every field is optional; an empty value disables that feature or falls
    back to the console.

    Example:
        >>> config = EnhancerConfig(
        ...     log_level="info",
        ...     parameter_accept_strategies=[HexIntegerStrategy()],
        ...     payload=two_sum,
        ... )
        >>> Enhancer(config).run()
    """

    log_level: EnhancerLogLevel = Field(
        default=EnhancerLogLevel.OFF,
        description="Enhancer log level (off, error, warning, info).",
    )
    parameter_accept_strategies: list[BaseParameterAcceptStrategy] = Field(
        default_factory=list,
        description="User parameter acceptance strategies.",
    )
    printing_strategies: list[BasePrintingStrategy] = Field(
        default_factory=list,
        description="User printing strategies.",
    )
    interceptors: list[ProxyPointInterceptor] = Field(
        default_factory=list,
        description="Proxy point interceptors.",
    )
    input_provider: InputProvider | None = Field(
        default=None,
        description="Input source. Console when not set.",
    )
    output_consumer: OutputConsumer | None = Field(
        default=None,
        description="Output sink. Console when not set.",
    )
    payload: Callable[..., Any] | None = Field(
        default=None,
        description="Callable whose parameters are read from the input.",
    )
    include_default_strategies: bool = Field(
        default=True,
        description="Register the built-in strategies after the user ones.",
    )

    model_config = {"extra": "forbid", "arbitrary_types_allowed": True}

    @model_validator(mode="before")
    @classmethod
    def _apply_env_log_level(cls, data: Any) -> Any:
        env_level = os.environ.get(LOG_LEVEL_ENV)
        if env_level and isinstance(data, dict):
            data = {**data, "log_level": env_level.strip().lower()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> EnhancerConfig:
        """Create an EnhancerConfig from a plain mapping of import paths.

        Args:
            data: Parsed configuration document.

        Returns:
            EnhancerConfig with all components loaded and instantiated.

        Raises:
            ConfigurationError: If the document has the wrong shape or a
                component cannot be imported or instantiated.
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}")

        unknown = set(data) - _DOCUMENT_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        values: dict[str, Any] = {}
        if "log_level" in data:
            values["log_level"] = data["log_level"]
        if "include_default_strategies" in data:
            values["include_default_strategies"] = data["include_default_strategies"]
        for key in ("parameter_accept_strategies", "printing_strategies", "interceptors"):
            values[key] = [load_component(entry) for entry in data.get(key) or []]
        if data.get("payload"):
            values["payload"] = import_object(data["payload"])
        if data.get("input") is not None:
            values["input_provider"] = build_input_provider(data["input"])
        if data.get("output") is not None:
            values["output_consumer"] = build_output_consumer(data["output"])

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> EnhancerConfig:
        """Load an EnhancerConfig from a YAML file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load configuration from {path}: {e}") from e

        log_debug(f"EnhancerConfig: loaded {path}")
        return cls.from_dict(data)


def import_class(class_path: str) -> type:
    """Import a class from a ``module.ClassName`` path.

    Raises:
        ConfigurationError: If the path is malformed or does not name a class.
    """
    if not isinstance(class_path, str) or not CLASS_PATTERN.match(class_path):
        raise ConfigurationError(f"Not a class path: {class_path!r}")

    component = import_object(class_path)
    if not isinstance(component, type):
        raise ConfigurationError(f"{class_path} is not a class")
    return component


def import_object(object_path: str) -> Any:
    """Import any module attribute from a dotted path.

    Raises:
        ConfigurationError: If the module or attribute cannot be found.
    """
    if not isinstance(object_path, str) or not OBJECT_PATTERN.match(object_path):
        raise ConfigurationError(f"Not an import path: {object_path!r}")

    module_path, attribute = object_path.rsplit(".", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{module_path}': {e}") from e

    if not hasattr(module, attribute):
        raise ConfigurationError(f"Module '{module_path}' has no attribute '{attribute}'")
    return getattr(module, attribute)


def load_component(entry: str | Mapping[str, Any]) -> Any:
    """Instantiate a configured component.

    Args:
        entry: A class path, or ``{"class": path, "config": {...}}``. With a
            config mapping the class is instantiated as ``cls(config=...)``.

    Raises:
        ConfigurationError: If the entry is malformed or instantiation fails.
    """
    if isinstance(entry, str):
        class_path, component_config = entry, None
    elif isinstance(entry, Mapping) and "class" in entry:
        class_path, component_config = entry["class"], entry.get("config")
    else:
        raise ConfigurationError(f"Cannot load component from {entry!r}")

    component_class = import_class(class_path)
    try:
        if component_config is None:
            return component_class()
        return component_class(config=dict(component_config))
    except Exception as e:
        raise ConfigurationError(f"Cannot instantiate {class_path}: {e}") from e


def build_input_provider(source: str | Mapping[str, Any]) -> InputProvider:
    """Build an input provider from ``console`` or ``{file|text|url: ...}``."""
    if source == "console":
        return ConsoleInputProvider()
    if isinstance(source, Mapping):
        if "file" in source:
            return FileInputProvider(Path(source["file"]))
        if "text" in source:
            return StringInputProvider(str(source["text"]))
        if "url" in source:
            return HttpInputProvider(str(source["url"]), timeout=float(source.get("timeout", 10.0)))
    raise ConfigurationError(f"Unknown input source: {source!r}")


def build_output_consumer(target: str | Mapping[str, Any]) -> OutputConsumer:
    """Build an output consumer from ``console`` or ``{file: ...}``."""
    if target == "console":
        return ConsoleOutputConsumer()
    if isinstance(target, Mapping) and "file" in target:
        return FileOutputConsumer(Path(target["file"]))
    raise ConfigurationError(f"Unknown output target: {target!r}")


__all__ = [
    "EnhancerConfig",
    "LOG_LEVEL_ENV",
    "import_class",
    "import_object",
    "load_component",
    "build_input_provider",
    "build_output_consumer",
]
