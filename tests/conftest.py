"""pytest configuration and fixtures for enhancer_core tests.

This module provides shared fixtures for testing enhancer_core, including
a clean logger and EventBridge per test, the default acceptor/printer, and
a few small strategies used across test modules.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import TYPE_CHECKING, Any

import pytest

from enhancer_core.strategy import BaseParameterAcceptStrategy

if TYPE_CHECKING:
    from enhancer_core import EventBridge, OutputPrinter, ParameterAcceptor


class ParseIntStrategy(BaseParameterAcceptStrategy[int]):
    """Integer strategy at priority 0 that only parses text."""

    acceptable_type = int
    priority = 0

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: Any) -> int:
        return int(value)


class RecordingStrategy(BaseParameterAcceptStrategy[Any]):
    """Strategy that records its calls and either fails or returns a value."""

    def __init__(
        self,
        label: str,
        priority: int = 0,
        acceptable_type: Any = object,
        fail: bool = False,
        calls: list[str] | None = None,
    ) -> None:
        self.label = label
        self.priority = priority
        self.acceptable_type = acceptable_type
        self.fail = fail
        self.calls = calls if calls is not None else []

    def accept_parameter(self, value: Any, type_descriptor: Any, registry: Any) -> Any:
        self.calls.append(self.label)
        if self.fail:
            raise ValueError(f"{self.label} declined {value!r}")
        return f"{self.label}:{value}"


@pytest.fixture(autouse=True)
def clean_enhancer_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reset the package logger, the EventBridge and the env override."""
    from enhancer_core import EventBridge
    from enhancer_core.config import LOG_LEVEL_ENV
    from enhancer_core.logging import get_logger

    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    EventBridge.reset_instance()
    logger = get_logger()
    logger.disabled = False
    logger.setLevel(logging.NOTSET)
    yield
    EventBridge.reset_instance()
    logger.disabled = False
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def event_bridge() -> Generator[EventBridge, None, None]:
    """Provide a fresh, started EventBridge for each test."""
    from enhancer_core import EventBridge

    bridge = EventBridge.instance()
    bridge.start()
    yield bridge
    bridge.stop()


@pytest.fixture
def acceptor() -> ParameterAcceptor:
    """Provide a ParameterAcceptor with only the built-in strategies."""
    from enhancer_core import ParameterAcceptor

    return ParameterAcceptor.from_strategies()


@pytest.fixture
def printer() -> OutputPrinter:
    """Provide an OutputPrinter with only the built-in strategies."""
    from enhancer_core import OutputPrinter

    return OutputPrinter.from_strategies()


@pytest.fixture
def call_log() -> list[str]:
    """Shared call log for RecordingStrategy instances."""
    return []


@pytest.fixture
def make_strategy(call_log: list[str]):
    """Factory for RecordingStrategy instances sharing ``call_log``."""

    def factory(
        label: str,
        priority: int = 0,
        acceptable_type: Any = object,
        fail: bool = False,
    ) -> RecordingStrategy:
        return RecordingStrategy(label, priority, acceptable_type, fail, call_log)

    return factory


@pytest.fixture
def parse_int_strategy() -> ParseIntStrategy:
    """Provide the priority-0 integer parsing strategy."""
    return ParseIntStrategy()
