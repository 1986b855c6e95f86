"""Exception hierarchy and logging tests.

These tests verify:
- EnhancerError is the base exception class
- All custom exceptions inherit correctly
- Logging functions accept structured fields
- Enhancer log levels gate what is emitted
"""

from __future__ import annotations

import logging

import pytest

from enhancer_core.exceptions import assert_not_none, assert_true
from enhancer_core.logging import LOGGER_NAME, TRACE, configure_logging, get_logger


class TestExceptionHierarchy:
    """Test exception class hierarchy."""

    def test_enhancer_error_is_base(self):
        """Test EnhancerError is the base class."""
        from enhancer_core import (
            ConfigurationError,
            EnhancerError,
            InputExhaustedError,
            PreconditionViolationError,
            ResolutionRejectedError,
            ResolutionStateError,
            StrategyExceptionTracer,
            StrategySetNotFoundError,
            StrategyStubError,
            TypeResolutionError,
        )

        for exc_class in [
            PreconditionViolationError,
            TypeResolutionError,
            StrategySetNotFoundError,
            StrategyStubError,
            ResolutionStateError,
            ResolutionRejectedError,
            ConfigurationError,
            InputExhaustedError,
            StrategyExceptionTracer,
        ]:
            assert issubclass(exc_class, EnhancerError)

    def test_value_error_compatibility(self):
        """Test input errors can be caught as ValueError."""
        from enhancer_core import PreconditionViolationError, TypeResolutionError

        assert issubclass(PreconditionViolationError, ValueError)
        assert issubclass(TypeResolutionError, ValueError)

    def test_can_catch_by_base_class(self):
        """Test exceptions can be caught by base class."""
        from enhancer_core import ConfigurationError, EnhancerError

        with pytest.raises(EnhancerError):
            raise ConfigurationError("Test error")


class TestAssertions:
    """Test precondition helpers."""

    def test_assert_true(self):
        """Test assert_true raises only on a false flag."""
        from enhancer_core import PreconditionViolationError

        assert_true(True, "unused")
        with pytest.raises(PreconditionViolationError, match="must hold"):
            assert_true(False, "must hold")

    def test_assert_not_none(self):
        """Test assert_not_none raises only on None."""
        from enhancer_core import PreconditionViolationError

        assert_not_none(0, "unused")
        with pytest.raises(PreconditionViolationError, match="cannot be None"):
            assert_not_none(None, "value cannot be None")


class TestLogging:
    """Test logging functions."""

    def test_log_functions_callable(self):
        """Test every log function accepts a message and fields."""
        from enhancer_core import LogContext, log_debug, log_error, log_info, log_trace, log_warn

        for log in (log_error, log_warn, log_info, log_debug, log_trace):
            log("Test message")
            log("Test with fields", {"key": "value"})
            log("Test with context", LogContext(operation="test"))

    def test_fields_are_rendered_and_attached(self, caplog):
        """Test structured fields are appended and attached to the record."""
        from enhancer_core import log_info

        caplog.set_level(logging.INFO, logger=LOGGER_NAME)
        log_info("Resolved", {"attempts": 2, "target_type": "int"})

        (record,) = caplog.records
        assert record.getMessage() == "Resolved [attempts=2 target_type=int]"
        assert record.fields == {"attempts": "2", "target_type": "int"}

    def test_log_context_skips_unset_fields(self, caplog):
        """Test only set LogContext fields are rendered."""
        from enhancer_core import LogContext, log_warn

        caplog.set_level(logging.INFO, logger=LOGGER_NAME)
        log_warn("Declined", LogContext(strategy="a.B", parameter_index=0))

        assert caplog.records[0].fields == {"strategy": "a.B", "parameter_index": "0"}

    def test_trace_level(self, caplog):
        """Test log_trace uses the TRACE level."""
        from enhancer_core import log_trace

        caplog.set_level(TRACE, logger=LOGGER_NAME)
        log_trace("Attempt")

        assert caplog.records[0].levelname == "TRACE"

    def test_log_context_forbids_extra(self):
        """Test LogContext rejects unknown fields."""
        from enhancer_core import LogContext

        with pytest.raises(ValueError):
            LogContext(unknown="x")


class TestConfigureLogging:
    """Test enhancer log levels."""

    def test_off_disables_logger(self, caplog):
        """Test OFF silences everything, errors included."""
        from enhancer_core import log_error

        configure_logging("off")
        log_error("hidden")

        assert get_logger().disabled
        assert caplog.records == []

    def test_error_level(self, caplog):
        """Test ERROR emits errors only."""
        from enhancer_core import EnhancerLogLevel, log_error, log_warn

        configure_logging(EnhancerLogLevel.ERROR)
        log_warn("hidden")
        log_error("shown")

        assert [r.getMessage() for r in caplog.records] == ["shown"]

    def test_info_level(self, caplog):
        """Test INFO emits info and above but not debug."""
        from enhancer_core import log_debug, log_info, log_warn

        configure_logging("info")
        log_debug("hidden")
        log_info("info")
        log_warn("warning")

        assert [r.getMessage() for r in caplog.records] == ["info", "warning"]

    def test_invalid_level(self):
        """Test unknown levels are rejected."""
        with pytest.raises(ValueError):
            configure_logging("verbose")

    def test_handler_attached_once(self):
        """Test repeated configuration does not stack handlers."""
        configure_logging("info")
        count = len(get_logger().handlers)
        configure_logging("warning")
        assert len(get_logger().handlers) == count >= 1

    def test_enhancer_applies_config_level(self):
        """Test constructing an Enhancer applies its log level."""
        from enhancer_core import Enhancer, EnhancerConfig

        Enhancer(EnhancerConfig(log_level="warning"))

        assert not get_logger().disabled
        assert get_logger().level == logging.WARNING
