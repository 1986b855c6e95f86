"""Tests for the strategy resolution engine, tracers and results.

These tests verify:
- First-match-wins resolution in priority order
- Total failure yields one tracer per attempt, rendered most recent first
- Lookup and type resolution failures become a single anonymous tracer
- Precondition violations propagate
- ResolutionResult accessors and rendering
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from enhancer_core import EventNames
from enhancer_core.engine import StrategyResolutionEngine, resolve
from enhancer_core.exceptions import (
    PreconditionViolationError,
    ResolutionRejectedError,
    ResolutionStateError,
    StrategySetNotFoundError,
    TypeResolutionError,
)
from enhancer_core.registry import StrategyRegistry
from enhancer_core.result import ResolutionResult, ResolutionStatus
from enhancer_core.tracer import StrategyExceptionTracer


def raise_and_capture(exc: Exception) -> Exception:
    try:
        raise exc
    except Exception as e:
        return e


class TestResolve:
    """Tests for resolve()."""

    def test_first_match_wins(self, make_strategy, call_log):
        """Test fail, fail, succeed stops at the third strategy."""
        registry = StrategyRegistry(
            [
                make_strategy("d", priority=4),
                make_strategy("c", priority=3),
                make_strategy("b", priority=2, fail=True),
                make_strategy("a", priority=1, fail=True),
            ]
        )

        result = resolve(registry, int, "v")

        assert result.is_accepted
        assert result.value == "c:v"
        assert call_log == ["a", "b", "c"]
        assert len(result.tracers) == 2
        assert [str(t.cause) for t in result.tracers] == ["a declined 'v'", "b declined 'v'"]

    def test_first_success_without_failures_has_no_tracers(self, make_strategy):
        """Test an immediate success carries no tracers."""
        registry = StrategyRegistry([make_strategy("a")])
        result = resolve(registry, str, "v")
        assert result.value == "a:v"
        assert result.tracers == ()

    def test_total_failure(self, make_strategy, call_log):
        """Test N failing strategies give N tracers in attempt order."""
        registry = StrategyRegistry(
            [
                make_strategy("a", priority=1, fail=True),
                make_strategy("b", priority=2, fail=True),
                make_strategy("c", priority=3, fail=True),
            ]
        )

        result = resolve(registry, int, "v")

        assert result.is_rejected
        assert result.original_input == "v"
        assert call_log == ["a", "b", "c"]
        assert [str(t.cause) for t in result.tracers] == [
            "a declined 'v'",
            "b declined 'v'",
            "c declined 'v'",
        ]

    def test_rendering_reverses_attempt_order(self, make_strategy):
        """Test the most recent failure is rendered first."""
        registry = StrategyRegistry(
            [make_strategy(label, priority=i, fail=True) for i, label in enumerate("abc")]
        )

        rendered = resolve(registry, int, "v").render()

        assert rendered.index("c declined") < rendered.index("b declined")
        assert rendered.index("b declined") < rendered.index("a declined")
        assert rendered.count("ResolutionResult: rejected") == 1

    def test_resolution_is_idempotent(self, make_strategy):
        """Test repeated calls on the same frozen registry agree."""
        registry = StrategyRegistry(
            [make_strategy("a", priority=1, fail=True), make_strategy("b", priority=2)]
        )

        first = resolve(registry, int, "v")
        second = resolve(registry, int, "v")

        assert first.status == second.status
        assert first.value == second.value
        assert first.attempted_strategies == second.attempted_strategies

    def test_lookup_failure_leaves_anonymous_tracer(self, make_strategy, call_log):
        """Test a missing strategy set gives one tracer without identity."""
        registry = StrategyRegistry([make_strategy("int", acceptable_type=int)])

        result = resolve(registry, str, "v")

        assert result.is_rejected
        assert call_log == []
        (tracer,) = result.tracers
        assert tracer.strategy is None
        assert tracer.is_lookup_failure
        assert isinstance(tracer.cause, StrategySetNotFoundError)

    def test_unresolvable_type_leaves_anonymous_tracer(self, make_strategy):
        """Test a type resolution failure is captured, not raised."""
        registry = StrategyRegistry([make_strategy("a")])

        result = resolve(registry, int | str, 1)

        (tracer,) = result.tracers
        assert tracer.strategy is None
        assert isinstance(tracer.cause, TypeResolutionError)

    def test_strategies_receive_full_descriptor(self, make_strategy):
        """Test lookup uses the raw type while strategies see the descriptor."""
        seen = []

        class Spy(type(make_strategy("x"))):
            def accept_parameter(self, value, type_descriptor, registry):
                seen.append(type_descriptor)
                return value

        registry = StrategyRegistry([Spy("spy", acceptable_type=list)])
        resolve(registry, list[int], [1])

        assert seen == [list[int]]

    def test_base_exceptions_are_not_captured(self, make_strategy):
        """Test only Exception subclasses are absorbed."""

        class Interrupting(type(make_strategy("x"))):
            def accept_parameter(self, value, type_descriptor, registry):
                raise KeyboardInterrupt

        registry = StrategyRegistry([Interrupting("i")])
        with pytest.raises(KeyboardInterrupt):
            resolve(registry, int, 1)

    def test_none_registry_raises(self):
        """Test a None registry is a precondition violation."""
        with pytest.raises(PreconditionViolationError):
            resolve(None, int, 1)

    def test_none_type_raises(self, make_strategy):
        """Test a None type descriptor is a precondition violation."""
        with pytest.raises(PreconditionViolationError):
            resolve(StrategyRegistry([make_strategy("a")]), None, 1)


class TestIntegerScenario:
    """Tests for a single priority-0 integer parsing strategy."""

    def test_parses_numeric_text(self, parse_int_strategy):
        """Test "42" is accepted as 42."""
        result = resolve(StrategyRegistry([parse_int_strategy]), int, "42")
        assert result.is_accepted
        assert result.value == 42

    def test_rejects_non_numeric_text(self, parse_int_strategy):
        """Test "abc" is rejected with one tracer naming the strategy."""
        result = resolve(StrategyRegistry([parse_int_strategy]), int, "abc")

        assert result.is_rejected
        (tracer,) = result.tracers
        assert tracer.strategy == "conftest.ParseIntStrategy"
        assert tracer.short_name == "ParseIntStrategy"
        assert isinstance(tracer.cause, ValueError)
        assert "invalid literal" in tracer.message


class TestStrategyResolutionEngine:
    """Tests for the registry-bound engine."""

    def test_resolve_uses_bound_registry(self, parse_int_strategy):
        """Test the engine resolves against its registry."""
        registry = StrategyRegistry([parse_int_strategy])
        engine = StrategyResolutionEngine(registry)

        assert engine.registry is registry
        assert engine.resolve(int, "7").value == 7

    def test_none_registry_raises(self):
        """Test binding to None is rejected."""
        with pytest.raises(PreconditionViolationError):
            StrategyResolutionEngine(None)


class TestResolutionEvents:
    """Tests for events published by the engine."""

    def test_accepted_event(self, event_bridge, parse_int_strategy):
        """Test acceptance is published with type and result."""
        received = []
        event_bridge.subscribe(EventNames.RESOLUTION_ACCEPTED, lambda t, r: received.append((t, r)))

        result = resolve(StrategyRegistry([parse_int_strategy]), int, "1")

        assert received == [(int, result)]

    def test_rejected_event(self, event_bridge, parse_int_strategy):
        """Test rejection is published with type and result."""
        received = []
        event_bridge.subscribe(EventNames.RESOLUTION_REJECTED, lambda t, r: received.append(r))

        result = resolve(StrategyRegistry([parse_int_strategy]), int, "x")

        assert received == [result]

    def test_no_bridge_no_events(self, parse_int_strategy):
        """Test resolution works without any bridge."""
        from enhancer_core import EventBridge

        assert EventBridge._instance is None
        assert resolve(StrategyRegistry([parse_int_strategy]), int, "1").value == 1
        assert EventBridge._instance is None


class TestStrategyExceptionTracer:
    """Tests for StrategyExceptionTracer."""

    def test_render_layout(self):
        """Test the rendered block layout."""
        cause = raise_and_capture(ValueError("bad digit"))
        tracer = StrategyExceptionTracer("pkg.strategies.HexStrategy", cause)

        lines = tracer.render().splitlines()

        assert lines[0] == "<StrategyExceptionTracer> - HexStrategy"
        assert lines[1].rstrip() == " -- Strategy:"
        assert lines[2] == "pkg.strategies.HexStrategy"
        assert lines[3].rstrip() == " -- Error:"
        assert lines[4] == "ValueError: bad digit"
        assert lines[5].rstrip() == " -- Detail:"
        assert lines[6] == "Traceback (most recent call last):"

    def test_lookup_failure_render(self):
        """Test a lookup tracer renders None for the identity."""
        tracer = StrategyExceptionTracer(None, StrategySetNotFoundError("nothing"))
        rendered = tracer.render()

        assert rendered.startswith("<StrategyExceptionTracer> - None\n")
        assert "\nNone\n" in rendered
        assert tracer.short_name is None

    def test_cause_is_chained(self):
        """Test the captured exception is the tracer's __cause__."""
        cause = ValueError("x")
        tracer = StrategyExceptionTracer("a.B", cause)
        assert tracer.__cause__ is cause
        assert tracer.cause is cause

    def test_detail_includes_cause_chain(self):
        """Test nested causes appear in the detail."""
        try:
            try:
                raise KeyError("inner")
            except KeyError as inner:
                raise ValueError("outer") from inner
        except ValueError as e:
            tracer = StrategyExceptionTracer("a.B", e)

        detail = tracer.detail()
        assert "KeyError: 'inner'" in detail
        assert "direct cause of the following exception" in detail
        assert "ValueError: outer" not in detail
        assert tracer.render().count("ValueError: outer") == 1

    def test_nested_rejection_detail_renders_inner_result(self):
        """Test a nested rejection's tracers are rendered inside the detail."""
        inner = ResolutionResult.reject(
            "x", [StrategyExceptionTracer("a.IntStrategy", ValueError("not a number"))]
        )
        try:
            inner.unwrap(inner.summary())
        except ResolutionRejectedError as e:
            tracer = StrategyExceptionTracer("a.ListStrategy", e)

        assert tracer.message == f"ResolutionRejectedError: {inner.summary()}"
        assert tracer.detail().endswith(inner.render() + "\n")
        assert tracer.render().count("<StrategyExceptionTracer> - IntStrategy") == 1

    def test_message_without_text(self):
        """Test exceptions without a message render their type name."""
        assert StrategyExceptionTracer("a.B", KeyError()).message == "KeyError"


class TestResolutionResult:
    """Tests for ResolutionResult."""

    def test_accepted(self):
        """Test accepted result accessors."""
        result = ResolutionResult.accept(42)

        assert result.status is ResolutionStatus.ACCEPTED
        assert result.is_accepted
        assert not result.is_rejected
        assert result.value == 42
        assert result.unwrap() == 42
        assert result.value_or(0) == 42
        assert result.render() == "ResolutionResult: accepted, accepted object: 42"
        assert str(result) == result.render()

    def test_rejected_value_raises(self):
        """Test reading the value of a rejected result raises."""
        result = ResolutionResult.reject("abc", [])

        with pytest.raises(ResolutionStateError):
            _ = result.value
        assert result.value_or(0) == 0

    def test_unwrap_rejected_raises_with_rendered_trace(self):
        """Test unwrap() raises with the full diagnostic as message."""
        tracer = StrategyExceptionTracer("a.IntStrategy", ValueError("nope"))
        result = ResolutionResult.reject("abc", [tracer])

        with pytest.raises(ResolutionRejectedError) as exc_info:
            result.unwrap()

        assert str(exc_info.value) == result.render()
        assert exc_info.value.result is result
        assert exc_info.value.original_input == "abc"

    def test_unwrap_with_message_and_summary(self):
        """Test unwrap() accepts a short message such as summary()."""
        tracers = [StrategyExceptionTracer(f"a.S{i}", ValueError(str(i))) for i in range(2)]
        result = ResolutionResult.reject(list(range(100)), tracers)

        with pytest.raises(ResolutionRejectedError) as exc_info:
            result.unwrap(result.summary())

        summary = str(exc_info.value)
        assert summary.startswith("ResolutionResult: rejected, object: [0, 1, 2")
        assert summary.endswith(", 2 failed attempts")
        assert "..." in summary
        assert exc_info.value.result is result
        accepted = ResolutionResult.accept(1)
        assert accepted.summary() == "ResolutionResult: accepted, accepted object: 1"

    def test_rejected_render_echoes_input_once(self):
        """Test the input is echoed once at the top."""
        tracers = [StrategyExceptionTracer(f"a.S{i}", ValueError(str(i))) for i in range(2)]
        rendered = ResolutionResult.reject("abc", tracers).render()

        assert rendered.startswith("ResolutionResult: rejected, object: 'abc'")
        assert rendered.count("'abc'") == 1
        assert rendered.index("<StrategyExceptionTracer> - S1") < rendered.index(
            "<StrategyExceptionTracer> - S0"
        )

    def test_attempted_strategies(self):
        """Test attempt identities in attempt order."""
        tracers = [
            StrategyExceptionTracer(None, ValueError("lookup")),
            StrategyExceptionTracer("a.B", ValueError("b")),
        ]
        assert ResolutionResult.reject(1, tracers).attempted_strategies == [None, "a.B"]

    def test_is_frozen(self):
        """Test results cannot be modified."""
        result = ResolutionResult.accept(1)
        with pytest.raises(ValidationError):
            result.output = 2
