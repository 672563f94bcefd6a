"""
Tests for blueprint diagnostics events and logging.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import pytest

from blueprint import default_config, materialize
from blueprint.diagnostics import (
    BlueprintDiagnostics,
    BlueprintEventType,
    LoggingDiagnosticListener,
)
from blueprint.errors import UnsupportedShapeError
from blueprint.strategies import ValueCycleHandlingStrategy


@dataclass
class Leaf:
    label: str


@dataclass
class Loop:
    again: "Loop"


class Pinger(Protocol):
    def ping(self) -> int:
        ...


class Unsupported:
    def __init__(self, value):
        self.value = value


def observed(listener):
    diagnostics = BlueprintDiagnostics([listener])
    return default_config().with_diagnostics(diagnostics)


class TestEvents:

    def test_disabled_without_listeners(self):
        diagnostics = BlueprintDiagnostics()
        assert not diagnostics.enabled
        diagnostics.emit(BlueprintEventType.MATERIALIZE_START, target=int)

    def test_structural_materialization_is_measured(self, recording_listener):
        materialize(Leaf, observed(recording_listener))

        starts = recording_listener.of_type(BlueprintEventType.MATERIALIZE_START)
        successes = recording_listener.of_type(BlueprintEventType.MATERIALIZE_SUCCESS)
        assert [event.target for event in starts] == [Leaf]
        assert successes[0].shape == "parameterized_constructible"
        assert successes[0].duration >= 0

    def test_overrides_are_reported(self, recording_listener):
        materialize(Leaf, observed(recording_listener).with_name("label", "x"))

        overrides = recording_listener.of_type(BlueprintEventType.OVERRIDE_APPLIED)
        assert [event.member for event in overrides] == ["label"]
        assert overrides[0].target is Leaf

    def test_type_overrides_are_reported(self, recording_listener):
        materialize(int, observed(recording_listener))
        overrides = recording_listener.of_type(BlueprintEventType.OVERRIDE_APPLIED)
        assert overrides[0].target is int
        assert overrides[0].member is None

    def test_failure_is_reported(self, recording_listener):
        with pytest.raises(UnsupportedShapeError):
            materialize(Unsupported, observed(recording_listener))

        failures = recording_listener.of_type(BlueprintEventType.MATERIALIZE_FAILURE)
        assert len(failures) == 1
        assert isinstance(failures[0].error, UnsupportedShapeError)

    def test_cycle_is_reported(self, recording_listener):
        config = observed(recording_listener).with_cycle_handler(ValueCycleHandlingStrategy(Loop))
        materialize(Loop, config)

        cycles = recording_listener.of_type(BlueprintEventType.CYCLE_DETECTED)
        assert len(cycles) == 1
        assert cycles[0].target is Loop
        assert cycles[0].metadata["path"] == [Loop, Loop]
        assert cycles[0].depth == 1

    def test_delegate_invocation_is_reported(self, recording_listener):
        pinger = materialize(Pinger, observed(recording_listener))
        assert recording_listener.of_type(BlueprintEventType.DELEGATE_INVOCATION) == []

        pinger.ping()
        invocations = recording_listener.of_type(BlueprintEventType.DELEGATE_INVOCATION)
        assert [(event.target, event.member) for event in invocations] == [(Pinger, "ping")]

    def test_listener_errors_do_not_break_materialization(self, caplog):
        class Broken:
            def on_event(self, event):
                raise RuntimeError("listener down")

        config = default_config().with_diagnostics(BlueprintDiagnostics([Broken()]))
        with caplog.at_level(logging.ERROR, logger="blueprint.diagnostics"):
            assert materialize(Leaf, config) == Leaf("")
        assert "listener down" in caplog.text


class TestLoggingListener:

    def test_logs_materialization(self, caplog):
        diagnostics = BlueprintDiagnostics([LoggingDiagnosticListener()])
        config = default_config().with_diagnostics(diagnostics)

        with caplog.at_level(logging.DEBUG, logger="blueprint.diagnostics"):
            materialize(Leaf, config)

        assert "Materializing" in caplog.text
        assert "Materialized" in caplog.text
        assert "Override" in caplog.text

    def test_logs_failures_as_warnings(self, caplog):
        diagnostics = BlueprintDiagnostics([LoggingDiagnosticListener()])
        config = default_config().with_diagnostics(diagnostics)

        with caplog.at_level(logging.WARNING, logger="blueprint.diagnostics"):
            with pytest.raises(UnsupportedShapeError):
                materialize(Unsupported, config)

        assert any(record.levelno == logging.WARNING for record in caplog.records)
        assert "Failed to materialize" in caplog.text
