"""
Blueprint Diagnostics - observability and event tracking for materialization.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("blueprint.diagnostics")


class BlueprintEventType(Enum):
    """Types of blueprint events."""
    MATERIALIZE_START = "materialize_start"
    MATERIALIZE_SUCCESS = "materialize_success"
    MATERIALIZE_FAILURE = "materialize_failure"
    OVERRIDE_APPLIED = "override_applied"
    CYCLE_DETECTED = "cycle_detected"
    DELEGATE_INVOCATION = "delegate_invocation"


@dataclasses.dataclass
class BlueprintEvent:
    """A diagnostic event in the materializer."""
    type: BlueprintEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    target: Optional[Any] = None
    shape: Optional[str] = None
    strategy: Optional[str] = None
    member: Optional[str] = None
    depth: int = 0
    duration: Optional[float] = None
    error: Optional[BaseException] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for blueprint diagnostic listeners."""
    def on_event(self, event: BlueprintEvent) -> None:
        """Called when a blueprint event occurs."""
        ...


class LoggingDiagnosticListener:
    """Diagnostic listener that writes events to the ``blueprint.diagnostics`` logger."""
    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: BlueprintEvent) -> None:
        indent = "  " * event.depth
        if event.type == BlueprintEventType.MATERIALIZE_START:
            logger.log(self.log_level, f"{indent}Materializing {event.target!r} ({event.shape})...")
        elif event.type == BlueprintEventType.MATERIALIZE_SUCCESS:
            logger.log(self.log_level, f"{indent}Materialized {event.target!r} in {event.duration:.4f}s")
        elif event.type == BlueprintEventType.MATERIALIZE_FAILURE:
            logger.log(logging.WARNING, f"{indent}Failed to materialize {event.target!r}: {event.error}")
        elif event.type == BlueprintEventType.OVERRIDE_APPLIED:
            where = f" for member '{event.member}'" if event.member else ""
            logger.log(self.log_level, f"{indent}Override {event.strategy} applied to {event.target!r}{where}")
        elif event.type == BlueprintEventType.CYCLE_DETECTED:
            logger.log(self.log_level, f"{indent}Cycle detected on {event.target!r}, handled by {event.strategy}")
        elif event.type == BlueprintEventType.DELEGATE_INVOCATION:
            logger.log(self.log_level, f"Delegate {event.target!r}.{event.member}() invoked")


class BlueprintDiagnostics:
    """Coordinator for blueprint diagnostic listeners."""
    def __init__(self, listeners: Optional[List[DiagnosticListener]] = None):
        self._listeners: List[DiagnosticListener] = list(listeners or [])

    @property
    def enabled(self) -> bool:
        return bool(self._listeners)

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def emit(self, event_type: BlueprintEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = BlueprintEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                # Diagnostics must never break materialization
                logger.error(f"Diagnostic listener error: {e}")

    def measure(self, **kwargs):
        """Context manager emitting start, then success or failure with duration."""
        return _DiagnosticMeasure(self, **kwargs)


class _DiagnosticMeasure:
    def __init__(self, diagnostics: BlueprintDiagnostics, **kwargs):
        self.diagnostics = diagnostics
        self.kwargs = kwargs
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.diagnostics.emit(BlueprintEventType.MATERIALIZE_START, **self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type:
            self.diagnostics.emit(
                BlueprintEventType.MATERIALIZE_FAILURE,
                duration=duration,
                error=exc_val,
                **self.kwargs
            )
        else:
            self.diagnostics.emit(
                BlueprintEventType.MATERIALIZE_SUCCESS,
                duration=duration,
                **self.kwargs
            )
        return False
