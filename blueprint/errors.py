"""
Blueprint error types with rich diagnostics.
"""

from typing import Any, List, Optional


def describe_type(tp: Any) -> str:
    """Render a type descriptor as ``module.qualname`` (or its repr for aliases)."""
    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


class BlueprintError(Exception):
    """Base exception for blueprint errors."""
    pass


class InvalidArgumentError(BlueprintError, ValueError):
    """Bad caller input (e.g. a missing type or configuration)."""

    def __init__(self, message: str, argument: Optional[str] = None):
        self.argument = argument
        super().__init__(message)


class UnsupportedShapeError(BlueprintError):
    """The requested type has no safe construction path."""

    def __init__(self, target: Any, reason: str):
        self.target = target
        self.reason = reason

        msg = f"Cannot blueprint {describe_type(target)}: {reason}"
        msg += "\n\nSuggested fixes:"
        msg += f"\n  - Register an override: config.with_type({describe_type(target)}, ...)"
        msg += "\n  - Write a hand-made fixture for this type"

        super().__init__(msg)


class CycleDetectedError(BlueprintError):
    """A type recursed into itself through its members graph."""

    def __init__(self, cycle: List[Any]):
        self.cycle = cycle

        msg = "Detected blueprint cycle:"
        for i, tp in enumerate(cycle):
            arrow = " -> " if i < len(cycle) - 1 else ""
            msg += f"\n  {describe_type(tp)}{arrow}"

        msg += "\n\nSuggested fixes:"
        msg += "\n  - Override one type of the cycle: config.with_value(Type, value)"
        msg += "\n  - Register a cycle handler: config.with_cycle_handler(...)"

        super().__init__(msg)


class ConstructionFailedError(BlueprintError):
    """
    An initializer or mutator raised while building an instance.

    The original exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        target: Any,
        cause: BaseException,
        member: Optional[str] = None,
    ):
        self.target = target
        self.member = member
        self.cause = cause

        where = describe_type(target)
        if member:
            where += f".{member}"
        msg = f"Construction of {where} failed: {type(cause).__name__}: {cause}"

        super().__init__(msg)
