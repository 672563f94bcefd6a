"""
Argument preconditions used at every public entry point.
"""

import enum
from typing import Any, TypeVar

from .errors import InvalidArgumentError


T = TypeVar("T")


def not_none(value: T, name: str) -> T:
    """Return ``value`` or raise if it is ``None``."""
    if value is None:
        raise InvalidArgumentError(f"Argument '{name}' must not be None", name)
    return value


def hashable(value: T, name: str) -> T:
    """Return ``value`` or raise if it cannot be used as a lookup key."""
    try:
        hash(value)
    except TypeError:
        raise InvalidArgumentError(
            f"Argument '{name}' must be a hashable type descriptor (got {value!r})", name
        ) from None
    return value


def not_negative(value: int, name: str) -> int:
    """Return ``value`` or raise if it is below zero."""
    not_none(value, name)
    if value < 0:
        raise InvalidArgumentError(
            f"Argument '{name}' must not be negative (got {value})", name
        )
    return value


def in_range(value: int, low: int, high: int, name: str) -> int:
    """Return ``value`` or raise if it lies outside ``[low, high]``."""
    not_none(value, name)
    if low > high:
        raise InvalidArgumentError(f"Invalid range [{low}, {high}] for '{name}'", name)
    if not low <= value <= high:
        raise InvalidArgumentError(
            f"Argument '{name}' must be within [{low}, {high}] (got {value})", name
        )
    return value


def state_is_true(condition: bool, message: str) -> None:
    """Raise with ``message`` unless ``condition`` holds."""
    if not condition:
        raise InvalidArgumentError(message)


def is_enum(tp: Any, name: str) -> type:
    """Return ``tp`` or raise if it is not an ``enum.Enum`` subclass."""
    not_none(tp, name)
    state_is_true(
        isinstance(tp, type) and issubclass(tp, enum.Enum),
        f"Argument '{name}' must be an enumeration (got {tp!r})",
    )
    return tp
