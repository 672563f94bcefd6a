"""
Creation strategies - pluggable value producers.

Primitive strategies terminate without recursing into the engine. Random
strategies draw from the configuration's ``RandomSource`` so one seed
reproduces a whole object graph.
"""

import datetime
import decimal
import enum
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from .. import check
from ..shapes import NoneType, Member, literal_values, normalize
from ..session import BlueprintSession

if TYPE_CHECKING:
    from ..configuration import Configuration


INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

EPOCH = datetime.datetime(1970, 1, 1)


@dataclass(frozen=True)
class CreationContext:
    """Everything a creation strategy may need to produce a value."""

    expected_type: Any
    config: "Configuration"
    session: BlueprintSession
    member: Optional[Member] = None

    @property
    def random(self):
        return self.config.random_source


class CreationStrategy:
    """Base creation strategy."""

    def create_value(self, ctx: CreationContext) -> Any:
        raise NotImplementedError(f"{type(self).__name__}.create_value() is not implemented")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SingleValueCreationStrategy(CreationStrategy):
    """Always returns the same pre-bound value."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def create_value(self, ctx: CreationContext) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"SingleValueCreationStrategy({self.value!r})"


class FactoryCreationStrategy(CreationStrategy):
    """Calls a zero-argument factory for every value."""

    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], Any]):
        check.state_is_true(callable(factory), "Argument 'factory' must be callable")
        self._factory = factory

    def create_value(self, ctx: CreationContext) -> Any:
        return self._factory()


# ============================================================================
# Deterministic values
# ============================================================================

_ZERO_VALUES: Dict[Any, Callable[[], Any]] = {
    bool: lambda: False,
    int: lambda: 0,
    float: lambda: 0.0,
    complex: lambda: 0j,
    str: lambda: "",
    bytes: lambda: b"",
    bytearray: bytearray,
    decimal.Decimal: lambda: decimal.Decimal(0),
    NoneType: lambda: None,
    datetime.datetime: lambda: EPOCH,
    datetime.date: lambda: EPOCH.date(),
    datetime.time: datetime.time,
    datetime.timedelta: datetime.timedelta,
    uuid.UUID: lambda: uuid.UUID(int=0),
}

DEFAULT_VALUE_TYPES = tuple(_ZERO_VALUES)


class DefaultValueCreationStrategy(CreationStrategy):
    """Zero, empty or epoch value for the expected type."""

    def create_value(self, ctx: CreationContext) -> Any:
        tp = normalize(ctx.expected_type)
        factory = _ZERO_VALUES.get(tp)
        if factory is None:
            return tp()
        return factory()


# ============================================================================
# Random values
# ============================================================================

class RandomNumberCreationStrategy(CreationStrategy):
    """Random ``int``, ``float``, ``Decimal`` or ``complex`` in ``[low, high]``."""

    __slots__ = ("low", "high")

    def __init__(self, low: int = INT_MIN, high: int = INT_MAX):
        check.state_is_true(low <= high, f"Invalid number range [{low}, {high}]")
        self.low = low
        self.high = high

    def create_value(self, ctx: CreationContext) -> Any:
        tp = normalize(ctx.expected_type)
        rng = ctx.random
        if tp is float:
            return rng.uniform(self.low, self.high)
        if tp is complex:
            return complex(rng.uniform(self.low, self.high), rng.uniform(self.low, self.high))
        if tp is decimal.Decimal:
            return decimal.Decimal(rng.randint(self.low, self.high)) / 100
        return rng.randint(self.low, self.high)


class RandomBooleanCreationStrategy(CreationStrategy):

    def create_value(self, ctx: CreationContext) -> bool:
        return ctx.random.getrandbits(1) == 1


class RandomStringCreationStrategy(CreationStrategy):
    """
    UUID-shaped random strings.

    With ``max_length`` the string is cut to at most that many characters.
    """

    __slots__ = ("max_length",)

    def __init__(self, max_length: Optional[int] = None):
        if max_length is not None:
            check.not_negative(max_length, "max_length")
        self.max_length = max_length

    def create_value(self, ctx: CreationContext) -> str:
        value = str(uuid.UUID(int=ctx.random.getrandbits(128), version=4))
        if self.max_length is not None:
            return value[: self.max_length]
        return value


class RandomBytesCreationStrategy(CreationStrategy):
    """Between one and ``max_length`` random octets."""

    __slots__ = ("max_length",)

    def __init__(self, max_length: int = 16):
        check.in_range(max_length, 1, 2**16, "max_length")
        self.max_length = max_length

    def create_value(self, ctx: CreationContext) -> Any:
        size = ctx.random.randint(1, self.max_length)
        data = ctx.random.randbytes(size)
        if normalize(ctx.expected_type) is bytearray:
            return bytearray(data)
        return data


class RandomTemporalCreationStrategy(CreationStrategy):
    """Random ``datetime``/``date``/``time``/``timedelta`` within ``span_days`` of the epoch."""

    __slots__ = ("span_days",)

    def __init__(self, span_days: int = 365 * 100):
        self.span_days = check.not_negative(span_days, "span_days")

    def create_value(self, ctx: CreationContext) -> Any:
        tp = normalize(ctx.expected_type)
        offset = datetime.timedelta(seconds=ctx.random.randint(0, self.span_days * 86400))
        if tp is datetime.timedelta:
            return offset
        moment = EPOCH + offset
        if tp is datetime.date:
            return moment.date()
        if tp is datetime.time:
            return moment.time()
        return moment


class RandomUUIDCreationStrategy(CreationStrategy):

    def create_value(self, ctx: CreationContext) -> uuid.UUID:
        return uuid.UUID(int=ctx.random.getrandbits(128), version=4)


class RandomEnumCreationStrategy(CreationStrategy):
    """Uniformly chosen enum member; ``None`` for an empty enumeration."""

    def create_value(self, ctx: CreationContext) -> Optional[enum.Enum]:
        enum_type = check.is_enum(normalize(ctx.expected_type), "expected_type")
        members = list(enum_type)
        if not members:
            return None
        return ctx.random.choice(members)


class RandomLiteralCreationStrategy(CreationStrategy):
    """Uniformly chosen value of a ``Literal[...]``."""

    def create_value(self, ctx: CreationContext) -> Any:
        values = literal_values(ctx.expected_type)
        check.state_is_true(bool(values), f"{ctx.expected_type!r} has no literal values")
        return ctx.random.choice(values)


# ============================================================================
# Structural
# ============================================================================

class BlueprintCreationStrategy(CreationStrategy):
    """
    Materialize the expected type structurally, skipping override lookup.

    Registered through ``Configuration.with_blueprint(matcher)`` to send
    matching types back through classification.
    """

    def create_value(self, ctx: CreationContext) -> Any:
        from ..engine import materialize_structure
        return materialize_structure(ctx.expected_type, ctx.config, ctx.session)


def coerce_creation_strategy(value: Any) -> CreationStrategy:
    """Wrap plain values into a ``SingleValueCreationStrategy``."""
    if isinstance(value, CreationStrategy):
        return value
    return SingleValueCreationStrategy(value)
