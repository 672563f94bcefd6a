"""
Built-in configurations.

Both presets register their primitive strategies as exact-type overrides,
so a caller's ``with_type(int, ...)`` replaces them cleanly, and both
share the same override and matching surface for layering.
"""

import datetime
import decimal
import uuid
from typing import Optional

from .configuration import Configuration
from .randomness import RandomSource
from .shapes import NoneType, PRIMITIVE_TYPES
from .strategies.creation import (
    DEFAULT_VALUE_TYPES,
    DefaultValueCreationStrategy,
    RandomBooleanCreationStrategy,
    RandomBytesCreationStrategy,
    RandomEnumCreationStrategy,
    RandomLiteralCreationStrategy,
    RandomNumberCreationStrategy,
    RandomStringCreationStrategy,
    RandomTemporalCreationStrategy,
    RandomUUIDCreationStrategy,
    SingleValueCreationStrategy,
)
from .strategies.matching import EnumMatchingStrategy, LiteralMatchingStrategy


DEFAULT_SEED = 0


def default_configuration() -> Configuration:
    """
    Deterministic preset.

    Primitives come out as zero/empty values, temporal types as the epoch,
    ``UUID`` as the nil UUID; enums and literals pick their first option.
    """
    config = Configuration(random_source=RandomSource(DEFAULT_SEED))
    strategy = DefaultValueCreationStrategy()
    for tp in PRIMITIVE_TYPES.union(DEFAULT_VALUE_TYPES):
        config = config.with_type(tp, strategy)
    return config


def random_configuration(seed: Optional[int] = None) -> Configuration:
    """
    Randomized preset.

    Every value is drawn from one ``RandomSource``; passing ``seed`` makes
    whole object graphs reproducible.
    """
    number = RandomNumberCreationStrategy()
    temporal = RandomTemporalCreationStrategy()
    config = (
        Configuration(random_source=RandomSource(seed))
        .with_type(bool, RandomBooleanCreationStrategy())
        .with_type(int, number)
        .with_type(float, number)
        .with_type(complex, number)
        .with_type(decimal.Decimal, number)
        .with_type(str, RandomStringCreationStrategy())
        .with_type(bytes, RandomBytesCreationStrategy())
        .with_type(bytearray, RandomBytesCreationStrategy())
        .with_type(NoneType, SingleValueCreationStrategy(None))
        .with_type(datetime.datetime, temporal)
        .with_type(datetime.date, temporal)
        .with_type(datetime.time, temporal)
        .with_type(datetime.timedelta, temporal)
        .with_type(uuid.UUID, RandomUUIDCreationStrategy())
    )
    return (
        config
        .with_pair(EnumMatchingStrategy(), RandomEnumCreationStrategy())
        .with_pair(LiteralMatchingStrategy(), RandomLiteralCreationStrategy())
    )
