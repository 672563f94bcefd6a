"""
Matching, creation and cycle-handling strategies.
"""

from .matching import (
    MatchingStrategy,
    TypeMatchingStrategy,
    SubtypeMatchingStrategy,
    AbstractTypeMatchingStrategy,
    EnumMatchingStrategy,
    LiteralMatchingStrategy,
    CaseInsensitiveNameMatchingStrategy,
    PredicateMatchingStrategy,
)

from .creation import (
    CreationContext,
    CreationStrategy,
    SingleValueCreationStrategy,
    FactoryCreationStrategy,
    DefaultValueCreationStrategy,
    RandomNumberCreationStrategy,
    RandomBooleanCreationStrategy,
    RandomStringCreationStrategy,
    RandomBytesCreationStrategy,
    RandomTemporalCreationStrategy,
    RandomUUIDCreationStrategy,
    RandomEnumCreationStrategy,
    RandomLiteralCreationStrategy,
    BlueprintCreationStrategy,
    coerce_creation_strategy,
)

from .cycle import (
    CycleHandlingStrategy,
    RaisingCycleHandlingStrategy,
    ValueCycleHandlingStrategy,
)

__all__ = [
    # Matching
    "MatchingStrategy",
    "TypeMatchingStrategy",
    "SubtypeMatchingStrategy",
    "AbstractTypeMatchingStrategy",
    "EnumMatchingStrategy",
    "LiteralMatchingStrategy",
    "CaseInsensitiveNameMatchingStrategy",
    "PredicateMatchingStrategy",

    # Creation
    "CreationContext",
    "CreationStrategy",
    "SingleValueCreationStrategy",
    "FactoryCreationStrategy",
    "DefaultValueCreationStrategy",
    "RandomNumberCreationStrategy",
    "RandomBooleanCreationStrategy",
    "RandomStringCreationStrategy",
    "RandomBytesCreationStrategy",
    "RandomTemporalCreationStrategy",
    "RandomUUIDCreationStrategy",
    "RandomEnumCreationStrategy",
    "RandomLiteralCreationStrategy",
    "BlueprintCreationStrategy",
    "coerce_creation_strategy",

    # Cycles
    "CycleHandlingStrategy",
    "RaisingCycleHandlingStrategy",
    "ValueCycleHandlingStrategy",
]
