"""
Blueprint - synthetic object graphs for tests.

Give it a type, get back a populated instance, without writing a fixture.

Key Features:
- Classification of any annotated class into a closed set of shapes
- Recursive population of initializer parameters, setters and attributes
- Cycle detection with per-type cycle handlers
- Priority-ordered overrides: exact type, then matching pairs, then structure
- Lazy delegates for Protocols and pure ABCs
- Deterministic and seeded random presets

Example:
    from blueprint import default_config

    user = default_config().with_name("email", "mail@example.com").construct(User)
"""

__version__ = "1.0.0"

from .errors import (
    BlueprintError,
    InvalidArgumentError,
    UnsupportedShapeError,
    CycleDetectedError,
    ConstructionFailedError,
)

from .shapes import (
    TypeShape,
    MemberKind,
    Member,
    classify,
)

from .session import BlueprintSession

from .randomness import RandomSource

from .configuration import (
    MAX_ARRAY_SIZE,
    Configuration,
    StrategyPair,
)

from .delegate import (
    InvocationHandler,
    RefreshingInvocationHandler,
    CachedInvocationHandler,
    build_delegate,
)

from .engine import (
    materialize,
    materialize_structure,
    enumeration,
    default_config,
    random_config,
)

from .presets import (
    default_configuration,
    random_configuration,
)

from .containers import (
    add_many,
    list_of,
    set_of,
    dict_of,
)

from .diagnostics import (
    BlueprintDiagnostics,
    BlueprintEvent,
    BlueprintEventType,
    DiagnosticListener,
    LoggingDiagnosticListener,
)

from .settings import BlueprintSettings

__all__ = [
    # Errors
    "BlueprintError",
    "InvalidArgumentError",
    "UnsupportedShapeError",
    "CycleDetectedError",
    "ConstructionFailedError",

    # Shapes
    "TypeShape",
    "MemberKind",
    "Member",
    "classify",

    # Core
    "BlueprintSession",
    "RandomSource",
    "MAX_ARRAY_SIZE",
    "Configuration",
    "StrategyPair",
    "materialize",
    "materialize_structure",
    "enumeration",
    "default_config",
    "random_config",
    "default_configuration",
    "random_configuration",

    # Delegates
    "InvocationHandler",
    "RefreshingInvocationHandler",
    "CachedInvocationHandler",
    "build_delegate",

    # Containers
    "add_many",
    "list_of",
    "set_of",
    "dict_of",

    # Diagnostics
    "BlueprintDiagnostics",
    "BlueprintEvent",
    "BlueprintEventType",
    "DiagnosticListener",
    "LoggingDiagnosticListener",

    # Settings
    "BlueprintSettings",
]
