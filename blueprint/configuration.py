"""
Blueprint configuration - override registries and flags.

A ``Configuration`` never changes after construction: every ``with_*``
call returns a new configuration, so one instance can be shared between
tests and threads. The random source and the diagnostics hub are
collaborators, not settings: derived configurations share them by
reference until ``with_random_source`` / ``with_diagnostics`` replaces
them, so a listener added to ``config.diagnostics`` also observes every
configuration derived from ``config`` (and its parent).

Lookup order (highest priority first):
1. Exact-type overrides (``with_type`` / ``with_value`` / ``with_factory``)
2. Ordered strategy pairs, in insertion order, first match wins
3. Structural classification in the engine
"""

import copy
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, TypeVar

from . import check
from .diagnostics import BlueprintDiagnostics
from .delegate import InvocationHandler, RefreshingInvocationHandler
from .randomness import RandomSource, coerce_random_source
from .shapes import Member, MemberKind, normalize
from .strategies.creation import (
    BlueprintCreationStrategy,
    CreationStrategy,
    FactoryCreationStrategy,
    SingleValueCreationStrategy,
    coerce_creation_strategy,
)
from .strategies.cycle import CycleHandlingStrategy, RaisingCycleHandlingStrategy
from .strategies.matching import CaseInsensitiveNameMatchingStrategy, MatchingStrategy


T = TypeVar("T")

MAX_ARRAY_SIZE = 7

_DEFAULT_INVOCATION_HANDLER = RefreshingInvocationHandler()


@dataclass(frozen=True)
class StrategyPair:
    """A matching strategy and the creation strategy it unlocks."""
    matching: MatchingStrategy
    creation: CreationStrategy


class Configuration:
    """
    Immutable blueprint configuration.

    Example:
        config = (
            default_config()
            .with_value(Currency, Currency.EUR)
            .with_name("email", "mail@example.com")
        )
        user = config.construct(User)
    """

    __slots__ = (
        "_type_overrides",
        "_pairs",
        "_invocation_handlers",
        "_cycle_handlers",
        "_public_attributes",
        "_max_array_size",
        "_random_source",
        "_diagnostics",
    )

    def __init__(
        self,
        *,
        public_attributes: bool = False,
        max_array_size: int = MAX_ARRAY_SIZE,
        random_source: Optional[RandomSource] = None,
        diagnostics: Optional[BlueprintDiagnostics] = None,
    ):
        check.state_is_true(max_array_size >= 1, "max_array_size must be at least 1")
        self._type_overrides: Dict[Any, CreationStrategy] = {}
        self._pairs: Tuple[StrategyPair, ...] = ()
        self._invocation_handlers: Dict[Any, InvocationHandler] = {}
        self._cycle_handlers: Dict[Any, CycleHandlingStrategy] = {}
        self._public_attributes = public_attributes
        self._max_array_size = max_array_size
        self._random_source = random_source or RandomSource()
        self._diagnostics = diagnostics or BlueprintDiagnostics()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def type_overrides(self) -> Mapping[Any, CreationStrategy]:
        return types.MappingProxyType(self._type_overrides)

    @property
    def strategy_pairs(self) -> Tuple[StrategyPair, ...]:
        return self._pairs

    @property
    def public_attributes(self) -> bool:
        """Whether public attributes are filled during blueprinting."""
        return self._public_attributes

    @property
    def max_array_size(self) -> int:
        return self._max_array_size

    @property
    def random_source(self) -> RandomSource:
        return self._random_source

    @property
    def diagnostics(self) -> BlueprintDiagnostics:
        return self._diagnostics

    # ------------------------------------------------------------------
    # Fluent API
    # ------------------------------------------------------------------

    def _evolve(self, **changes: Any) -> "Configuration":
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, f"_{name}", value)
        return clone

    def with_type(self, tp: Any, strategy: Any) -> "Configuration":
        """
        Replace every value of exactly type ``tp``.

        Args:
            tp: Type descriptor
            strategy: A ``CreationStrategy``, or a plain value to reuse

        Returns:
            The changed configuration
        """
        key = normalize(check.not_none(tp, "tp"))
        overrides = dict(self._type_overrides)
        overrides[key] = coerce_creation_strategy(strategy)
        return self._evolve(type_overrides=overrides)

    def with_value(self, tp: Any, value: Any) -> "Configuration":
        """Replace every value of exactly type ``tp`` with ``value`` (``None`` allowed)."""
        return self.with_type(tp, SingleValueCreationStrategy(value))

    def with_factory(self, tp: Any, factory: Callable[[], Any]) -> "Configuration":
        """Call ``factory()`` for every value of exactly type ``tp``."""
        return self.with_type(tp, FactoryCreationStrategy(factory))

    def with_pair(self, matching: MatchingStrategy, creation: Any) -> "Configuration":
        """Append a (matching, creation) pair; earlier pairs win."""
        check.not_none(matching, "matching")
        check.not_none(creation, "creation")
        pair = StrategyPair(matching, coerce_creation_strategy(creation))
        return self._evolve(pairs=self._pairs + (pair,))

    def with_name(self, name: str, value: Any) -> "Configuration":
        """Replace every member called ``name`` (case insensitive) with ``value``."""
        return self.with_pair(CaseInsensitiveNameMatchingStrategy(name), value)

    def with_blueprint(self, matching: MatchingStrategy) -> "Configuration":
        """Materialize whatever ``matching`` selects structurally, ignoring later overrides."""
        return self.with_pair(matching, BlueprintCreationStrategy())

    def with_cycle_handler(self, strategy: CycleHandlingStrategy) -> "Configuration":
        """Handle cycles on ``strategy.type`` with ``strategy`` instead of failing."""
        check.not_none(strategy, "strategy")
        handlers = dict(self._cycle_handlers)
        handlers[strategy.type] = strategy
        return self._evolve(cycle_handlers=handlers)

    def with_invocation_handler(self, iface: Any, handler: InvocationHandler) -> "Configuration":
        """Use ``handler`` for capability invocations on delegates of ``iface``."""
        key = normalize(check.not_none(iface, "iface"))
        check.not_none(handler, "handler")
        handlers = dict(self._invocation_handlers)
        handlers[key] = handler
        return self._evolve(invocation_handlers=handlers)

    def with_public_attributes(self, enabled: bool = True) -> "Configuration":
        """Toggle population of public attributes."""
        return self._evolve(public_attributes=bool(enabled))

    def with_max_array_size(self, size: int) -> "Configuration":
        check.not_negative(size, "size")
        check.state_is_true(size >= 1, "Argument 'size' must be at least 1")
        return self._evolve(max_array_size=size)

    def with_random_source(self, source: Any) -> "Configuration":
        """Use a ``RandomSource`` (or a fresh one from an int seed)."""
        return self._evolve(random_source=coerce_random_source(source))

    def with_diagnostics(self, diagnostics: BlueprintDiagnostics) -> "Configuration":
        return self._evolve(diagnostics=check.not_none(diagnostics, "diagnostics"))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_creation_strategy_for_type(self, tp: Any) -> Optional[CreationStrategy]:
        """Exact-type override first, then the first pair matching by type."""
        tp = check.hashable(normalize(check.not_none(tp, "tp")), "tp")
        strategy = self._type_overrides.get(tp)
        if strategy is not None:
            return strategy
        for pair in self._pairs:
            if pair.matching.matches_by_type(tp):
                return pair.creation
        return None

    def find_creation_strategy_for_field(self, member: Member) -> Optional[CreationStrategy]:
        check.not_none(member, "member")
        for pair in self._pairs:
            if pair.matching.matches_by_field(member):
                return pair.creation
        return None

    def find_creation_strategy_for_method(self, member: Member) -> Optional[CreationStrategy]:
        check.not_none(member, "member")
        for pair in self._pairs:
            if pair.matching.matches_by_method(member):
                return pair.creation
        return None

    def find_creation_strategy_for_member(self, member: Member) -> Optional[CreationStrategy]:
        """Member-level override, asked field-like or method-like by member kind."""
        check.not_none(member, "member")
        if member.kind in (MemberKind.FIELD, MemberKind.PARAMETER):
            return self.find_creation_strategy_for_field(member)
        return self.find_creation_strategy_for_method(member)

    def find_invocation_handler(self, iface: Any) -> InvocationHandler:
        return self._invocation_handlers.get(normalize(iface), _DEFAULT_INVOCATION_HANDLER)

    def find_cycle_handling_strategy(self, tp: Any) -> CycleHandlingStrategy:
        tp = normalize(check.not_none(tp, "tp"))
        strategy = self._cycle_handlers.get(tp)
        if strategy is None:
            return RaisingCycleHandlingStrategy(tp)
        return strategy

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    def construct(self, tp: Any) -> Any:
        """Materialize ``tp`` with this configuration."""
        from .engine import materialize
        return materialize(tp, self)

    def __repr__(self) -> str:
        return (
            f"Configuration(overrides={len(self._type_overrides)}, "
            f"pairs={len(self._pairs)}, public_attributes={self._public_attributes}, "
            f"max_array_size={self._max_array_size}, random_source={self._random_source!r})"
        )
