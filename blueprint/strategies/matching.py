"""
Matching strategies - predicates deciding whether an override applies.

A matching strategy is asked about three kinds of candidates: a field-like
member (public attribute or initializer parameter), a method-like member
(mutator or capability) and a bare type. Strategies are stateless.
"""

import enum
import inspect
import typing
from typing import Any, Callable, Optional, get_origin

from .. import check
from ..shapes import Member, normalize, target_class


class MatchingStrategy:
    """Base matching strategy - matches nothing."""

    def matches_by_field(self, member: Member) -> bool:
        return False

    def matches_by_method(self, member: Member) -> bool:
        return False

    def matches_by_type(self, tp: Any) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TypeMatchingStrategy(MatchingStrategy):
    """Matches exactly one type descriptor."""

    __slots__ = ("_type",)

    def __init__(self, tp: Any):
        self._type = normalize(check.not_none(tp, "tp"))

    def matches_by_type(self, tp: Any) -> bool:
        return normalize(check.not_none(tp, "tp")) == self._type

    def __repr__(self) -> str:
        return f"TypeMatchingStrategy({self._type!r})"


class SubtypeMatchingStrategy(MatchingStrategy):
    """Matches a base class and every class deriving from it."""

    __slots__ = ("_base",)

    def __init__(self, base: type):
        self._base = check.not_none(base, "base")

    def matches_by_type(self, tp: Any) -> bool:
        cls = target_class(normalize(check.not_none(tp, "tp")))
        return isinstance(cls, type) and issubclass(cls, self._base)

    def __repr__(self) -> str:
        return f"SubtypeMatchingStrategy({self._base.__qualname__})"


class AbstractTypeMatchingStrategy(MatchingStrategy):
    """Matches abstract classes (partial implementations and interfaces)."""

    def matches_by_type(self, tp: Any) -> bool:
        cls = target_class(normalize(check.not_none(tp, "tp")))
        return isinstance(cls, type) and inspect.isabstract(cls)


class EnumMatchingStrategy(MatchingStrategy):
    """Matches every enumeration type."""

    def matches_by_type(self, tp: Any) -> bool:
        tp = normalize(check.not_none(tp, "tp"))
        return isinstance(tp, type) and issubclass(tp, enum.Enum)


class LiteralMatchingStrategy(MatchingStrategy):
    """Matches ``Literal[...]`` descriptors."""

    def matches_by_type(self, tp: Any) -> bool:
        return get_origin(normalize(check.not_none(tp, "tp"))) is typing.Literal


class CaseInsensitiveNameMatchingStrategy(MatchingStrategy):
    """
    Matches members by name, ignoring case and underscores.

    For method-like members a leading ``set``/``get``/``is`` is ignored too,
    so ``"email"`` matches ``email``, ``set_email``, ``setEmail`` and a
    capability ``get_email()``.
    """

    __slots__ = ("_name",)

    _ACCESSOR_PREFIXES = ("set", "get", "is")

    def __init__(self, name: str):
        check.not_none(name, "name")
        check.state_is_true(bool(name.strip()), "Argument 'name' must not be empty")
        self._name = self._fold(name)

    @staticmethod
    def _fold(name: str) -> str:
        return name.replace("_", "").lower()

    def matches_by_field(self, member: Member) -> bool:
        return self._fold(check.not_none(member, "member").name) == self._name

    def matches_by_method(self, member: Member) -> bool:
        folded = self._fold(check.not_none(member, "member").name)
        if folded == self._name:
            return True
        for prefix in self._ACCESSOR_PREFIXES:
            if folded.startswith(prefix) and folded[len(prefix):] == self._name:
                return True
        return False

    def __repr__(self) -> str:
        return f"CaseInsensitiveNameMatchingStrategy({self._name!r})"


class PredicateMatchingStrategy(MatchingStrategy):
    """Adapts plain callables into a matching strategy."""

    __slots__ = ("_type_predicate", "_member_predicate")

    def __init__(
        self,
        type_predicate: Optional[Callable[[Any], bool]] = None,
        member_predicate: Optional[Callable[[Member], bool]] = None,
    ):
        check.state_is_true(
            type_predicate is not None or member_predicate is not None,
            "At least one predicate is required",
        )
        self._type_predicate = type_predicate
        self._member_predicate = member_predicate

    def matches_by_field(self, member: Member) -> bool:
        return self._member_predicate is not None and bool(self._member_predicate(member))

    def matches_by_method(self, member: Member) -> bool:
        return self._member_predicate is not None and bool(self._member_predicate(member))

    def matches_by_type(self, tp: Any) -> bool:
        return self._type_predicate is not None and bool(self._type_predicate(tp))
