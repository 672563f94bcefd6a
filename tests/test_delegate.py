"""
Tests for capability-set delegates.
"""

import abc
import datetime
import functools
from dataclasses import dataclass
from typing import List, Protocol, runtime_checkable

import pytest

from blueprint import (
    CachedInvocationHandler,
    RefreshingInvocationHandler,
    build_delegate,
    default_config,
    materialize,
    random_config,
)
from blueprint.errors import ConstructionFailedError, CycleDetectedError, UnsupportedShapeError
from blueprint.strategies import (
    FactoryCreationStrategy,
    PredicateMatchingStrategy,
    ValueCycleHandlingStrategy,
)


class Token:
    def __init__(self, value: str):
        self.value = value


@runtime_checkable
class TokenSource(Protocol):
    def issue(self) -> Token:
        ...

    def issue_many(self, count: int) -> List[Token]:
        ...

    def revoke(self, token: Token) -> None:
        ...


class Named(Protocol):
    name: str

    def describe(self):
        ...


class Clock(abc.ABC):
    @abc.abstractmethod
    def now(self) -> datetime.datetime:
        ...

    @property
    @abc.abstractmethod
    def zone(self) -> str:
        ...

    @abc.abstractmethod
    def __call__(self) -> int:
        ...


class Registry(Protocol):
    def lookup(self) -> "Registry":
        ...


@dataclass
class Chain:
    next: "Chain"


class ChainSource(Protocol):
    def head(self) -> Chain:
        ...


class Handler(Protocol):
    def __call__(self, request: int) -> str:
        ...


class Catalog(Protocol):
    @classmethod
    def default_name(cls) -> str:
        ...

    @staticmethod
    def size() -> int:
        ...


class Factory(abc.ABC):
    @staticmethod
    @abc.abstractmethod
    def create() -> int:
        ...

    @classmethod
    @abc.abstractmethod
    def label(cls) -> str:
        ...


class Opaque(abc.ABC):
    build = abc.abstractmethod(functools.partial(int))


class TestCapabilitySets:

    def test_delegate_satisfies_protocol(self):
        source = materialize(TokenSource, default_config())
        assert isinstance(source, TokenSource)
        assert isinstance(source.issue(), Token)
        assert source.issue().value == ""

    def test_container_return_type(self):
        tokens = materialize(TokenSource, random_config()).issue_many(3)
        assert 1 <= len(tokens) <= 7
        assert all(isinstance(token, Token) for token in tokens)

    def test_none_return(self):
        source = materialize(TokenSource, default_config())
        assert source.revoke(Token("x")) is None

    def test_unannotated_return(self):
        assert materialize(Named, default_config()).describe() is None

    def test_protocol_attribute_is_property(self):
        delegate = materialize(Named, default_config())
        assert Named in type(delegate).__mro__
        assert delegate.name == ""

    def test_pure_abc(self):
        clock = materialize(Clock, default_config())
        assert isinstance(clock, Clock)
        assert clock.now() == datetime.datetime(1970, 1, 1)
        assert clock.zone == ""
        assert clock() == 0

    def test_delegate_repr(self):
        assert repr(materialize(Clock, default_config())) == "<ClockBlueprint delegate>"

    def test_self_returning_capability(self):
        registry = materialize(Registry, default_config())
        assert Registry in type(registry.lookup()).__mro__


class TestLaziness:

    def test_nothing_computed_before_first_invocation(self):
        calls = []
        config = default_config().with_factory(Token, lambda: calls.append(1) or Token("t"))

        source = materialize(TokenSource, config)
        assert calls == []

        source.issue()
        assert calls == [1]

    def test_refreshing_handler_recomputes(self):
        calls = []
        config = default_config().with_factory(Token, lambda: calls.append(1) or Token(str(len(calls))))
        source = materialize(TokenSource, config)
        assert source.issue().value == "1"
        assert source.issue().value == "2"

    def test_cached_handler_memoizes(self):
        calls = []
        config = (
            default_config()
            .with_factory(Token, lambda: calls.append(1) or Token("t"))
            .with_invocation_handler(TokenSource, CachedInvocationHandler())
        )
        source = materialize(TokenSource, config)
        first = source.issue()
        assert source.issue() is first
        assert calls == [1]

    def test_cache_is_per_delegate(self):
        config = default_config().with_invocation_handler(TokenSource, CachedInvocationHandler())
        first = materialize(TokenSource, config)
        second = materialize(TokenSource, config)
        assert first.issue() is not second.issue()


class TestMethodOverrides:

    def test_method_level_override(self):
        config = default_config().with_name("issue", Token("fixed"))
        assert materialize(TokenSource, config).issue().value == "fixed"

    def test_property_override(self):
        config = default_config().with_name("zone", "UTC")
        assert materialize(Clock, config).zone == "UTC"

    def test_explicit_handler(self):
        class Constant(RefreshingInvocationHandler):
            def invoke(self, delegate, member, config):
                return member.name

        clock = build_delegate(Clock, default_config(), handler=Constant())
        assert clock.now() == "now"

    def test_value_override_may_be_none(self):
        config = default_config().with_value(Token, None)
        assert materialize(TokenSource, config).issue() is None

    def test_errors_surface_at_invocation(self):
        source = materialize(ChainSource, default_config())
        with pytest.raises(CycleDetectedError):
            source.head()

    def test_cycle_handler_applies_inside_invocation(self):
        config = default_config().with_cycle_handler(ValueCycleHandlingStrategy(Chain, "end"))
        assert materialize(ChainSource, config).head().next == "end"

    def test_failing_method_override_is_wrapped(self):
        def boom():
            raise RuntimeError("boom")

        config = default_config().with_pair(
            PredicateMatchingStrategy(member_predicate=lambda member: member.name == "issue"),
            FactoryCreationStrategy(boom),
        )
        source = materialize(TokenSource, config)
        with pytest.raises(ConstructionFailedError) as exc_info:
            source.issue()

        assert exc_info.value.member == "issue"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestDeclaredMembers:

    def test_callable_protocol(self):
        handler = materialize(Handler, default_config())
        assert handler(1) == ""

    def test_callable_protocol_override(self):
        config = default_config().with_name("__call__", "handled")
        assert materialize(Handler, config)(7) == "handled"

    def test_protocol_static_and_class_methods(self):
        catalog = materialize(Catalog, default_config())
        assert catalog.default_name() == ""
        assert type(catalog).default_name() == ""
        assert catalog.size() == 0

    def test_abstract_static_and_class_methods(self):
        factory = materialize(Factory, default_config())
        assert isinstance(factory, Factory)
        assert factory.create() == 0
        assert type(factory).label() == ""

    def test_cached_static_capability(self):
        config = random_config(2).with_invocation_handler(Factory, CachedInvocationHandler())
        factory = materialize(Factory, config)
        assert factory.create() == type(factory).create()

    def test_undelegatable_abstract_member(self):
        with pytest.raises(UnsupportedShapeError, match="build"):
            materialize(Opaque, default_config())
