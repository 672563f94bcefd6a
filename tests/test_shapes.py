"""
Tests for type classification and member discovery.
"""

import abc
import collections
import collections.abc
import decimal
import enum
import typing
from dataclasses import dataclass
from typing import ClassVar, Literal, Optional, Protocol, TypeVar, Union

import pytest

from blueprint.errors import UnsupportedShapeError
from blueprint.shapes import (
    MISSING,
    MemberKind,
    NoneType,
    TypeShape,
    classify,
    discover_capabilities,
    discover_mutators,
    discover_public_attributes,
    initializer_members,
    is_pure_capability,
    is_setter_name,
    normalize,
    union_arms,
)


# ============================================================================
# Sample types
# ============================================================================

class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Greeter(Protocol):
    def greet(self) -> str:
        ...


class Dispatcher(Protocol):
    def __call__(self, event: str) -> bool:
        ...

    def __len__(self) -> int:
        ...

    @classmethod
    def create(cls) -> "Dispatcher":
        ...


class Clock(abc.ABC):
    @abc.abstractmethod
    def now(self) -> int:
        ...

    @property
    @abc.abstractmethod
    def zone(self) -> str:
        ...


class Shape(abc.ABC):
    def describe(self) -> str:
        return "shape"

    @abc.abstractmethod
    def area(self) -> float:
        ...


class Empty:
    pass


class Person:
    def __init__(self):
        self.name = None
        self.age = None

    def set_name(self, name: str) -> None:
        self.name = name

    def setAge(self, age: int) -> None:
        self.age = age

    def settle(self, amount: int) -> None:
        pass

    def set_untyped(self, value) -> None:
        pass

    def set_pair(self, first: int, second: int) -> None:
        pass

    @property
    def nickname(self) -> str:
        return self.name

    @nickname.setter
    def nickname(self, value: str) -> None:
        self.name = value

    @property
    def read_only(self) -> int:
        return 1


@dataclass
class Customer:
    name: str
    age: int
    tier: Color = Color.RED


class Legacy:
    def __init__(self, value, flag: bool = False, *args, **kwargs):
        self.value = value


class Record:
    counter: ClassVar[int] = 0
    title: str
    _secret: str

    def __init__(self, title: str):
        self.title = title

    def render(self) -> str:
        return self.title


T = TypeVar("T")


# ============================================================================
# Classification
# ============================================================================

class TestClassify:

    @pytest.mark.parametrize("tp", [bool, int, float, complex, str, bytes, bytearray, decimal.Decimal, None])
    def test_primitives(self, tp):
        assert classify(tp) is TypeShape.PRIMITIVE

    def test_enum(self):
        assert classify(Color) is TypeShape.ENUM

    @pytest.mark.parametrize("tp", [
        list[int],
        tuple[int, str],
        tuple[int, ...],
        set[str],
        frozenset[int],
        collections.deque[int],
        typing.List[int],
        typing.Sequence[int],
        collections.abc.Iterable[int],
        dict[str, int],
        typing.Mapping[str, int],
        collections.OrderedDict[str, int],
    ])
    def test_containers(self, tp):
        assert classify(tp) is TypeShape.ARRAY

    @pytest.mark.parametrize("tp", [list, dict, set, tuple, collections.deque])
    def test_bare_containers_are_default_constructible(self, tp):
        assert classify(tp) is TypeShape.DEFAULT_CONSTRUCTIBLE

    def test_protocol_is_capability_set(self):
        assert classify(Greeter) is TypeShape.CAPABILITY_SET

    def test_pure_abc_is_capability_set(self):
        assert is_pure_capability(Clock)
        assert classify(Clock) is TypeShape.CAPABILITY_SET

    def test_partial_abc_is_abstract(self):
        assert not is_pure_capability(Shape)
        assert classify(Shape) is TypeShape.ABSTRACT

    def test_default_constructible(self):
        assert classify(Person) is TypeShape.DEFAULT_CONSTRUCTIBLE
        assert classify(Empty) is TypeShape.DEFAULT_CONSTRUCTIBLE

    def test_parameterized_constructible(self):
        assert classify(Customer) is TypeShape.PARAMETERIZED_CONSTRUCTIBLE
        assert classify(Legacy) is TypeShape.PARAMETERIZED_CONSTRUCTIBLE

    def test_union_and_literal(self):
        assert classify(Optional[int]) is TypeShape.UNION
        assert classify(int | str) is TypeShape.UNION
        assert classify(Union[int, str]) is TypeShape.UNION
        assert classify(Literal["a", "b"]) is TypeShape.LITERAL

    def test_annotated_is_stripped(self):
        assert classify(typing.Annotated[int, "meta"]) is TypeShape.PRIMITIVE

    @pytest.mark.parametrize("tp", [typing.Any, T, "Person"])
    def test_non_types_are_unsupported(self, tp):
        with pytest.raises(UnsupportedShapeError):
            classify(tp)


class TestNormalize:

    def test_none_becomes_none_type(self):
        assert normalize(None) is NoneType

    def test_union_arms_drop_none(self):
        assert union_arms(Optional[int]) == [int]
        assert union_arms(int | str | None) == [int, str]


# ============================================================================
# Member discovery
# ============================================================================

class TestSetterNames:

    @pytest.mark.parametrize("name", ["set_name", "setName", "set_x"])
    def test_setter_names(self, name):
        assert is_setter_name(name)

    @pytest.mark.parametrize("name", ["set", "set_", "settle", "setdefault", "reset_name"])
    def test_non_setter_names(self, name):
        assert not is_setter_name(name)


class TestDiscoverMutators:

    def test_typed_setters_and_properties_in_lexical_order(self):
        members = discover_mutators(Person)
        assert [member.name for member in members] == ["nickname", "setAge", "set_name"]

    def test_member_details(self):
        members = {member.name: member for member in discover_mutators(Person)}
        assert members["set_name"].type is str
        assert members["set_name"].kind is MemberKind.METHOD
        assert members["setAge"].type is int
        assert members["nickname"].is_property

    def test_assign_calls_setter(self):
        person = Person()
        members = {member.name: member for member in discover_mutators(Person)}
        members["set_name"].assign(person, "Ada")
        members["nickname"].assign(person, "Grace")
        assert person.name == "Grace"


class TestDiscoverPublicAttributes:

    def test_skips_private_class_vars_and_methods(self):
        members = discover_public_attributes(Record)
        assert [member.name for member in members] == ["title"]
        assert members[0].kind is MemberKind.FIELD

    def test_dataclass_fields(self):
        names = [member.name for member in discover_public_attributes(Customer)]
        assert names == ["age", "name", "tier"]


class TestInitializerMembers:

    def test_declaration_order(self):
        members = initializer_members(Customer)
        assert [member.name for member in members] == ["name", "age", "tier"]
        assert [member.type for member in members] == [str, int, Color]
        assert all(member.kind is MemberKind.PARAMETER for member in members)

    def test_untyped_parameters(self):
        members = initializer_members(Legacy)
        assert [member.name for member in members] == ["value", "flag"]
        assert members[0].type is MISSING
        assert not members[0].is_typed
        assert members[1].type is bool


class TestDiscoverCapabilities:

    def test_protocol_methods(self):
        members = discover_capabilities(Greeter)
        assert [member.name for member in members] == ["greet"]
        assert members[0].type is str
        assert members[0].kind is MemberKind.CAPABILITY

    def test_abc_methods_and_properties(self):
        members = {member.name: member for member in discover_capabilities(Clock)}
        assert set(members) == {"now", "zone"}
        assert members["zone"].is_property
        assert members["now"].type is int

    def test_protocol_dunders_and_class_methods(self):
        members = {member.name: member for member in discover_capabilities(Dispatcher)}
        assert set(members) == {"__call__", "__len__", "create"}
        assert members["__call__"].type is bool
        assert members["create"].binding is classmethod
        assert members["create"].type is Dispatcher
        assert members["__call__"].binding is None
