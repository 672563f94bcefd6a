"""
Type classification and member discovery.

Every type descriptor is classified once into a closed set of shapes
(``TypeShape``); the engine dispatches on that tag. Member discovery
(mutators, public attributes, initializer parameters, capabilities) is
deterministic: members come back in lexical name order, parameters in
declaration order.
"""

import abc
import collections
import collections.abc as cabc
import decimal
import enum
import inspect
import types
import typing
from dataclasses import InitVar, dataclass, field
from typing import Any, Dict, List, Optional, Tuple, get_args, get_origin, get_type_hints

from .errors import UnsupportedShapeError


NoneType = type(None)

# Sentinel for members whose type cannot be determined
MISSING = inspect.Parameter.empty

SETTER_PREFIX = "set"

PRIMITIVE_TYPES = frozenset((
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    decimal.Decimal,
    NoneType,
))

# Container alias origin -> concrete type to build
SEQUENCE_ORIGINS: Dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.deque: collections.deque,
    cabc.Sequence: list,
    cabc.MutableSequence: list,
    cabc.Collection: list,
    cabc.Iterable: list,
    cabc.Set: frozenset,
    cabc.MutableSet: set,
}

MAPPING_ORIGINS: Dict[Any, type] = {
    dict: dict,
    collections.OrderedDict: collections.OrderedDict,
    collections.defaultdict: collections.defaultdict,
    cabc.Mapping: dict,
    cabc.MutableMapping: dict,
}

# Bare containers are built empty through their zero-argument initializer
BARE_CONTAINERS = frozenset((
    list,
    tuple,
    set,
    frozenset,
    dict,
    collections.deque,
    collections.OrderedDict,
    collections.defaultdict,
))

_INTERFACE_ROOTS = (object, typing.Generic, typing.Protocol, abc.ABC)

# Dunders typing and abc install on protocol classes, or that must keep
# their inherited behavior on a delegate
_PROTOCOL_PLUMBING = frozenset((
    "__init__",
    "__new__",
    "__init_subclass__",
    "__class_getitem__",
    "__subclasshook__",
    "__getattr__",
    "__getattribute__",
    "__setattr__",
    "__delattr__",
    "__repr__",
))

_UNION_ORIGINS = tuple(
    origin for origin in (typing.Union, getattr(types, "UnionType", None)) if origin is not None
)


class TypeShape(str, enum.Enum):
    """Construction path selected for a type descriptor."""

    PRIMITIVE = "primitive"
    ENUM = "enum"
    ARRAY = "array"
    CAPABILITY_SET = "capability_set"
    ABSTRACT = "abstract"
    DEFAULT_CONSTRUCTIBLE = "default_constructible"
    PARAMETERIZED_CONSTRUCTIBLE = "parameterized_constructible"
    UNION = "union"
    LITERAL = "literal"


class MemberKind(str, enum.Enum):
    """Where a member value ends up."""

    FIELD = "field"            # public attribute, set with setattr
    METHOD = "method"          # set_x(value) mutator or property setter
    PARAMETER = "parameter"    # initializer parameter
    CAPABILITY = "capability"  # method/property of a capability set


@dataclass(frozen=True)
class Member:
    """A settable (or, for capabilities, invocable) member of a type."""

    name: str
    type: Any
    kind: MemberKind
    owner: Any = None
    is_property: bool = False
    parameter: Optional[inspect.Parameter] = field(default=None, compare=False)
    # staticmethod or classmethod for capabilities declared as such
    binding: Optional[type] = field(default=None, compare=False)

    @property
    def is_typed(self) -> bool:
        return self.type is not MISSING

    def assign(self, instance: Any, value: Any) -> None:
        """Apply ``value`` to ``instance`` through this member."""
        if self.kind is MemberKind.METHOD and not self.is_property:
            getattr(instance, self.name)(value)
        else:
            setattr(instance, self.name, value)


# ============================================================================
# Normalization
# ============================================================================

def normalize(tp: Any) -> Any:
    """Map ``None`` to ``NoneType`` and strip ``Annotated`` metadata."""
    if tp is None:
        return NoneType
    if get_origin(tp) is typing.Annotated:
        return normalize(get_args(tp)[0])
    return tp


def target_class(tp: Any) -> Any:
    """Runtime class behind a descriptor (``Foo[int]`` -> ``Foo``)."""
    origin = get_origin(tp)
    if isinstance(origin, type):
        return origin
    return tp


def is_union(tp: Any) -> bool:
    return get_origin(tp) in _UNION_ORIGINS


# ============================================================================
# Classification
# ============================================================================

def classify(tp: Any) -> TypeShape:
    """
    Classify a type descriptor.

    Raises:
        UnsupportedShapeError: If the descriptor is not a type at all
            (``TypeVar``, ``Any``, unresolved forward reference, ...)
    """
    tp = normalize(tp)
    origin = get_origin(tp)

    if origin is not None:
        if origin in _UNION_ORIGINS:
            return TypeShape.UNION
        if origin is typing.Literal:
            return TypeShape.LITERAL
        if origin in SEQUENCE_ORIGINS or origin in MAPPING_ORIGINS:
            return TypeShape.ARRAY
        if isinstance(origin, type):
            return classify(origin)
        raise UnsupportedShapeError(tp, f"unsupported type construct {origin!r}")

    if tp is typing.Any or not isinstance(tp, type):
        raise UnsupportedShapeError(tp, "not a type")

    if issubclass(tp, enum.Enum):
        return TypeShape.ENUM
    if tp in PRIMITIVE_TYPES:
        return TypeShape.PRIMITIVE
    if tp in BARE_CONTAINERS:
        return TypeShape.DEFAULT_CONSTRUCTIBLE
    if getattr(tp, "_is_protocol", False):
        return TypeShape.CAPABILITY_SET
    if inspect.isabstract(tp):
        if is_pure_capability(tp):
            return TypeShape.CAPABILITY_SET
        return TypeShape.ABSTRACT

    parameters = initializer_signature(tp)
    if parameters is None:
        return TypeShape.PARAMETERIZED_CONSTRUCTIBLE
    if any(param.default is inspect.Parameter.empty for param in parameters):
        return TypeShape.PARAMETERIZED_CONSTRUCTIBLE
    return TypeShape.DEFAULT_CONSTRUCTIBLE


def is_pure_capability(cls: type) -> bool:
    """
    Check if an abstract class is a pure interface.

    Pure means: no initializer, no annotations and no concrete methods or
    data anywhere in its own hierarchy; only abstract members.
    """
    abstract = getattr(cls, "__abstractmethods__", frozenset())
    for klass in cls.__mro__:
        if klass in _INTERFACE_ROOTS:
            continue
        own = vars(klass)
        if "__init__" in own or inspect.get_annotations(klass):
            return False
        for name in own:
            if _is_dunder(name) or name.startswith("_abc_"):
                continue
            if name not in abstract:
                return False
    return True


# ============================================================================
# Type hint resolution
# ============================================================================

def resolve_hints(obj: Any, owner: Any) -> Dict[str, Any]:
    """
    Resolve annotations of a class or function.

    Raises:
        UnsupportedShapeError: If a forward reference cannot be resolved
    """
    try:
        return get_type_hints(obj)
    except (NameError, AttributeError) as exc:
        raise UnsupportedShapeError(owner, f"cannot resolve annotations: {exc}") from exc
    except TypeError:
        # Builtins and C slot wrappers carry no annotations
        return {}


def initializer_signature(cls: type) -> Optional[List[inspect.Parameter]]:
    """
    Parameters of the class initializer, or None if not introspectable.

    Python classes expose a single initializer; ``*args``/``**kwargs`` are
    dropped.
    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return None
    return [
        param for param in signature.parameters.values()
        if param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


def initializer_members(tp: Any) -> Optional[List[Member]]:
    """Initializer parameters as ``PARAMETER`` members, in declaration order."""
    cls = target_class(tp)
    parameters = initializer_signature(cls)
    if parameters is None:
        return None

    hints: Dict[str, Any] = {}
    hints.update(resolve_hints(cls, cls))
    if inspect.isfunction(cls.__init__):
        hints.update(resolve_hints(cls.__init__, cls))

    members = []
    for param in parameters:
        annotation = hints.get(param.name, param.annotation)
        if isinstance(annotation, str):
            raise UnsupportedShapeError(
                cls, f"cannot resolve annotation {annotation!r} of parameter '{param.name}'"
            )
        if isinstance(annotation, InitVar):
            annotation = annotation.type
        members.append(Member(
            name=param.name,
            type=normalize(annotation) if annotation is not MISSING else MISSING,
            kind=MemberKind.PARAMETER,
            owner=cls,
            parameter=param,
        ))
    return members


# ============================================================================
# Member discovery
# ============================================================================

def is_setter_name(name: str) -> bool:
    """``set_value`` and ``setValue`` qualify; ``setdefault`` does not."""
    if not name.startswith(SETTER_PREFIX) or len(name) <= len(SETTER_PREFIX):
        return False
    rest = name[len(SETTER_PREFIX):]
    if rest.startswith("_"):
        return len(rest) > 1
    return rest[0].isupper()


def discover_mutators(tp: Any) -> List[Member]:
    """Public setter methods and writable properties with a known type."""
    cls = target_class(tp)
    members = []
    for name in sorted(dir(cls)):
        if name.startswith("_"):
            continue
        try:
            raw = inspect.getattr_static(cls, name)
        except AttributeError:
            continue

        if isinstance(raw, property):
            if raw.fset is None:
                continue
            member_type = _property_type(raw, cls)
            if member_type is MISSING:
                continue
            members.append(Member(name, member_type, MemberKind.METHOD, cls, is_property=True))
        elif inspect.isfunction(raw) and is_setter_name(name):
            member_type = _single_argument_type(raw, cls)
            if member_type is MISSING:
                continue
            members.append(Member(name, member_type, MemberKind.METHOD, cls))
    return members


def discover_public_attributes(tp: Any) -> List[Member]:
    """Public, non-``ClassVar`` annotated attributes across the MRO."""
    cls = target_class(tp)
    if not isinstance(cls, type):
        return []
    hints = resolve_hints(cls, cls)
    members = []
    for name in sorted(hints):
        if name.startswith("_"):
            continue
        hint = hints[name]
        if get_origin(hint) is typing.ClassVar or isinstance(hint, InitVar):
            continue
        try:
            raw = inspect.getattr_static(cls, name)
        except AttributeError:
            raw = None
        if isinstance(raw, (property, staticmethod, classmethod)) or inspect.isfunction(raw):
            continue
        members.append(Member(name, normalize(hint), MemberKind.FIELD, cls))
    return members


def discover_capabilities(tp: Any) -> List[Member]:
    """
    Invocable members of a capability set.

    Includes abstract dunder methods, dunder methods a protocol declares
    itself (e.g. ``__call__``), static and class methods and, for
    protocols, annotated attributes exposed as read-only properties.
    """
    cls = target_class(tp)
    abstract = getattr(cls, "__abstractmethods__", frozenset())
    found: Dict[str, Member] = {}

    for klass in reversed(cls.__mro__):
        if klass in _INTERFACE_ROOTS:
            continue
        is_protocol = getattr(klass, "_is_protocol", False)
        for name, raw in vars(klass).items():
            if name.startswith("_") and name not in abstract:
                if not (is_protocol and _is_declared_dunder(klass, name, raw)):
                    continue
            if isinstance(raw, property):
                return_type = _return_type(raw.fget, cls) if raw.fget else MISSING
                found[name] = Member(name, return_type, MemberKind.CAPABILITY, cls, is_property=True)
            elif isinstance(raw, (staticmethod, classmethod)):
                found[name] = Member(
                    name, _return_type(raw.__func__, cls), MemberKind.CAPABILITY, cls,
                    binding=type(raw),
                )
            elif inspect.isfunction(raw):
                found[name] = Member(name, _return_type(raw, cls), MemberKind.CAPABILITY, cls)

        if is_protocol:
            hints = resolve_hints(klass, cls)
            for name in inspect.get_annotations(klass):
                if name.startswith("_") or name in found:
                    continue
                found[name] = Member(
                    name, normalize(hints.get(name, MISSING)), MemberKind.CAPABILITY, cls,
                    is_property=True,
                )

    return [found[name] for name in sorted(found)]


def literal_values(tp: Any) -> Tuple[Any, ...]:
    return get_args(normalize(tp))


def union_arms(tp: Any) -> List[Any]:
    """Non-``None`` arms of a union, in declaration order."""
    return [normalize(arm) for arm in get_args(normalize(tp)) if arm is not NoneType]


# ============================================================================
# Helpers
# ============================================================================

def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_declared_dunder(klass: type, name: str, raw: Any) -> bool:
    """Dunder method written in the body of ``klass``, not protocol plumbing."""
    if not _is_dunder(name) or name in _PROTOCOL_PLUMBING:
        return False
    func = raw.__func__ if isinstance(raw, (staticmethod, classmethod)) else raw
    if not inspect.isfunction(func):
        return False
    return func.__qualname__ == f"{klass.__qualname__}.{name}"


def _return_type(func: Any, owner: Any) -> Any:
    hints = resolve_hints(func, owner)
    if "return" not in hints:
        return MISSING
    return normalize(hints["return"])


def _single_argument_type(func: Any, owner: Any) -> Any:
    """Type of the only argument after ``self``; MISSING if not a mutator."""
    try:
        params = list(inspect.signature(func).parameters.values())[1:]
    except (TypeError, ValueError):
        return MISSING
    if len(params) != 1:
        return MISSING
    param = params[0]
    if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
        return MISSING
    hints = resolve_hints(func, owner)
    if param.name not in hints:
        return MISSING
    return normalize(hints[param.name])


def _property_type(prop: property, owner: Any) -> Any:
    member_type = _single_argument_type(prop.fset, owner)
    if member_type is MISSING and prop.fget is not None:
        member_type = _return_type(prop.fget, owner)
    return member_type
