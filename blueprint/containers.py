"""
Container population.

Used by the engine for ``ARRAY`` shapes and exposed for tests that need
a handful of blueprinted values at once.
"""

import collections
from typing import TYPE_CHECKING, Any, Dict, List, MutableMapping, Optional, Set, get_args, get_origin

from . import check
from .errors import UnsupportedShapeError
from .session import BlueprintSession
from .shapes import MAPPING_ORIGINS, SEQUENCE_ORIGINS, normalize

if TYPE_CHECKING:
    from .configuration import Configuration


def array_length(config: "Configuration") -> int:
    """Random length in ``[1, config.max_array_size]``."""
    return config.random_source.randint(1, config.max_array_size)


def populate(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    """Build a parameterized sequence, set or mapping alias."""
    if get_origin(normalize(tp)) in MAPPING_ORIGINS:
        return populate_mapping(tp, config, session)
    return populate_sequence(tp, config, session)


def populate_sequence(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    """
    Build ``list[X]``, ``set[X]``, ``tuple[X, ...]``, ``tuple[X, Y]`` and friends.

    Fixed-arity tuples get one value per position; every other sequence gets
    ``array_length(config)`` elements. Sets may come out shorter when
    elements collide but are never empty.
    """
    from .engine import materialize

    tp = normalize(tp)
    origin = get_origin(tp)
    concrete = SEQUENCE_ORIGINS[origin]
    args = get_args(tp)

    if not args:
        return concrete()

    if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
        return tuple(materialize(arg, config, session) for arg in args)

    element_type = args[0]
    values = [materialize(element_type, config, session) for _ in range(array_length(config))]
    try:
        return concrete(values)
    except TypeError as exc:
        raise UnsupportedShapeError(tp, f"elements are not hashable: {exc}") from exc


def populate_mapping(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    """Build ``dict[K, V]`` and other mapping aliases with random length."""
    from .engine import materialize

    tp = normalize(tp)
    concrete = MAPPING_ORIGINS[get_origin(tp)]
    args = get_args(tp)

    if len(args) != 2:
        return concrete()

    key_type, value_type = args
    items: Dict[Any, Any] = {}
    for _ in range(array_length(config)):
        key = materialize(key_type, config, session)
        value = materialize(value_type, config, session)
        try:
            items[key] = value
        except TypeError as exc:
            raise UnsupportedShapeError(tp, f"keys are not hashable: {exc}") from exc

    if concrete is collections.defaultdict:
        return collections.defaultdict(None, items)
    return concrete(items)


# ============================================================================
# Helpers for tests
# ============================================================================

def add_many(collection: Any, tp: Any, count: int, config: "Configuration") -> Any:
    """
    Add ``count`` blueprinted values of ``tp`` to ``collection``.

    Works with anything that has ``append`` or ``add``.

    Returns:
        The same collection
    """
    from .engine import materialize

    check.not_none(collection, "collection")
    check.not_negative(count, "count")

    if hasattr(collection, "append"):
        put = collection.append
    elif hasattr(collection, "add"):
        put = collection.add
    else:
        raise UnsupportedShapeError(type(collection), "collection has neither append() nor add()")

    for _ in range(count):
        put(materialize(tp, config))
    return collection


def list_of(tp: Any, count: int, config: "Configuration") -> List[Any]:
    return add_many([], tp, count, config)


def set_of(tp: Any, count: int, config: "Configuration") -> Set[Any]:
    """Up to ``count`` distinct values; equal values collapse."""
    return add_many(set(), tp, count, config)


def dict_of(
    key_tp: Any,
    value_tp: Any,
    count: int,
    config: "Configuration",
    into: Optional[MutableMapping[Any, Any]] = None,
) -> MutableMapping[Any, Any]:
    """Up to ``count`` blueprinted entries; equal keys collapse."""
    from .engine import materialize

    check.not_negative(count, "count")
    result = {} if into is None else into
    for _ in range(count):
        result[materialize(key_tp, config)] = materialize(value_tp, config)
    return result
