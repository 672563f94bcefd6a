"""
Blueprint engine - classification-driven materialization.

``materialize`` resolves overrides first, then classifies the type and
dispatches through a closed handler table. Members are materialized
recursively through the same entry point; a ``BlueprintSession`` follows
the call path to catch cycles.
"""

import enum
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional

from . import check
from .containers import populate
from .delegate import build_delegate
from .diagnostics import BlueprintEventType
from .errors import BlueprintError, ConstructionFailedError, UnsupportedShapeError
from .session import BlueprintSession
from .shapes import (
    MISSING,
    Member,
    TypeShape,
    classify,
    discover_mutators,
    discover_public_attributes,
    initializer_members,
    literal_values,
    normalize,
    target_class,
    union_arms,
)
from .strategies.creation import CreationContext, CreationStrategy

if TYPE_CHECKING:
    from .configuration import Configuration

logger = logging.getLogger("blueprint.engine")


def materialize(tp: Any, config: "Configuration", session: Optional[BlueprintSession] = None) -> Any:
    """
    Produce a populated instance of ``tp``.

    Args:
        tp: Type descriptor (class, generic alias, Optional, Literal, ...)
        config: Configuration holding overrides and flags
        session: Construction stack of the current call path (fresh if None)

    Returns:
        Instance of ``tp``

    Raises:
        InvalidArgumentError: If ``tp`` or ``config`` is None
        UnsupportedShapeError: If ``tp`` has no safe construction path
        CycleDetectedError: If ``tp`` recurses into itself without a handler
        ConstructionFailedError: If an initializer or mutator raised
    """
    check.not_none(tp, "tp")
    check.not_none(config, "config")
    tp = check.hashable(normalize(tp), "tp")
    if session is None:
        session = BlueprintSession()

    strategy = config.find_creation_strategy_for_type(tp)
    if strategy is not None:
        config.diagnostics.emit(
            BlueprintEventType.OVERRIDE_APPLIED,
            target=tp,
            strategy=repr(strategy),
            depth=len(session),
        )
        return apply_strategy(strategy, CreationContext(tp, config, session))

    return materialize_structure(tp, config, session)


def materialize_structure(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    """Materialize ``tp`` by its shape, skipping the type-level override lookup."""
    check.not_none(tp, "tp")
    check.not_none(config, "config")
    tp = normalize(tp)

    if session.contains(tp):
        handler = config.find_cycle_handling_strategy(tp)
        config.diagnostics.emit(
            BlueprintEventType.CYCLE_DETECTED,
            target=tp,
            strategy=repr(handler),
            depth=len(session),
            metadata={"path": session.cycle_path(tp)},
        )
        return handler.handle_cycle(session, tp)

    shape = classify(tp)
    depth = len(session)
    with session.enter(tp), config.diagnostics.measure(target=tp, shape=shape.value, depth=depth):
        return _HANDLERS[shape](tp, config, session)


def enumeration(enum_type: type) -> Optional[enum.Enum]:
    """First declared member of ``enum_type``, or None when it has no members."""
    check.is_enum(enum_type, "enum_type")
    for member in enum_type:
        return member
    return None


def default_config() -> "Configuration":
    """Deterministic preset."""
    from .presets import default_configuration
    return default_configuration()


def random_config(seed: Optional[int] = None) -> "Configuration":
    """Randomized preset."""
    from .presets import random_configuration
    return random_configuration(seed)


# ============================================================================
# Shape handlers
# ============================================================================

def _materialize_primitive(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    return tp()


def _materialize_enum(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    return enumeration(tp)


def _materialize_array(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    return populate(tp, config, session)


def _materialize_capability_set(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    return build_delegate(tp, config)


def _materialize_abstract(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    raise UnsupportedShapeError(tp, "abstract class without a concrete implementation")


def _materialize_default_constructible(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    cls = target_class(tp)
    try:
        instance = cls()
    except BlueprintError:
        raise
    except Exception as exc:
        raise ConstructionFailedError(tp, exc) from exc

    _populate_members(instance, tp, config, session)
    return instance


def _materialize_parameterized(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    members = initializer_members(tp)
    if members is None:
        raise UnsupportedShapeError(tp, "initializer signature cannot be introspected")

    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for member in members:
        param = member.parameter
        if member.is_typed:
            value = _member_value(member, config, session)
        elif param.default is not inspect.Parameter.empty:
            if param.kind is not inspect.Parameter.POSITIONAL_ONLY:
                continue
            value = param.default
        else:
            raise UnsupportedShapeError(tp, f"initializer parameter '{member.name}' has no type annotation")

        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[member.name] = value

    cls = target_class(tp)
    try:
        instance = cls(*args, **kwargs)
    except BlueprintError:
        raise
    except Exception as exc:
        raise ConstructionFailedError(tp, exc) from exc

    _populate_members(instance, tp, config, session, skip=[member.name for member in members])
    return instance


def _materialize_union(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    arms = union_arms(tp)
    if not arms:
        return None
    return materialize(arms[0], config, session)


def _materialize_literal(tp: Any, config: "Configuration", session: BlueprintSession) -> Any:
    values = literal_values(tp)
    return values[0] if values else None


_HANDLERS: Dict[TypeShape, Callable[[Any, "Configuration", BlueprintSession], Any]] = {
    TypeShape.PRIMITIVE: _materialize_primitive,
    TypeShape.ENUM: _materialize_enum,
    TypeShape.ARRAY: _materialize_array,
    TypeShape.CAPABILITY_SET: _materialize_capability_set,
    TypeShape.ABSTRACT: _materialize_abstract,
    TypeShape.DEFAULT_CONSTRUCTIBLE: _materialize_default_constructible,
    TypeShape.PARAMETERIZED_CONSTRUCTIBLE: _materialize_parameterized,
    TypeShape.UNION: _materialize_union,
    TypeShape.LITERAL: _materialize_literal,
}


# ============================================================================
# Members
# ============================================================================

def _populate_members(
    instance: Any,
    tp: Any,
    config: "Configuration",
    session: BlueprintSession,
    skip: Iterable[str] = (),
) -> None:
    """Fill mutators and, when enabled, public attributes not set by the initializer."""
    members = discover_mutators(tp)
    if config.public_attributes:
        skipped = set(skip)
        members += [member for member in discover_public_attributes(tp) if member.name not in skipped]

    for member in members:
        value = _member_value(member, config, session)
        try:
            member.assign(instance, value)
        except BlueprintError:
            raise
        except Exception as exc:
            raise ConstructionFailedError(tp, exc, member.name) from exc
        logger.debug(f"Populated {type(instance).__name__}.{member.name}")


def _member_value(member: Member, config: "Configuration", session: BlueprintSession) -> Any:
    strategy = config.find_creation_strategy_for_member(member)
    if strategy is not None:
        config.diagnostics.emit(
            BlueprintEventType.OVERRIDE_APPLIED,
            target=member.owner,
            member=member.name,
            strategy=repr(strategy),
            depth=len(session),
        )
        return apply_strategy(strategy, CreationContext(member.type, config, session, member))

    if member.type is MISSING:
        raise UnsupportedShapeError(member.owner, f"member '{member.name}' has no type annotation")
    return materialize(member.type, config, session)


def apply_strategy(strategy: CreationStrategy, ctx: CreationContext) -> Any:
    """Run a creation strategy, wrapping foreign exceptions in ``ConstructionFailedError``."""
    try:
        return strategy.create_value(ctx)
    except BlueprintError:
        raise
    except Exception as exc:
        member = ctx.member.name if ctx.member is not None else None
        raise ConstructionFailedError(ctx.expected_type, exc, member) from exc
