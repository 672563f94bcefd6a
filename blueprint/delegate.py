"""
Capability-set delegates.

A capability set (a Protocol, or an ABC with only abstract members) has
no implementation to instantiate. ``build_delegate`` creates a subclass
whose every capability is a closure bound to the configuration; the
return value is materialized on invocation, never up front.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .diagnostics import BlueprintEventType
from .errors import UnsupportedShapeError
from .session import BlueprintSession
from .shapes import MISSING, Member, NoneType, discover_capabilities, target_class
from .strategies.creation import CreationContext

if TYPE_CHECKING:
    from .configuration import Configuration

logger = logging.getLogger("blueprint.delegate")

_CACHE_ATTR = "_blueprint_cache"


class InvocationHandler:
    """Produces the return value of a capability invocation."""

    def invoke(self, delegate: Any, member: Member, config: "Configuration") -> Any:
        raise NotImplementedError(f"{type(self).__name__}.invoke() is not implemented")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RefreshingInvocationHandler(InvocationHandler):
    """
    Compute a fresh value on every invocation.

    Each invocation is its own top-level materialization and gets a new
    session: it runs long after the original construction walk finished.
    """

    def invoke(self, delegate: Any, member: Member, config: "Configuration") -> Any:
        from .engine import apply_strategy, materialize

        session = BlueprintSession()
        strategy = config.find_creation_strategy_for_method(member)
        if strategy is not None:
            return apply_strategy(strategy, CreationContext(member.type, config, session, member))

        if member.type is MISSING or member.type is NoneType:
            return None
        return materialize(member.type, config, session)


class CachedInvocationHandler(RefreshingInvocationHandler):
    """Compute once per delegate and capability, then return the same value."""

    def __init__(self):
        self._lock = threading.Lock()

    def invoke(self, delegate: Any, member: Member, config: "Configuration") -> Any:
        with self._lock:
            cache: Dict[str, Any] = vars(delegate).setdefault(_CACHE_ATTR, {})
            if member.name in cache:
                return cache[member.name]

        value = super().invoke(delegate, member, config)

        with self._lock:
            return cache.setdefault(member.name, value)


def _capability(
    member: Member,
    config: "Configuration",
    handler: InvocationHandler,
    instance: Callable[[], Any],
) -> Any:
    diagnostics = config.diagnostics

    def call(delegate):
        diagnostics.emit(
            BlueprintEventType.DELEGATE_INVOCATION,
            target=member.owner,
            member=member.name,
            strategy=repr(handler),
        )
        return handler.invoke(delegate, member, config)

    if member.binding is staticmethod:
        def invoke(*args, **kwargs):
            return call(instance())
    elif member.binding is classmethod:
        def invoke(cls, *args, **kwargs):
            return call(instance())
    else:
        def invoke(self, *args, **kwargs):
            return call(self)

    invoke.__name__ = member.name
    invoke.__qualname__ = f"{member.owner.__qualname__}.{member.name}"

    if member.is_property:
        return property(invoke)
    if member.binding is not None:
        return member.binding(invoke)
    return invoke


def build_delegate(
    tp: Any,
    config: "Configuration",
    handler: Optional[InvocationHandler] = None,
) -> Any:
    """
    Build an instance of ``tp`` that answers every capability lazily.

    Static and class capabilities answer on behalf of the built instance.

    Args:
        tp: Capability-set type
        config: Configuration bound into every capability
        handler: Invocation handler (defaults to the one registered for ``tp``)

    Returns:
        Delegate instance; ``isinstance(delegate, tp)`` holds

    Raises:
        UnsupportedShapeError: If an abstract member cannot be delegated
    """
    iface = target_class(tp)
    if handler is None:
        handler = config.find_invocation_handler(iface)

    built: List[Any] = []
    capabilities = discover_capabilities(tp)
    namespace: Dict[str, Any] = {
        "__module__": iface.__module__,
        "__repr__": lambda self: f"<{type(self).__name__} delegate>",
    }
    for member in capabilities:
        namespace[member.name] = _capability(member, config, handler, lambda: built[0])

    delegate_cls = type(f"{iface.__name__}Blueprint", (iface,), namespace)
    remaining = sorted(getattr(delegate_cls, "__abstractmethods__", ()))
    if remaining:
        raise UnsupportedShapeError(tp, f"abstract members cannot be delegated: {', '.join(remaining)}")

    logger.debug(f"Built delegate {delegate_cls.__name__} with {len(capabilities)} capabilities")
    built.append(object.__new__(delegate_cls))
    return built[0]
