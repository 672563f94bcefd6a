"""
Cycle-handling strategies - invoked when a type recurses into itself.
"""

from typing import Any

from .. import check
from ..errors import CycleDetectedError
from ..session import BlueprintSession
from ..shapes import normalize


class CycleHandlingStrategy:
    """
    Policy for one type when the session detects it is already under
    construction.
    """

    __slots__ = ("type",)

    def __init__(self, tp: Any):
        self.type = normalize(check.not_none(tp, "tp"))

    def handle_cycle(self, session: BlueprintSession, tp: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__}.handle_cycle() is not implemented")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type!r})"


class RaisingCycleHandlingStrategy(CycleHandlingStrategy):
    """Default policy: the cycle is fatal."""

    def handle_cycle(self, session: BlueprintSession, tp: Any) -> Any:
        raise CycleDetectedError(session.cycle_path(tp))


class ValueCycleHandlingStrategy(CycleHandlingStrategy):
    """Break the cycle with a fixed value (``None`` by default)."""

    __slots__ = ("value",)

    def __init__(self, tp: Any, value: Any = None):
        super().__init__(tp)
        self.value = value

    def handle_cycle(self, session: BlueprintSession, tp: Any) -> Any:
        return self.value
