"""
Per-call construction stack used for cycle detection.
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional


class BlueprintSession:
    """
    Tracks the types currently under construction on one call path.

    A session is created per top-level materialization and must not be
    shared between concurrent calls.
    """
    __slots__ = ("stack",)

    def __init__(self):
        self.stack: List[Any] = []

    def push(self, tp: Any) -> bool:
        """
        Push ``tp`` onto the construction stack.

        Returns:
            False (and leaves the stack untouched) if ``tp`` is already
            under construction, True otherwise.
        """
        if self.contains(tp):
            return False
        self.stack.append(tp)
        return True

    def pop(self) -> Any:
        """Pop the most recently pushed type."""
        return self.stack.pop()

    def contains(self, tp: Any) -> bool:
        """Check if ``tp`` is currently being constructed (cycle)."""
        return tp in self.stack

    def last(self) -> Optional[Any]:
        """Type currently being constructed, if any."""
        return self.stack[-1] if self.stack else None

    def get_trace(self) -> List[Any]:
        """Get current construction trace for error messages."""
        return self.stack.copy()

    def cycle_path(self, tp: Any) -> List[Any]:
        """Path from the first occurrence of ``tp`` back to ``tp`` itself."""
        start = self.stack.index(tp) if tp in self.stack else 0
        return self.stack[start:] + [tp]

    @contextmanager
    def enter(self, tp: Any) -> Iterator["BlueprintSession"]:
        """Hold ``tp`` on the stack for the duration of the block."""
        self.stack.append(tp)
        try:
            yield self
        finally:
            self.stack.pop()

    def __len__(self) -> int:
        return len(self.stack)

    def __repr__(self) -> str:
        return f"BlueprintSession(depth={len(self.stack)})"
